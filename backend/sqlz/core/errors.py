"""
Error taxonomy for statement execution and transactions.

Every error wraps the backend exception (``.cause``, also chained as
``__cause__``) and statement errors carry the SQL text for diagnosis.
"""

from __future__ import annotations

import json


class SqlzError(Exception):
    """Base class for all sqlz errors."""

    action = "sqlz"

    def __init__(self, cause: BaseException) -> None:
        super().__init__(cause)
        self.cause = cause
        # Errors written into an Outcome slot are never raised, so chain explicitly.
        self.__cause__ = cause

    def __str__(self) -> str:
        return f"{self.action}: {self.cause}"


class StatementError(SqlzError):
    """A statement-level failure; ``sql`` is the full text that was sent."""

    def __init__(self, sql: str, cause: BaseException) -> None:
        super().__init__(cause)
        self.sql = sql

    def __str__(self) -> str:
        return f"{self.action}; sql={json.dumps(self.sql)}: {self.cause}"


class ExecutionError(StatementError):
    action = "execute statement"


class QueryError(StatementError):
    action = "execute query"


class ScanError(StatementError):
    action = "scan row"


class CloseError(StatementError):
    action = "close rows"


class IterationError(StatementError):
    action = "iterate rows"


class TxError(SqlzError):
    """A transaction lifecycle failure."""


class BeginError(TxError):
    action = "begin tx"


class CommitError(TxError):
    action = "commit tx"


class NoRowsError(LookupError):
    """Raised by a single-row scan when the query returned nothing."""

    def __init__(self, msg: str = "no rows in result set") -> None:
        super().__init__(msg)


class ScanConversionError(ValueError):
    """Raised when a result column cannot be stored into its scan target."""

    pass


class TxDoneError(RuntimeError):
    """Raised when a transaction is used after commit or rollback."""

    def __init__(
        self, msg: str = "transaction has already been committed or rolled back"
    ) -> None:
        super().__init__(msg)


class DeadlineExceeded(TimeoutError):
    """Raised when a Context deadline passed before a backend round trip."""

    def __init__(self, msg: str = "context deadline exceeded") -> None:
        super().__init__(msg)


class Cancelled(RuntimeError):
    """Raised when a Context was cancelled before a backend round trip."""

    def __init__(self, msg: str = "context canceled") -> None:
        super().__init__(msg)

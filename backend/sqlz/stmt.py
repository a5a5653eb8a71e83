"""
Fluent SQL statement builder.

A Stmt accumulates SQL text plus two positional lists: bind arguments (input)
and scan targets (output). Mutators return the same instance:

    a, b = Var(int), Var(str)
    Stmt("select").append("a,").scan(a).append("b,").scan(b).trim(",") \\
        .append("from foo where id = ?").bind(7) \\
        .fetch_one(conn)
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from sqlz.core.context import Context
from sqlz.core.errors import (
    CloseError,
    ExecutionError,
    IterationError,
    QueryError,
    ScanError,
)
from sqlz.interfaces import Executor, Queryer, Rows

_log = logging.getLogger(__name__)


class Stmt:
    """A SQL statement under construction. Not safe for concurrent mutation."""

    def __init__(self, sql_frag: str) -> None:
        # sql_frag must be non-empty.
        self._sql = sql_frag
        self._last_char = sql_frag[-1]
        self._args: list[Any] = []
        self._targets: list[Any] = []

    @property
    def sql(self) -> str:
        return self._sql

    def append(self, sql_frag: str) -> Stmt:
        """Append a fragment, separated by one space unless the text already ends in one."""
        if self._sql and self._last_char != " ":
            self._sql += " "
        self._sql += sql_frag
        self._last_char = sql_frag[-1]
        return self

    def trim(self, sql_frag: str) -> Stmt:
        """Remove sql_frag from the end of the text if it is there; otherwise do nothing."""
        if sql_frag and self._sql.endswith(sql_frag):
            self._sql = self._sql[: -len(sql_frag)]
            self._last_char = self._sql[-1:]
        return self

    def bind(self, *args: Any) -> Stmt:
        """Add input arguments, matched to placeholders in order."""
        self._args.extend(args)
        return self

    def scan(self, *targets: Any) -> Stmt:
        """Add output targets, matched to result columns in order."""
        self._targets.extend(targets)
        return self

    def count_args(self) -> int:
        return len(self._args)

    def count_targets(self) -> int:
        return len(self._targets)

    def execute(self, executor: Executor, ctx: Context | None = None) -> Any:
        """Run the statement; returns the executor's result descriptor as is."""
        ctx = ctx if ctx is not None else Context.background()
        sql = self._sql
        _log.debug("execute statement: %s (args=%d)", sql, len(self._args))
        try:
            return executor.execute(ctx, sql, list(self._args))
        except Exception as e:
            raise ExecutionError(sql, e) from e

    def fetch_one(self, queryer: Queryer, ctx: Context | None = None) -> None:
        """Run the statement as a query and scan its single row into the targets."""
        ctx = ctx if ctx is not None else Context.background()
        sql = self._sql
        _log.debug("query row: %s (args=%d)", sql, len(self._args))
        try:
            row = queryer.query_row(ctx, sql, list(self._args))
        except Exception as e:
            raise QueryError(sql, e) from e
        try:
            row.scan(self._targets)
        except Exception as e:
            raise ScanError(sql, e) from e

    def fetch_each(
        self,
        queryer: Queryer,
        callback: Callable[[], bool],
        ctx: Context | None = None,
    ) -> None:
        """
        Run the statement as a query; scan each row into the targets, then call callback().

        Iteration stops as soon as callback returns a falsy value. The cursor is
        closed exactly once. Errors, highest precedence first: ScanError,
        CloseError, IterationError.
        """
        ctx = ctx if ctx is not None else Context.background()
        sql = self._sql
        _log.debug("query rows: %s (args=%d)", sql, len(self._args))
        try:
            rows = queryer.query(ctx, sql, list(self._args))
        except Exception as e:
            raise QueryError(sql, e) from e

        try:
            while rows.next():
                try:
                    rows.scan(self._targets)
                except Exception as e:
                    raise ScanError(sql, e) from e
                if not callback():
                    break
        except BaseException:
            _close_quiet(rows, sql)
            raise

        try:
            rows.close()
        except Exception as e:
            raise CloseError(sql, e) from e
        err = rows.err()
        if err is not None:
            raise IterationError(sql, err) from err

    def __repr__(self) -> str:
        return (
            f"Stmt({self._sql!r}, args={len(self._args)}, targets={len(self._targets)})"
        )


def _close_quiet(rows: Rows, sql: str) -> None:
    try:
        rows.close()
    except Exception as e:
        _log.warning("discarding close error after failed iteration: %s. SQL: %s", e, sql)

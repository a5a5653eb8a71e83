"""
sqlz: fluent SQL statement builder and transaction guard.

Exports: Stmt, Var, begin_tx, transaction, TxGuard, Outcome, Context, TxOptions,
IsolationLevel, and the error classes.
"""

from sqlz.core.context import Context
from sqlz.core.errors import (
    BeginError,
    Cancelled,
    CloseError,
    CommitError,
    DeadlineExceeded,
    ExecutionError,
    IterationError,
    NoRowsError,
    QueryError,
    ScanConversionError,
    ScanError,
    SqlzError,
    StatementError,
    TxDoneError,
    TxError,
)
from sqlz.models import IsolationLevel, TxOptions
from sqlz.scan import Var
from sqlz.stmt import Stmt
from sqlz.tx import Outcome, TxGuard, begin_tx, transaction

__all__ = [
    "Stmt",
    "Var",
    "begin_tx",
    "transaction",
    "TxGuard",
    "Outcome",
    "Context",
    "TxOptions",
    "IsolationLevel",
    "SqlzError",
    "StatementError",
    "ExecutionError",
    "QueryError",
    "ScanError",
    "CloseError",
    "IterationError",
    "TxError",
    "BeginError",
    "CommitError",
    "NoRowsError",
    "ScanConversionError",
    "TxDoneError",
    "DeadlineExceeded",
    "Cancelled",
]

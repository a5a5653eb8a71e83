"""
Transaction guard: commit on success, roll back on a reported error or an exception.

Two forms share one cleanup step:

    outcome = Outcome()
    tx, close_tx = begin_tx(conn, outcome)
    try:
        ...
        outcome.error = err           # report a failure -> rollback
    finally:
        close_tx()                    # unwinding or outcome.error -> rollback, else commit
    # outcome.error now holds CommitError if the commit failed

    with transaction(conn) as guard:
        Stmt("update foo set a = ?").bind(1).execute(guard.tx)
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from types import TracebackType

from sqlz.core.context import Context
from sqlz.core.errors import BeginError, CommitError
from sqlz.interfaces import Connection, Tx
from sqlz.models import TxOptions

_log = logging.getLogger(__name__)

# Default for close_tx(exc): take the in-flight exception from sys.exc_info().
_FROM_EXC_INFO = BaseException()


class Outcome:
    """Caller-owned slot for the transactional operation's final error."""

    __slots__ = ("error",)

    def __init__(self, error: BaseException | None = None) -> None:
        self.error = error

    def __repr__(self) -> str:
        return f"Outcome(error={self.error!r})"


def begin_tx(
    conn: Connection,
    outcome: Outcome,
    options: TxOptions | None = None,
    ctx: Context | None = None,
) -> tuple[Tx, Callable[..., None]]:
    """
    Open a transaction on conn. Returns (tx, close_tx).

    close_tx() must be called exactly once on every exit path, typically from a
    finally clause. Without an argument it detects an exception propagating
    through that clause; close_tx(exc) names it explicitly and close_tx(None)
    declares a normal exit. When unwinding it rolls back and never raises the
    exception, so the caller keeps propagating.
    """
    ctx = ctx if ctx is not None else Context.background()
    try:
        tx = conn.begin_tx(ctx, options)
    except Exception as e:
        raise BeginError(e) from e
    _log.debug("begin tx (options=%s)", options)

    done = False

    def close_tx(exc: BaseException | None = _FROM_EXC_INFO) -> None:
        nonlocal done
        if done:
            raise RuntimeError("close_tx called more than once")
        done = True
        if exc is _FROM_EXC_INFO:
            exc = sys.exc_info()[1]
        if exc is not None:
            _rollback_quiet(tx, exc)
            return
        if outcome.error is not None:
            _rollback_quiet(tx, outcome.error)
            return
        try:
            tx.commit()
        except Exception as e:
            outcome.error = CommitError(e)
            return
        _log.debug("commit tx")

    return tx, close_tx


def _rollback_quiet(tx: Tx, reason: BaseException) -> None:
    _log.debug("rollback tx: %r", reason)
    try:
        tx.rollback()
    except Exception as e:
        _log.warning("discarding rollback error: %s (rolled back because of: %r)", e, reason)


class TxGuard:
    """
    Context-manager form of begin_tx.

    Exceptions raised inside the block roll back and propagate. Calling fail(err)
    (or setting outcome.error) rolls back without raising. A failed commit is
    written to the outcome and raised from the with statement.
    """

    def __init__(
        self,
        conn: Connection,
        options: TxOptions | None = None,
        ctx: Context | None = None,
        outcome: Outcome | None = None,
    ) -> None:
        self._conn = conn
        self._options = options
        self._ctx = ctx
        self.outcome = outcome if outcome is not None else Outcome()
        self._tx: Tx | None = None
        self._close_tx: Callable[..., None] | None = None

    @property
    def tx(self) -> Tx:
        if self._tx is None:
            raise RuntimeError("transaction has not been started")
        return self._tx

    @property
    def error(self) -> BaseException | None:
        return self.outcome.error

    def fail(self, err: BaseException) -> None:
        self.outcome.error = err

    def __enter__(self) -> TxGuard:
        self._tx, self._close_tx = begin_tx(
            self._conn, self.outcome, self._options, self._ctx
        )
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> bool:
        if self._close_tx is None:
            raise RuntimeError("transaction has not been started")
        if exc is not None:
            self._close_tx(exc)
            return False
        reported = self.outcome.error
        self._close_tx(None)
        if reported is None and self.outcome.error is not None:
            raise self.outcome.error
        return False


def transaction(
    conn: Connection,
    options: TxOptions | None = None,
    ctx: Context | None = None,
    outcome: Outcome | None = None,
) -> TxGuard:
    return TxGuard(conn, options=options, ctx=ctx, outcome=outcome)

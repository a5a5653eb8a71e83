"""
DB-API 2.0 (PEP 249) adapter: makes a psycopg, pymysql or sqlite3 connection
usable as a sqlz Executor, Queryer and Connection.

Outside a transaction each statement is committed as soon as it completes, so
the connection never sits idle inside an implicit transaction. Inside one,
commit/rollback are left to the DBAPITx handle.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from sqlz.core.context import Context
from sqlz.core.errors import NoRowsError, TxDoneError
from sqlz.models import ProductTypeEnum, TxOptions
from sqlz.scan import assign

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Result:
    """What a DML statement reports: affected row count (-1 if unknown) and last generated id."""

    rows_affected: int
    last_insert_id: int | None = None


class DBAPIRow:
    """A single-row result; scan() consumes it and releases the cursor."""

    def __init__(self, cursor: Any, on_close: Callable[[bool], None]) -> None:
        self._cur = cursor
        self._on_close = on_close

    def scan(self, targets: Sequence[Any]) -> None:
        ok = False
        try:
            row = self._cur.fetchone()
            if row is None:
                raise NoRowsError()
            assign(targets, row)
            ok = True
        finally:
            _close_quiet(self._cur)
            self._on_close(ok)


class DBAPIRows:
    """A multi-row cursor. Fetch failures end iteration and are reported by err()."""

    def __init__(self, cursor: Any, on_close: Callable[[bool], None]) -> None:
        self._cur = cursor
        self._on_close = on_close
        self._row: Sequence[Any] | None = None
        self._err: BaseException | None = None
        self._closed = False

    def next(self) -> bool:
        if self._closed or self._err is not None:
            return False
        try:
            row = self._cur.fetchone()
        except Exception as e:
            self._err = e
            self._row = None
            return False
        self._row = row
        return row is not None

    def scan(self, targets: Sequence[Any]) -> None:
        if self._closed:
            raise RuntimeError("rows are closed")
        if self._row is None:
            raise RuntimeError("scan called without calling next")
        assign(targets, self._row)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self._cur.close()
        finally:
            self._on_close(self._err is None)

    def err(self) -> BaseException | None:
        return self._err


class DBAPIConnection:
    """
    Wrap a PEP 249 connection.

    - product_type: selects the statement-timeout and SET TRANSACTION dialect.
    """

    def __init__(self, conn: Any, product_type: ProductTypeEnum) -> None:
        self._conn = conn
        self.product_type = product_type
        self._tx: DBAPITx | None = None

    @property
    def raw(self) -> Any:
        return self._conn

    @property
    def in_transaction(self) -> bool:
        return self._tx is not None

    # ------------------------------------------------------------------
    # Executor / Queryer
    # ------------------------------------------------------------------

    def execute(self, ctx: Context | None, sql: str, args: Sequence[Any]) -> Result:
        cur = self._run(ctx, sql, args)
        try:
            rc = cur.rowcount if cur.rowcount is not None else -1
            result = Result(rows_affected=rc, last_insert_id=getattr(cur, "lastrowid", None))
        finally:
            _close_quiet(cur)
        self._finish(True)
        return result

    def query_row(self, ctx: Context | None, sql: str, args: Sequence[Any]) -> DBAPIRow:
        return DBAPIRow(self._run(ctx, sql, args), self._finish)

    def query(self, ctx: Context | None, sql: str, args: Sequence[Any]) -> DBAPIRows:
        return DBAPIRows(self._run(ctx, sql, args), self._finish)

    # ------------------------------------------------------------------
    # Connection
    # ------------------------------------------------------------------

    def begin_tx(self, ctx: Context | None, options: TxOptions | None = None) -> DBAPITx:
        if self._tx is not None:
            raise RuntimeError("a transaction is already in progress on this connection")
        ctx = ctx if ctx is not None else Context.background()
        ctx.check()
        stmts = self._begin_statements(options or TxOptions())
        try:
            for stmt in stmts:
                cur = self._conn.cursor()
                try:
                    cur.execute(stmt)
                finally:
                    _close_quiet(cur)
        except Exception:
            # Earlier statements may have opened an implicit transaction.
            self._finish(False)
            raise
        self._tx = DBAPITx(self)
        return self._tx

    def close(self) -> None:
        self._conn.close()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _begin_statements(self, options: TxOptions) -> list[str]:
        pt = self.product_type
        if pt == ProductTypeEnum.SQLITE:
            if options.isolation is not None or options.read_only:
                raise ValueError("sqlite does not support isolation level or read-only options")
            return ["BEGIN"]
        stmts: list[str] = []
        if options.isolation is not None:
            stmts.append(f"SET TRANSACTION ISOLATION LEVEL {options.isolation.value}")
        if options.read_only:
            stmts.append("SET TRANSACTION READ ONLY")
        return stmts

    def _run(self, ctx: Context | None, sql: str, args: Sequence[Any]) -> Any:
        """Execute sql and return the open cursor. Applies ctx's statement timeout around it."""
        ctx = ctx if ctx is not None else Context.background()
        ctx.check()
        timeout_sec = ctx.statement_timeout()
        if timeout_sec is not None:
            self._set_timeout(timeout_sec)
        cur = self._conn.cursor()
        try:
            try:
                if args:
                    cur.execute(sql, tuple(args))
                else:
                    cur.execute(sql)
            finally:
                if timeout_sec is not None:
                    self._reset_timeout()
        except Exception:
            _close_quiet(cur)
            self._finish(False)
            raise
        return cur

    def _finish(self, ok: bool) -> None:
        """End the implicit transaction of a statement run outside begin_tx."""
        if self._tx is not None:
            return
        if ok:
            self._conn.commit()
        else:
            try:
                self._conn.rollback()
            except Exception:
                pass

    def _set_timeout(self, timeout_sec: float) -> None:
        timeout_ms = max(1, int(timeout_sec * 1000))
        if self.product_type == ProductTypeEnum.POSTGRES:
            self._set(f"SET statement_timeout = {timeout_ms}")
        elif self.product_type == ProductTypeEnum.MYSQL:
            self._set(f"SET SESSION max_execution_time = {timeout_ms}")

    def _reset_timeout(self) -> None:
        try:
            if self.product_type == ProductTypeEnum.POSTGRES:
                self._set("SET statement_timeout = 0")
            elif self.product_type == ProductTypeEnum.MYSQL:
                self._set("SET SESSION max_execution_time = 0")
        except Exception as e:
            _log.warning("failed to reset statement timeout: %s", e)

    def _set(self, sql: str) -> None:
        cur = self._conn.cursor()
        try:
            cur.execute(sql)
        finally:
            _close_quiet(cur)


class DBAPITx:
    """Transaction handle returned by DBAPIConnection.begin_tx."""

    def __init__(self, owner: DBAPIConnection) -> None:
        self._owner = owner
        self._done = False

    def _check(self) -> None:
        if self._done:
            raise TxDoneError()

    def execute(self, ctx: Context | None, sql: str, args: Sequence[Any]) -> Result:
        self._check()
        return self._owner.execute(ctx, sql, args)

    def query_row(self, ctx: Context | None, sql: str, args: Sequence[Any]) -> DBAPIRow:
        self._check()
        return self._owner.query_row(ctx, sql, args)

    def query(self, ctx: Context | None, sql: str, args: Sequence[Any]) -> DBAPIRows:
        self._check()
        return self._owner.query(ctx, sql, args)

    def commit(self) -> None:
        self._end(self._owner.raw.commit)

    def rollback(self) -> None:
        self._end(self._owner.raw.rollback)

    def _end(self, fn: Callable[[], None]) -> None:
        self._check()
        self._done = True
        try:
            fn()
        finally:
            self._owner._tx = None


def _close_quiet(cur: Any) -> None:
    try:
        cur.close()
    except Exception:
        pass

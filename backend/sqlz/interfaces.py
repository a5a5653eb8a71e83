"""
Capability boundaries sqlz consumes from a backend.

``sqlz.core.driver`` implements them over DB-API 2.0 connections; any other
object with the same methods works too.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

from sqlz.core.context import Context
from sqlz.models import TxOptions


class Executor(Protocol):
    def execute(self, ctx: Context, sql: str, args: Sequence[Any]) -> Any: ...


class Row(Protocol):
    def scan(self, targets: Sequence[Any]) -> None: ...


class Rows(Protocol):
    def next(self) -> bool: ...
    def scan(self, targets: Sequence[Any]) -> None: ...
    def close(self) -> None: ...
    def err(self) -> BaseException | None: ...


class Queryer(Protocol):
    def query_row(self, ctx: Context, sql: str, args: Sequence[Any]) -> Row: ...
    def query(self, ctx: Context, sql: str, args: Sequence[Any]) -> Rows: ...


@runtime_checkable
class Tx(Executor, Queryer, Protocol):
    def commit(self) -> None: ...
    def rollback(self) -> None: ...


@runtime_checkable
class Connection(Protocol):
    def begin_tx(self, ctx: Context, options: TxOptions | None) -> Tx: ...

"""Scripted fake backend objects for Stmt and transaction tests."""

from collections.abc import Sequence
from typing import Any

from sqlz.scan import assign


class FakeRow:
    def __init__(self, values: Sequence[Any] | None, scan_error: Exception | None = None) -> None:
        self.values = values
        self.scan_error = scan_error

    def scan(self, targets: Sequence[Any]) -> None:
        if self.scan_error is not None:
            raise self.scan_error
        if self.values is None:
            raise LookupError("no rows in result set")
        assign(targets, self.values)


class FakeRows:
    """
    Delivers ``data`` row by row.

    - scan_error_at: index of the row whose scan fails with scan_error.
    - close_error: raised by close().
    - row_error: deferred error reported by err() once data is exhausted.
    """

    def __init__(
        self,
        data: Sequence[Sequence[Any]],
        *,
        scan_error_at: int | None = None,
        scan_error: Exception | None = None,
        close_error: Exception | None = None,
        row_error: Exception | None = None,
    ) -> None:
        self.data = list(data)
        self.scan_error_at = scan_error_at
        self.scan_error = scan_error or ValueError("bad column")
        self.close_error = close_error
        self.row_error = row_error
        self.pos = -1
        self.scans = 0
        self.close_calls = 0
        self._err: Exception | None = None

    def next(self) -> bool:
        if self.pos + 1 >= len(self.data):
            self._err = self.row_error
            return False
        self.pos += 1
        return True

    def scan(self, targets: Sequence[Any]) -> None:
        self.scans += 1
        if self.scan_error_at == self.pos:
            raise self.scan_error
        assign(targets, self.data[self.pos])

    def close(self) -> None:
        self.close_calls += 1
        if self.close_error is not None:
            raise self.close_error

    def err(self) -> Exception | None:
        return self._err

"""
Execution context: the caller's deadline and cancellation signal.

Backends call ``check()`` before every round trip and use
``statement_timeout()`` to bound the statement on the server side.
"""

from __future__ import annotations

import threading
import time

from sqlz.core.config import settings
from sqlz.core.errors import Cancelled, DeadlineExceeded


class Context:
    """
    Deadline/cancellation carrier passed into every execution call.

    - timeout: seconds from now until the deadline; None means no deadline.
    """

    def __init__(self, timeout: float | None = None) -> None:
        self._deadline: float | None = (
            time.monotonic() + timeout if timeout is not None else None
        )
        self._cancelled = threading.Event()

    @classmethod
    def background(cls) -> Context:
        """A context with no deadline that is never cancelled by sqlz itself."""
        return cls()

    @property
    def deadline(self) -> float | None:
        return self._deadline

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def expired(self) -> bool:
        return self._deadline is not None and time.monotonic() >= self._deadline

    def cancel(self) -> None:
        self._cancelled.set()

    def remaining(self) -> float | None:
        """Seconds left before the deadline (never negative), or None without a deadline."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def check(self) -> None:
        if self.cancelled:
            raise Cancelled()
        if self.expired:
            raise DeadlineExceeded()

    def statement_timeout(self) -> float | None:
        """Timeout to apply to the next statement: remaining time, else SQLZ_STATEMENT_TIMEOUT."""
        left = self.remaining()
        if left is not None:
            return left
        default = settings.SQLZ_STATEMENT_TIMEOUT
        if default is not None and default > 0:
            return float(default)
        return None

    def __repr__(self) -> str:
        return f"Context(remaining={self.remaining()!r}, cancelled={self.cancelled!r})"

"""Unit tests for core.context."""

from unittest.mock import patch

import pytest

from sqlz.core.context import Context
from sqlz.core.errors import Cancelled, DeadlineExceeded


def test_background_has_no_deadline() -> None:
    ctx = Context.background()
    assert ctx.deadline is None
    assert ctx.remaining() is None
    ctx.check()


def test_expired_deadline() -> None:
    ctx = Context(timeout=0)
    assert ctx.expired is True
    assert ctx.remaining() == 0.0
    with pytest.raises(DeadlineExceeded):
        ctx.check()


def test_cancel() -> None:
    ctx = Context(timeout=60)
    ctx.cancel()
    assert ctx.cancelled is True
    with pytest.raises(Cancelled):
        ctx.check()


def test_statement_timeout_uses_remaining() -> None:
    ctx = Context(timeout=30)
    t = ctx.statement_timeout()
    assert t is not None
    assert 0 < t <= 30


def test_statement_timeout_default_from_settings() -> None:
    with patch("sqlz.core.context.settings") as m:
        m.SQLZ_STATEMENT_TIMEOUT = 2.5
        assert Context.background().statement_timeout() == 2.5
        m.SQLZ_STATEMENT_TIMEOUT = 0
        assert Context.background().statement_timeout() is None
        m.SQLZ_STATEMENT_TIMEOUT = None
        assert Context.background().statement_timeout() is None

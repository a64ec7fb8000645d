"""Unit tests for transient database retry helpers."""

from __future__ import annotations

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from app.core.db_retry import is_transient_connection_error, run_with_transient_db_retry


def test_transient_error_detection() -> None:
    assert is_transient_connection_error(OperationalError("SELECT 1", {}, Exception("gone")))
    assert is_transient_connection_error(RuntimeError("Connection reset by peer"))
    assert not is_transient_connection_error(IntegrityError("INSERT", {}, Exception("duplicate")))
    assert not is_transient_connection_error(ValueError("bad input"))


@pytest.mark.asyncio
async def test_retry_recovers_from_dropped_connection() -> None:
    calls: list[int] = []

    async def operation() -> str:
        calls.append(1)
        if len(calls) < 3:
            raise RuntimeError("connection is closed")
        return "done"

    result = await run_with_transient_db_retry(operation, operation_name="test", base_delay_seconds=0)

    assert result == "done"
    assert len(calls) == 3


@pytest.mark.asyncio
async def test_retry_does_not_repeat_non_transient_errors() -> None:
    calls: list[int] = []

    async def operation() -> None:
        calls.append(1)
        raise ValueError("bad row")

    with pytest.raises(ValueError):
        await run_with_transient_db_retry(operation, operation_name="test", base_delay_seconds=0)

    assert len(calls) == 1


@pytest.mark.asyncio
async def test_retry_gives_up_after_attempts() -> None:
    async def operation() -> None:
        raise RuntimeError("server closed the connection unexpectedly")

    with pytest.raises(RuntimeError):
        await run_with_transient_db_retry(operation, operation_name="test", attempts=2, base_delay_seconds=0)

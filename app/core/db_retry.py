"""Retry helpers for transient database connection failures."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any, TypeVar

from sqlalchemy.exc import DBAPIError, InterfaceError, OperationalError

logger = logging.getLogger(__name__)

_ResultT = TypeVar("_ResultT")

_DROPPED_CONNECTION_MARKERS = (
    "connection is closed",
    "connection was closed",
    "connection reset by peer",
    "server closed the connection unexpectedly",
)


def is_transient_connection_error(exc: BaseException) -> bool:
    """Return True when the failure looks like a dropped DB connection."""
    if isinstance(exc, (InterfaceError, OperationalError)):
        return True
    if isinstance(exc, DBAPIError) and exc.connection_invalidated:
        return True
    text = str(exc).lower()
    return any(marker in text for marker in _DROPPED_CONNECTION_MARKERS)


async def run_with_transient_db_retry(
    operation: Callable[[], Awaitable[_ResultT]],
    *,
    operation_name: str,
    attempts: int = 3,
    base_delay_seconds: float = 0.2,
    log_context: Mapping[str, Any] | None = None,
) -> _ResultT:
    """Run `operation`, retrying only on transient connection failures.

    Each attempt must open its own session; a failed session is never reused.
    """
    if attempts < 1:
        raise ValueError("attempts must be >= 1")

    attempt = 1
    while True:
        try:
            return await operation()
        except Exception as exc:
            if attempt >= attempts or not is_transient_connection_error(exc):
                raise
            logger.warning(
                "Transient database connection error; retrying",
                extra={
                    **dict(log_context or {}),
                    "operation": operation_name,
                    "attempt": attempt,
                    "max_attempts": attempts,
                },
            )
            await asyncio.sleep(base_delay_seconds * (2 ** (attempt - 1)))
            attempt += 1

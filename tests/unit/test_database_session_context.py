"""Unit tests for database session context finalization behavior."""

from __future__ import annotations

from typing import Any

import pytest
from sqlalchemy.exc import InterfaceError

from app.core.database import get_session, get_session_context


class _FakeSessionContextManager:
    def __init__(self, session: "_FakeSession") -> None:
        self._session = session

    async def __aenter__(self) -> "_FakeSession":
        return self._session

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        return None


class _FakeSessionMaker:
    def __init__(self, session: "_FakeSession") -> None:
        self._session = session

    def __call__(self) -> _FakeSessionContextManager:
        return _FakeSessionContextManager(self._session)


class _FakeSession:
    def __init__(self) -> None:
        self.new: set[object] = set()
        self.dirty: set[object] = set()
        self.deleted: set[object] = set()
        self._in_transaction = True
        self.commit_calls = 0
        self.rollback_calls = 0
        self.commit_error: Exception | None = None
        self.rollback_error: Exception | None = None

    def in_transaction(self) -> bool:
        return self._in_transaction

    async def commit(self) -> None:
        self.commit_calls += 1
        if self.commit_error is not None:
            raise self.commit_error
        self._in_transaction = False

    async def rollback(self) -> None:
        self.rollback_calls += 1
        if self.rollback_error is not None:
            raise self.rollback_error
        self._in_transaction = False


@pytest.mark.asyncio
async def test_get_session_context_non_committing_mode_leaves_clean_session_alone(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    session = _FakeSession()
    monkeypatch.setattr(
        "app.core.database.async_session_maker",
        _FakeSessionMaker(session),
    )

    async with get_session_context(commit_on_exit=False) as yielded:
        assert yielded is session

    assert session.commit_calls == 0
    assert session.rollback_calls == 0


@pytest.mark.asyncio
async def test_get_session_context_non_committing_mode_rejects_pending_orm_state(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    session = _FakeSession()
    session.dirty.add(object())
    monkeypatch.setattr(
        "app.core.database.async_session_maker",
        _FakeSessionMaker(session),
    )

    with pytest.raises(RuntimeError, match="pending ORM changes"):
        async with get_session_context(commit_on_exit=False):
            pass

    assert session.commit_calls == 0
    assert session.rollback_calls == 1


@pytest.mark.asyncio
async def test_get_session_commits_on_success(monkeypatch: pytest.MonkeyPatch) -> None:
    session = _FakeSession()
    monkeypatch.setattr(
        "app.core.database.async_session_maker",
        _FakeSessionMaker(session),
    )

    generator = get_session()
    yielded = await generator.__anext__()
    assert yielded is session
    with pytest.raises(StopAsyncIteration):
        await generator.__anext__()

    assert session.commit_calls == 1
    assert session.rollback_calls == 0


@pytest.mark.asyncio
async def test_get_session_context_rolls_back_on_error(monkeypatch: pytest.MonkeyPatch) -> None:
    session = _FakeSession()
    monkeypatch.setattr(
        "app.core.database.async_session_maker",
        _FakeSessionMaker(session),
    )

    with pytest.raises(ValueError, match="boom"):
        async with get_session_context():
            raise ValueError("boom")

    assert session.commit_calls == 0
    assert session.rollback_calls == 1


@pytest.mark.asyncio
async def test_closed_connection_during_clean_cleanup_is_ignored(monkeypatch: pytest.MonkeyPatch) -> None:
    session = _FakeSession()
    session._in_transaction = False
    session.commit_error = InterfaceError("COMMIT", {}, Exception("connection is closed"))
    monkeypatch.setattr(
        "app.core.database.async_session_maker",
        _FakeSessionMaker(session),
    )

    async with get_session_context():
        pass

    assert session.commit_calls == 1
    assert session.rollback_calls == 0


@pytest.mark.asyncio
async def test_rollback_failure_does_not_mask_original_error(monkeypatch: pytest.MonkeyPatch) -> None:
    session = _FakeSession()
    session.rollback_error = RuntimeError("connection is closed")
    monkeypatch.setattr(
        "app.core.database.async_session_maker",
        _FakeSessionMaker(session),
    )

    with pytest.raises(KeyError):
        async with get_session_context():
            raise KeyError("original")

    assert session.rollback_calls == 1

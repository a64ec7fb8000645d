"""Test doubles: Redis, generation capabilities, sessions and an in-memory engine."""

from __future__ import annotations

import fnmatch
import json
from collections.abc import AsyncIterator
from datetime import datetime, timedelta, timezone
from typing import Any

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import StaticPool

from app.core.sessions import AuthSession
from app.integrations.web_search import SearchDocument


class FakeRedis:
    """In-memory stand-in for the subset of `redis.asyncio.Redis` the app uses."""

    def __init__(self) -> None:
        self.store: dict[str, str] = {}
        self.ttls: dict[str, int | None] = {}

    async def get(self, key: str) -> str | None:
        return self.store.get(key)

    async def set(
        self,
        key: str,
        value: str,
        ex: int | None = None,
        nx: bool = False,
    ) -> bool | None:
        if nx and key in self.store:
            return None
        self.store[key] = value
        self.ttls[key] = ex
        return True

    async def delete(self, *keys: str) -> int:
        removed = 0
        for key in keys:
            if self.store.pop(key, None) is not None:
                self.ttls.pop(key, None)
                removed += 1
        return removed

    async def exists(self, *keys: str) -> int:
        return sum(1 for key in keys if key in self.store)

    async def scan_iter(self, match: str | None = None) -> AsyncIterator[str]:
        for key in list(self.store):
            if match is None or fnmatch.fnmatchcase(key, match):
                yield key

    async def aclose(self) -> None:
        return None


class FakeCompleter:
    """Returns (or raises) queued responses in order and records prompts."""

    def __init__(self, *responses: str | Exception) -> None:
        self.responses = list(responses)
        self.prompts: list[str] = []

    async def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


class FakeSearcher:
    def __init__(self, result: list[SearchDocument] | Exception) -> None:
        self.result = result
        self.queries: list[str] = []

    async def search(self, query: str, max_results: int | None = None) -> list[SearchDocument]:
        self.queries.append(query)
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


def make_engine() -> AsyncEngine:
    """Single-connection in-memory SQLite, shared by every session."""
    return create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )


def make_auth_session(
    *,
    user_id: str = "user-admin",
    roles: tuple[str, ...] = ("admin",),
) -> AuthSession:
    return AuthSession(
        user_id=user_id,
        email=f"{user_id}@example.com",
        roles=frozenset(roles),
        token_id=f"jti-{user_id}",
        expires_at=datetime.now(timezone.utc) + timedelta(minutes=30),
    )


def brief_json(**overrides: Any) -> str:
    """A well-formed model response, as JSON text."""
    payload: dict[str, Any] = {
        "title": "DPDPA Rules notified",
        "deep_dive_text": "## What changed\n\nThe rules are now in force.",
        "category": "Privacy",
        "fun_fact": "India has over 900 million internet users.",
        "radar_points": ["EU: AI Act GPAI duties apply", "US: new state privacy law"],
        "jargon_term": "Data Fiduciary",
        "jargon_def": "The entity deciding why and how personal data is processed.",
        "social_caption": "This week in legal tech.",
        "cover_image": None,
    }
    payload.update(overrides)
    return json.dumps(payload)

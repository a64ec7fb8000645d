"""Generation client: topic -> search context -> model text -> validated brief content."""

from __future__ import annotations

import asyncio
import json
import logging
import random
import re
from collections.abc import Sequence
from datetime import date
from typing import Any, Literal, Protocol

from pydantic import ValidationError as PydanticValidationError

from app.agents.brief_writer import build_brief_prompt
from app.config import settings
from app.core.exceptions import (
    IncompleteResponseError,
    MalformedResponseError,
    UpstreamError,
    UpstreamUnavailableError,
)
from app.integrations.web_search import SearchDocument
from app.models.base import utc_now
from app.schemas.brief import REQUIRED_CONTENT_FIELDS, BriefContent

logger = logging.getLogger(__name__)

SearchFailurePolicy = Literal["degrade", "fail"]

FALLBACK_TOPIC = "This week in Indian and global technology law"

_FENCE_OPEN = re.compile(r"```(?:json)?[ \t]*\n?", re.IGNORECASE)
_WHITESPACE = re.compile(r"\s+")


class TextCompleter(Protocol):
    async def complete(self, prompt: str) -> str: ...


class Searcher(Protocol):
    async def search(self, query: str, max_results: int | None = None) -> list[SearchDocument]: ...


def strip_code_fences(raw: str) -> str:
    """Remove ```json / ``` markers the model may wrap its JSON in."""
    return _FENCE_OPEN.sub("", raw).replace("```", "").strip()


def parse_brief_content(raw: str) -> BriefContent:
    """Parse model text into `BriefContent`.

    Raises:
        MalformedResponseError: not a JSON object after fence stripping.
        IncompleteResponseError: title or main body missing or blank.
    """
    cleaned = strip_code_fences(raw)
    try:
        payload: Any = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise MalformedResponseError(raw, f"Response is not valid JSON: {e.msg}") from e
    if not isinstance(payload, dict):
        raise MalformedResponseError(raw, "Response JSON is not an object")

    if "deep_dive_text" not in payload and "content" in payload:
        payload["deep_dive_text"] = payload.pop("content")

    missing = [
        field
        for field in REQUIRED_CONTENT_FIELDS
        if not isinstance(payload.get(field), str) or not payload[field].strip()
    ]
    if missing:
        raise IncompleteResponseError(missing)

    try:
        return BriefContent.model_validate(payload)
    except PydanticValidationError as e:
        raise MalformedResponseError(raw, f"Response fields have unexpected types: {e.error_count()} errors") from e


class GenerationClient:
    """Produces one brief's content from an optional operator topic."""

    def __init__(
        self,
        completer: TextCompleter,
        searcher: Searcher | None = None,
        *,
        search_failure_policy: SearchFailurePolicy | None = None,
        max_attempts: int | None = None,
        retry_backoff_seconds: float | None = None,
        default_topics: Sequence[str] | None = None,
    ) -> None:
        self.completer = completer
        self.searcher = searcher
        self.search_failure_policy = search_failure_policy or settings.search_failure_policy
        self.max_attempts = max(1, max_attempts or settings.generation_max_attempts)
        self.retry_backoff_seconds = (
            settings.generation_retry_backoff_seconds
            if retry_backoff_seconds is None
            else retry_backoff_seconds
        )
        self.default_topics = list(default_topics or settings.default_topics) or [FALLBACK_TOPIC]

    def resolve_topic(self, topic: str | None) -> str:
        """Normalize the operator topic; blank input picks a default topic."""
        cleaned = _WHITESPACE.sub(" ", topic or "").strip()
        if not cleaned:
            chosen = random.choice(self.default_topics)
            logger.info("Blank topic, using default", extra={"topic": chosen})
            return chosen
        return cleaned[: settings.topic_max_length]

    async def gather_context(self, topic: str) -> list[SearchDocument]:
        if self.searcher is None:
            return []
        try:
            return await self.searcher.search(topic, settings.search_max_results)
        except UpstreamError as e:
            if self.search_failure_policy == "fail":
                raise
            logger.warning(
                "Search failed, generating without context",
                extra={"topic": topic, "error": e.message},
            )
            return []

    def build_prompt(
        self,
        topic: str,
        documents: list[SearchDocument],
        today: date | None = None,
    ) -> str:
        return build_brief_prompt(topic, documents, today or utc_now().date())

    async def _complete_with_retry(self, prompt: str) -> str:
        attempt = 1
        while True:
            try:
                return await self.completer.complete(prompt)
            except UpstreamUnavailableError as e:
                if attempt >= self.max_attempts:
                    raise
                delay = self.retry_backoff_seconds * attempt
                logger.warning(
                    "Model unavailable, retrying",
                    extra={"attempt": attempt, "delay_s": delay, "error": e.message},
                )
                await asyncio.sleep(delay)
                attempt += 1

    async def generate(self, topic: str | None = None) -> BriefContent:
        """Run search, prompt, completion and validation for one brief."""
        resolved = self.resolve_topic(topic)
        documents = await self.gather_context(resolved)
        prompt = self.build_prompt(resolved, documents)
        raw = await self._complete_with_retry(prompt)
        try:
            content = parse_brief_content(raw)
        except (MalformedResponseError, IncompleteResponseError) as e:
            logger.warning(
                "Model response rejected",
                extra={"topic": resolved, "error": e.message, "raw_text": raw},
            )
            raise
        logger.info(
            "Brief content generated",
            extra={"topic": resolved, "documents": len(documents), "title": content.title},
        )
        return content

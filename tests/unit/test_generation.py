"""Unit tests for brief generation: parsing, topic handling, retries and search policy."""

from __future__ import annotations

import pytest
from pydantic import ValidationError as PydanticValidationError

from app.config import Settings
from app.core.exceptions import (
    IncompleteResponseError,
    MalformedResponseError,
    QuotaExhaustedError,
    RateLimitedError,
    UpstreamUnavailableError,
)
from app.integrations.web_search import SearchDocument
from app.models.brief import DEFAULT_CATEGORY
from app.services import generation
from app.services.generation import (
    FALLBACK_TOPIC,
    GenerationClient,
    parse_brief_content,
    strip_code_fences,
)
from tests.fakes import FakeCompleter, FakeSearcher, brief_json


def _client(completer: FakeCompleter, searcher: FakeSearcher | None = None, **kwargs) -> GenerationClient:
    kwargs.setdefault("retry_backoff_seconds", 0)
    kwargs.setdefault("default_topics", ["EU AI Act enforcement timeline"])
    return GenerationClient(completer, searcher, **kwargs)


def test_strip_code_fences_removes_json_markers() -> None:
    raw = '```json\n{"title": "X"}\n```'

    assert strip_code_fences(raw) == '{"title": "X"}'
    assert strip_code_fences('  {"a": 1}  ') == '{"a": 1}'


def test_parse_brief_content_accepts_fenced_output() -> None:
    content = parse_brief_content(f"```json\n{brief_json()}\n```")

    assert content.title == "DPDPA Rules notified"
    assert content.deep_dive_text.startswith("## What changed")
    assert content.radar_points == ["EU: AI Act GPAI duties apply", "US: new state privacy law"]


def test_parse_brief_content_accepts_legacy_content_key() -> None:
    raw = '{"title": "Legacy", "content": "Body text"}'

    content = parse_brief_content(raw)

    assert content.deep_dive_text == "Body text"
    assert content.category == DEFAULT_CATEGORY
    assert content.radar_points == []


@pytest.mark.parametrize(
    "raw",
    [
        "Sorry, I cannot help with that.",
        "[1, 2, 3]",
        '```json\n{"title": "unterminated"\n```',
    ],
)
def test_parse_brief_content_rejects_non_object_output(raw: str) -> None:
    with pytest.raises(MalformedResponseError) as exc_info:
        parse_brief_content(raw)

    assert exc_info.value.raw_text == raw


def test_parse_brief_content_reports_missing_body() -> None:
    with pytest.raises(IncompleteResponseError) as exc_info:
        parse_brief_content('{"title": "X"}')

    assert exc_info.value.missing_fields == ["deep_dive_text"]


def test_parse_brief_content_treats_blank_title_as_missing() -> None:
    with pytest.raises(IncompleteResponseError) as exc_info:
        parse_brief_content(brief_json(title="   "))

    assert exc_info.value.missing_fields == ["title"]


def test_parse_brief_content_caps_radar_points() -> None:
    content = parse_brief_content(brief_json(radar_points=[f"point {i}" for i in range(8)]))

    assert content.radar_points == [f"point {i}" for i in range(5)]


def test_parse_brief_content_rejects_wrong_field_types() -> None:
    with pytest.raises(MalformedResponseError):
        parse_brief_content(brief_json(fun_fact={"nested": True}))


def test_parse_brief_content_fits_text_to_column_limits() -> None:
    content = parse_brief_content(
        brief_json(
            title="T" * 300,
            category="C" * 100,
            jargon_term="J" * 300,
            cover_image="https://example.com/" + "x" * 3000,
        )
    )

    assert content.title == "T" * 255
    assert content.category == "C" * 64
    assert content.jargon_term == "J" * 255
    assert content.cover_image is None


def test_default_topic_list_never_empty(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(generation.settings, "default_topics", [])
    client = GenerationClient(FakeCompleter(), default_topics=[])

    assert client.resolve_topic("") == FALLBACK_TOPIC


def test_settings_reject_blank_default_topics() -> None:
    with pytest.raises(PydanticValidationError):
        Settings(default_topics="")


def test_resolve_topic_defaults_blank_input() -> None:
    client = _client(FakeCompleter(), default_topics=["Only default"])

    assert client.resolve_topic("   ") == "Only default"
    assert client.resolve_topic(None) == "Only default"


def test_resolve_topic_collapses_whitespace_and_caps_length() -> None:
    client = _client(FakeCompleter())

    assert client.resolve_topic("  AI   Act\n fines ") == "AI Act fines"
    assert len(client.resolve_topic("x" * 1000)) == 200


@pytest.mark.asyncio
async def test_generate_includes_topic_and_documents_in_prompt() -> None:
    completer = FakeCompleter(brief_json())
    searcher = FakeSearcher(
        [SearchDocument(title="Rules notified", url="https://example.com/a", excerpt="The rules...")]
    )
    client = _client(completer, searcher)

    content = await client.generate("DPDPA rules")

    assert content.title == "DPDPA Rules notified"
    assert searcher.queries == ["DPDPA rules"]
    prompt = completer.prompts[0]
    assert "Topic: DPDPA rules" in prompt
    assert "https://example.com/a" in prompt
    assert '"deep_dive_text"' in prompt


@pytest.mark.asyncio
async def test_generate_retries_unavailable_model_then_succeeds() -> None:
    completer = FakeCompleter(
        UpstreamUnavailableError("BriefWriter", "HTTP 503"),
        brief_json(),
    )
    client = _client(completer, max_attempts=3)

    content = await client.generate("topic")

    assert content.title == "DPDPA Rules notified"
    assert len(completer.prompts) == 2


@pytest.mark.asyncio
async def test_generate_gives_up_after_max_attempts() -> None:
    completer = FakeCompleter(*[UpstreamUnavailableError("BriefWriter", "HTTP 503") for _ in range(3)])
    client = _client(completer, max_attempts=2)

    with pytest.raises(UpstreamUnavailableError):
        await client.generate("topic")

    assert len(completer.prompts) == 2


@pytest.mark.asyncio
@pytest.mark.parametrize("error", [RateLimitedError("BriefWriter"), QuotaExhaustedError("BriefWriter")])
async def test_generate_does_not_retry_limit_errors(error: Exception) -> None:
    completer = FakeCompleter(error, brief_json())
    client = _client(completer, max_attempts=3)

    with pytest.raises(type(error)):
        await client.generate("topic")

    assert len(completer.prompts) == 1


@pytest.mark.asyncio
async def test_generate_does_not_retry_malformed_output() -> None:
    completer = FakeCompleter("not json", brief_json())
    client = _client(completer, max_attempts=3)

    with pytest.raises(MalformedResponseError):
        await client.generate("topic")

    assert len(completer.prompts) == 1


@pytest.mark.asyncio
async def test_search_failure_degrades_to_no_context() -> None:
    completer = FakeCompleter(brief_json())
    searcher = FakeSearcher(UpstreamUnavailableError("Tavily", "Request timed out"))
    client = _client(completer, searcher, search_failure_policy="degrade")

    content = await client.generate("topic")

    assert content.title == "DPDPA Rules notified"
    assert "No search results available" in completer.prompts[0]


@pytest.mark.asyncio
async def test_search_failure_fails_generation_when_configured() -> None:
    completer = FakeCompleter(brief_json())
    searcher = FakeSearcher(RateLimitedError("Tavily"))
    client = _client(completer, searcher, search_failure_policy="fail")

    with pytest.raises(RateLimitedError):
        await client.generate("topic")

    assert completer.prompts == []


@pytest.mark.asyncio
async def test_generate_rejects_fenced_output_missing_body() -> None:
    client = _client(FakeCompleter('```json\n{"title":"T"}\n```'))

    with pytest.raises(IncompleteResponseError) as exc_info:
        await client.generate("topic")

    assert exc_info.value.missing_fields == ["deep_dive_text"]


@pytest.mark.asyncio
async def test_generate_with_blank_topic_prompts_with_default() -> None:
    completer = FakeCompleter(brief_json())
    client = _client(completer, default_topics=["EU AI Act enforcement timeline"])

    await client.generate("   ")

    assert "Topic: EU AI Act enforcement timeline" in completer.prompts[0]

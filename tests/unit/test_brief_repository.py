"""Tests for brief storage, listing and search."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import BriefNotFoundError, ValidationError
from app.models.brief import BriefStatus
from app.repositories.brief_repository import BriefRepository, group_by_month
from app.schemas.brief import BriefContent


def _content(title: str = "Weekly brief", **overrides) -> BriefContent:
    return BriefContent(title=title, deep_dive_text="Body", **overrides)


@pytest.mark.asyncio
async def test_insert_assigns_id_timestamps_and_draft_status(db_session: AsyncSession) -> None:
    repo = BriefRepository(db_session)

    brief = await repo.insert(_content(), author_id=None)

    assert brief.id.startswith("c")
    assert brief.status == BriefStatus.DRAFT
    assert brief.publish_date is None
    assert brief.created_at is not None
    assert brief.updated_at is not None


@pytest.mark.asyncio
async def test_update_round_trip_advances_updated_at(db_session: AsyncSession) -> None:
    repo = BriefRepository(db_session)
    brief = await repo.insert(_content())
    await db_session.commit()
    before = brief.updated_at

    await repo.update(brief.id, {"title": "New title"})
    first = brief.updated_at
    await repo.update(brief.id, {"category": "Privacy"})
    await db_session.commit()

    reloaded = await repo.get(brief.id)
    assert reloaded.title == "New title"
    assert reloaded.category == "Privacy"
    assert reloaded.deep_dive_text == "Body"
    assert before < first < reloaded.updated_at


@pytest.mark.asyncio
async def test_update_rejects_status_and_unknown_fields(db_session: AsyncSession) -> None:
    repo = BriefRepository(db_session)
    brief = await repo.insert(_content())

    with pytest.raises(ValidationError) as exc_info:
        await repo.update(brief.id, {"status": "active", "bogus": 1})

    assert exc_info.value.details["fields"] == ["bogus", "status"]


@pytest.mark.asyncio
async def test_update_and_delete_missing_brief(db_session: AsyncSession) -> None:
    repo = BriefRepository(db_session)

    with pytest.raises(BriefNotFoundError):
        await repo.update("missing", {"title": "x"})
    with pytest.raises(BriefNotFoundError):
        await repo.delete("missing")


@pytest.mark.asyncio
async def test_delete_removes_brief(db_session: AsyncSession) -> None:
    repo = BriefRepository(db_session)
    brief = await repo.insert(_content())

    await repo.delete(brief.id)

    with pytest.raises(BriefNotFoundError):
        await repo.get(brief.id)


@pytest.mark.asyncio
async def test_list_published_excludes_drafts_and_future_dates(db_session: AsyncSession) -> None:
    repo = BriefRepository(db_session)
    now = datetime(2026, 10, 19, 12, tzinfo=timezone.utc)
    await repo.insert(_content("Draft only"))
    past = await repo.insert(_content("Past"), status=BriefStatus.ACTIVE)
    past.publish_date = now - timedelta(days=1)
    await db_session.flush()

    listed = await repo.list_published(now=now)
    assert [brief.title for brief in listed] == ["Past"]

    assert await repo.list_published(now=now - timedelta(days=2)) == []


@pytest.mark.asyncio
async def test_list_published_searches_titles_case_insensitively(db_session: AsyncSession) -> None:
    repo = BriefRepository(db_session)
    brief = await repo.insert(_content("EU AI Act enforcement"), status=BriefStatus.ACTIVE)

    assert [b.id for b in await repo.list_published("ai act")] == [brief.id]
    assert await repo.list_published("dpdpa") == []
    assert await repo.list_published("100%") == []


@pytest.mark.asyncio
async def test_get_published_hides_drafts(db_session: AsyncSession) -> None:
    repo = BriefRepository(db_session)
    draft = await repo.insert(_content())
    active = await repo.insert(_content("Live"), status=BriefStatus.ACTIVE)

    assert (await repo.get_published(active.id)).id == active.id
    with pytest.raises(BriefNotFoundError):
        await repo.get_published(draft.id)


@pytest.mark.asyncio
async def test_get_current_returns_none_without_active_brief(db_session: AsyncSession) -> None:
    repo = BriefRepository(db_session)
    await repo.insert(_content())

    assert await repo.get_current() is None

    active = await repo.insert(_content("Live"), status=BriefStatus.ACTIVE)
    current = await repo.get_current()
    assert current is not None
    assert current.id == active.id


@pytest.mark.asyncio
async def test_list_by_status_and_counts(db_session: AsyncSession) -> None:
    repo = BriefRepository(db_session)
    first = await repo.insert(_content("First"))
    second = await repo.insert(_content("Second"))
    live = await repo.insert(_content("Live"), status=BriefStatus.ACTIVE)

    drafts = await repo.list_by_status(BriefStatus.DRAFT)
    assert {brief.id for brief in drafts} == {first.id, second.id}
    assert [brief.id for brief in await repo.list_by_status(BriefStatus.ACTIVE)] == [live.id]
    assert len(await repo.list_by_status()) == 3

    counts = await repo.count_by_status()
    assert counts == {BriefStatus.DRAFT: 2, BriefStatus.ACTIVE: 1}


def test_group_by_month_buckets_in_order() -> None:
    briefs = [
        SimpleNamespace(title="Oct b", publish_date=datetime(2026, 10, 19, tzinfo=timezone.utc)),
        SimpleNamespace(title="Oct a", publish_date=datetime(2026, 10, 2, tzinfo=timezone.utc)),
        SimpleNamespace(title="Sep", publish_date=datetime(2026, 9, 30, tzinfo=timezone.utc)),
        SimpleNamespace(title="Undated", publish_date=None),
    ]

    grouped = group_by_month(briefs)

    assert list(grouped) == ["2026-10", "2026-09"]
    assert [brief.title for brief in grouped["2026-10"]] == ["Oct b", "Oct a"]

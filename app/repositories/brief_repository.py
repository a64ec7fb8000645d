"""Repository for Brief read/write operations."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any, TypeVar

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import BriefNotFoundError, ValidationError
from app.models.base import utc_now
from app.models.brief import Brief, BriefStatus
from app.models.dtos import BriefCreateDTO, BriefPatchDTO
from app.schemas.brief import BriefContent

logger = logging.getLogger(__name__)

# Status and publish date only change through the publish coordinator.
EDITABLE_FIELDS = frozenset(
    {
        "title",
        "deep_dive_text",
        "category",
        "fun_fact",
        "radar_points",
        "jargon_term",
        "jargon_def",
        "social_caption",
        "cover_image",
        "audio_summary_url",
    }
)

DatedT = TypeVar("DatedT")


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class BriefRepository:
    """Typed CRUD over the `briefs` table within one session."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list_by_status(
        self,
        status: BriefStatus | None = None,
        *,
        now: datetime | None = None,
    ) -> list[Brief]:
        """List briefs newest first.

        Active briefs are ordered by publish date and limited to those already
        published; drafts (and the unfiltered list) by creation time.
        """
        if status == BriefStatus.ACTIVE:
            return await self.list_published(now=now)

        stmt = select(Brief)
        if status is not None:
            stmt = stmt.where(Brief.status == status)
        stmt = stmt.order_by(Brief.created_at.desc(), Brief.id.desc())
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_published(
        self,
        search: str | None = None,
        *,
        now: datetime | None = None,
    ) -> list[Brief]:
        """Active briefs with publish date <= now, optionally filtered by title."""
        stmt = (
            select(Brief)
            .where(Brief.status == BriefStatus.ACTIVE)
            .where(Brief.publish_date.is_not(None))
            .where(Brief.publish_date <= (now or utc_now()))
        )
        term = (search or "").strip()
        if term:
            stmt = stmt.where(Brief.title.ilike(f"%{_escape_like(term)}%", escape="\\"))
        stmt = stmt.order_by(Brief.publish_date.desc(), Brief.updated_at.desc())
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get(self, brief_id: str) -> Brief:
        brief = await Brief.get(self.session, brief_id)
        if brief is None:
            raise BriefNotFoundError(brief_id)
        return brief

    async def get_for_update(self, brief_id: str) -> Brief:
        """Load a brief with a row lock held until the transaction ends."""
        stmt = select(Brief).where(Brief.id == brief_id).with_for_update()
        result = await self.session.execute(stmt)
        brief = result.scalar_one_or_none()
        if brief is None:
            raise BriefNotFoundError(brief_id)
        return brief

    async def get_published(self, brief_id: str, *, now: datetime | None = None) -> Brief:
        """Public lookup: drafts and future-dated briefs are reported as missing."""
        brief = await self.get(brief_id)
        if brief.status != BriefStatus.ACTIVE or brief.publish_date is None:
            raise BriefNotFoundError(brief_id)
        if brief.publish_date > (now or utc_now()):
            raise BriefNotFoundError(brief_id)
        return brief

    async def get_current(self, *, now: datetime | None = None) -> Brief | None:
        """The brief readers see right now, or None.

        If more than one row is ever active, the most recent publish wins.
        """
        stmt = (
            select(Brief)
            .where(Brief.status == BriefStatus.ACTIVE)
            .where(Brief.publish_date.is_not(None))
            .where(Brief.publish_date <= (now or utc_now()))
            .order_by(Brief.publish_date.desc(), Brief.updated_at.desc())
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def count_by_status(self) -> dict[BriefStatus, int]:
        stmt = select(Brief.status, func.count(Brief.id)).group_by(Brief.status)
        result = await self.session.execute(stmt)
        counts = {status: 0 for status in BriefStatus}
        for status, count in result.all():
            counts[BriefStatus(status)] = int(count)
        return counts

    async def insert(
        self,
        content: BriefContent,
        *,
        status: BriefStatus = BriefStatus.DRAFT,
        author_id: str | None = None,
    ) -> Brief:
        """Persist new content; ids and timestamps are assigned here."""
        brief = Brief.create(
            self.session,
            BriefCreateDTO(
                title=content.title,
                deep_dive_text=content.deep_dive_text,
                category=content.category,
                fun_fact=content.fun_fact,
                radar_points=list(content.radar_points),
                jargon_term=content.jargon_term,
                jargon_def=content.jargon_def,
                social_caption=content.social_caption,
                cover_image=content.cover_image,
                status=status,
                publish_date=utc_now() if status == BriefStatus.ACTIVE else None,
                author_id=author_id,
            ),
        )
        await self.session.flush()
        logger.info("Brief inserted", extra={"brief_id": brief.id, "status": brief.status.value})
        return brief

    async def update(self, brief_id: str, fields: Mapping[str, Any]) -> Brief:
        """Merge `fields` into the brief; `updated_at` always advances."""
        invalid = sorted(set(fields) - EDITABLE_FIELDS)
        if invalid:
            raise ValidationError(
                f"Fields cannot be edited: {', '.join(invalid)}",
                {"fields": invalid},
            )
        brief = await self.get(brief_id)
        if not fields:
            return brief

        brief.patch(self.session, BriefPatchDTO.from_partial(dict(fields)))
        await self.session.flush()
        logger.info("Brief updated", extra={"brief_id": brief_id, "fields": sorted(fields)})
        return brief

    async def delete(self, brief_id: str) -> None:
        """Permanently remove a brief."""
        brief = await self.get(brief_id)
        await brief.delete(self.session)
        await self.session.flush()
        logger.info("Brief deleted", extra={"brief_id": brief_id})


def group_by_month(briefs: Iterable[DatedT]) -> dict[str, list[DatedT]]:
    """Bucket published briefs by `YYYY-MM` of their publish date, keeping order."""
    grouped: dict[str, list[DatedT]] = {}
    for brief in briefs:
        publish_date = getattr(brief, "publish_date", None)
        if publish_date is None:
            continue
        grouped.setdefault(publish_date.strftime("%Y-%m"), []).append(brief)
    return grouped

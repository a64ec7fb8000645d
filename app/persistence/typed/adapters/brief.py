"""Brief write adapter."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.brief import DEFAULT_CATEGORY, MAX_RADAR_POINTS, Brief, BriefStatus
from app.models.dtos import BriefCreateDTO, BriefPatchDTO
from app.persistence.typed.adapters._base import BaseWriteAdapter

BRIEF_PATCH_ALLOWLIST = {
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
    "status",
    "publish_date",
}


class BriefWriteAdapter(BaseWriteAdapter[Brief, BriefCreateDTO, BriefPatchDTO]):
    """Coerces status strings and caps radar points on the way in."""

    def create(self, session: AsyncSession, dto: BriefCreateDTO) -> Brief:
        brief = super().create(session, dto)
        if brief.status is None:
            brief.status = BriefStatus.DRAFT
        if not brief.category:
            brief.category = DEFAULT_CATEGORY
        brief.radar_points = list(brief.radar_points or [])[:MAX_RADAR_POINTS]
        return brief

    def patch(self, session: AsyncSession, instance: Brief, dto: BriefPatchDTO) -> Brief:
        if dto.status is not None and not isinstance(dto.status, BriefStatus):
            dto.status = BriefStatus(dto.status)
        if dto.radar_points is not None:
            dto.radar_points = list(dto.radar_points)[:MAX_RADAR_POINTS]
        return super().patch(session, instance, dto)


_BRIEF_ADAPTER = BriefWriteAdapter(model_cls=Brief, patch_allowlist=BRIEF_PATCH_ALLOWLIST)


def register() -> None:
    """Register brief adapters."""
    from app.persistence.typed.registry import register_adapter

    register_adapter(Brief, _BRIEF_ADAPTER)

"""Brief model: one unit of publishable newsletter content."""

from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import JSON, Enum, ForeignKey, Index, String, Text, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, StringUUID, TimestampMixin, TypedModelMixin, UTCDateTime, UUIDMixin
from app.models.dtos import BriefCreateDTO, BriefPatchDTO

MAX_RADAR_POINTS = 5
DEFAULT_CATEGORY = "Legal Tech"
TITLE_MAX_LENGTH = 255
CATEGORY_MAX_LENGTH = 64
URL_MAX_LENGTH = 2048

_LEGACY_ACTIVE_STATUSES = {"active", "published", "live"}


class BriefStatus(str, enum.Enum):
    """Publication state. Exactly two variants; `active` is what readers see."""

    DRAFT = "draft"
    ACTIVE = "active"

    @classmethod
    def from_legacy(
        cls,
        *,
        status: str | None = None,
        is_published: bool | None = None,
    ) -> BriefStatus:
        """Map either legacy row shape onto the two-state enum.

        `status` in {active, published, live} or `is_published=True` -> ACTIVE;
        anything else (including missing values) -> DRAFT.
        """
        if is_published is True:
            return cls.ACTIVE
        if status is not None and status.strip().lower() in _LEGACY_ACTIVE_STATUSES:
            return cls.ACTIVE
        return cls.DRAFT


_json_type = JSON().with_variant(JSONB(), "postgresql")


class Brief(
    TypedModelMixin[BriefCreateDTO, BriefPatchDTO],
    Base,
    UUIDMixin,
    TimestampMixin,
):
    """Weekly intelligence brief."""

    __tablename__ = "briefs"
    __table_args__ = (
        # At most one active row, enforced by the store.
        Index(
            "uq_briefs_single_active",
            "status",
            unique=True,
            postgresql_where=text("status = 'active'"),
            sqlite_where=text("status = 'active'"),
        ),
        Index("ix_briefs_status_publish_date", "status", "publish_date"),
    )

    title: Mapped[str] = mapped_column(String(TITLE_MAX_LENGTH), nullable=False)
    deep_dive_text: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(String(CATEGORY_MAX_LENGTH), default=DEFAULT_CATEGORY, nullable=False)
    fun_fact: Mapped[str | None] = mapped_column(Text, nullable=True)
    radar_points: Mapped[list[str]] = mapped_column(_json_type, default=list, nullable=False)
    jargon_term: Mapped[str | None] = mapped_column(String(TITLE_MAX_LENGTH), nullable=True)
    jargon_def: Mapped[str | None] = mapped_column(Text, nullable=True)
    social_caption: Mapped[str | None] = mapped_column(Text, nullable=True)
    cover_image: Mapped[str | None] = mapped_column(String(URL_MAX_LENGTH), nullable=True)
    audio_summary_url: Mapped[str | None] = mapped_column(String(URL_MAX_LENGTH), nullable=True)

    status: Mapped[BriefStatus] = mapped_column(
        Enum(
            BriefStatus,
            name="brief_status",
            native_enum=False,
            length=16,
            values_callable=lambda members: [member.value for member in members],
        ),
        default=BriefStatus.DRAFT,
        nullable=False,
    )
    publish_date: Mapped[datetime | None] = mapped_column(UTCDateTime(), nullable=True)
    author_id: Mapped[str | None] = mapped_column(
        StringUUID(),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    @property
    def is_active(self) -> bool:
        return self.status == BriefStatus.ACTIVE

    def __repr__(self) -> str:
        return f"<Brief {self.id} {self.status.value}>"

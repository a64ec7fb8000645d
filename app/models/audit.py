"""Admin audit trail."""

from __future__ import annotations

from typing import Any

from sqlalchemy import JSON, ForeignKey, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, StringUUID, TimestampMixin, TypedModelMixin, UUIDMixin
from app.models.dtos import AdminAuditEventCreateDTO, AdminAuditEventPatchDTO


class AdminAuditEvent(
    TypedModelMixin[AdminAuditEventCreateDTO, AdminAuditEventPatchDTO],
    Base,
    UUIDMixin,
    TimestampMixin,
):
    """One admin action (action name plus the affected record)."""

    __tablename__ = "admin_audit_events"

    user_id: Mapped[str | None] = mapped_column(
        StringUUID(),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    action: Mapped[str] = mapped_column(String(100), nullable=False)
    target_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    target_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    details: Mapped[dict[str, Any]] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"),
        default=dict,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<AdminAuditEvent {self.action} {self.target_id}>"

"""Admin audit log writes."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.audit import AdminAuditEvent
from app.models.dtos import AdminAuditEventCreateDTO

logger = logging.getLogger(__name__)

ACTION_GENERATED = "Generated Brief"
ACTION_EDITED = "Edited Brief"
ACTION_PUBLISHED = "Published Brief"
ACTION_UNPUBLISHED = "Unpublished Brief"
ACTION_DELETED = "Deleted Brief"


class AuditLogService:
    """Appends audit events in the caller's transaction."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def record(
        self,
        action: str,
        *,
        user_id: str | None,
        brief_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> AdminAuditEvent:
        payload = dict(details or {})
        if brief_id is not None:
            payload.setdefault("briefId", brief_id)
        event = AdminAuditEvent.create(
            self.session,
            AdminAuditEventCreateDTO(
                action=action,
                user_id=user_id,
                target_type="brief" if brief_id is not None else None,
                target_id=brief_id,
                details=payload,
            ),
        )
        await self.session.flush()
        logger.info(
            "Admin action recorded",
            extra={"action": action, "user_id": user_id, "brief_id": brief_id},
        )
        return event

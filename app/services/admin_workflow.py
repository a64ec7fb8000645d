"""Admin workflow: the operations behind the admin console."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ForbiddenError, ValidationError
from app.core.redis import operation_lock
from app.core.sessions import AuthSession
from app.models.brief import Brief
from app.repositories.brief_repository import BriefRepository
from app.services.audit import (
    ACTION_DELETED,
    ACTION_EDITED,
    ACTION_GENERATED,
    ACTION_PUBLISHED,
    ACTION_UNPUBLISHED,
    AuditLogService,
)
from app.services.generation import GenerationClient
from app.services.listing_cache import BriefListingCache
from app.services.publish_coordinator import PublishCoordinator

logger = logging.getLogger(__name__)


class AdminWorkflowController:
    """Sequences role check, generation, storage, audit and cache refresh.

    Each mutating call commits its own transaction before invalidating the
    listing cache, so a concurrent reader cannot re-cache the old state.
    """

    def __init__(
        self,
        db: AsyncSession,
        generator: GenerationClient,
        cache: BriefListingCache,
        audit: AuditLogService | None = None,
        redis: Redis | None = None,
    ) -> None:
        self.db = db
        self.generator = generator
        self.cache = cache
        self.audit = audit or AuditLogService(db)
        self.redis = redis if redis is not None else cache.redis
        self.briefs = BriefRepository(db)
        self.coordinator = PublishCoordinator(db)

    async def generate_and_stage_draft(self, session: AuthSession, topic: str | None = None) -> Brief:
        """Generate content and store it as a new draft."""
        self._require_admin(session)

        async with operation_lock(self.redis, "generate"):
            content = await self.generator.generate(topic)
            brief = await self.briefs.insert(content, author_id=session.user_id)
            await self.audit.record(ACTION_GENERATED, user_id=session.user_id, brief_id=brief.id)
            await self._commit_and_refresh()

        logger.info("Draft staged", extra={"brief_id": brief.id, "user_id": session.user_id})
        return brief

    async def save_edits(
        self,
        session: AuthSession,
        brief_id: str,
        fields: Mapping[str, Any],
    ) -> Brief:
        self._require_admin(session)
        brief = await self.briefs.update(brief_id, fields)
        await self.audit.record(
            ACTION_EDITED,
            user_id=session.user_id,
            brief_id=brief_id,
            details={"fields": sorted(fields)},
        )
        await self._commit_and_refresh()
        return brief

    async def publish_draft(
        self,
        session: AuthSession,
        brief_id: str,
        fields: Mapping[str, Any] | None = None,
    ) -> Brief:
        """Persist pending edits, then make the brief the active one."""
        self._require_admin(session)

        async with operation_lock(self.redis, "publish"):
            if fields:
                await self.briefs.update(brief_id, fields)
            brief = await self.coordinator.publish(brief_id)
            await self.audit.record(
                ACTION_PUBLISHED,
                user_id=session.user_id,
                brief_id=brief_id,
                details={"fields": sorted(fields or {})},
            )
            await self._commit_and_refresh()

        return brief

    async def unpublish(self, session: AuthSession, brief_id: str) -> Brief:
        self._require_admin(session)
        brief = await self.coordinator.unpublish(brief_id)
        await self.audit.record(ACTION_UNPUBLISHED, user_id=session.user_id, brief_id=brief_id)
        await self._commit_and_refresh()
        return brief

    async def delete_brief(self, session: AuthSession, brief_id: str, *, confirmed: bool) -> None:
        """Permanently delete a brief; the caller must pass explicit confirmation."""
        self._require_admin(session)
        if not confirmed:
            raise ValidationError("Deleting a brief requires confirmation", {"brief_id": brief_id})

        await self.briefs.delete(brief_id)
        await self.audit.record(ACTION_DELETED, user_id=session.user_id, brief_id=brief_id)
        await self._commit_and_refresh()

    def _require_admin(self, session: AuthSession) -> None:
        if not session.is_admin:
            logger.warning("Admin action refused", extra={"user_id": session.user_id})
            raise ForbiddenError()

    async def _commit_and_refresh(self) -> None:
        await self.db.commit()
        await self.cache.invalidate_all()

"""Publish coordinator: keeps at most one brief active."""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import PublishConflictError
from app.models.base import utc_now
from app.models.brief import Brief, BriefStatus
from app.models.dtos import BriefPatchDTO
from app.repositories.brief_repository import BriefRepository

logger = logging.getLogger(__name__)


class PublishCoordinator:
    """Runs draft <-> active transitions inside the caller's transaction.

    The demote and promote are issued in one transaction, and the partial
    unique index `uq_briefs_single_active` rejects a second concurrent
    promotion. Two publishers racing on different briefs therefore end with
    one success and one `PublishConflictError`, never two active rows.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.briefs = BriefRepository(session)

    async def publish(self, brief_id: str, *, now: datetime | None = None) -> Brief:
        """Make `brief_id` the single active brief; any previous one returns to draft."""
        published_at = now or utc_now()
        target = await self.briefs.get_for_update(brief_id)

        try:
            demoted = await self.session.execute(
                update(Brief)
                .where(Brief.status == BriefStatus.ACTIVE)
                .where(Brief.id != brief_id)
                .values(status=BriefStatus.DRAFT, updated_at=utc_now())
                .execution_options(synchronize_session="fetch")
            )
            await self.session.flush()

            target.patch(
                self.session,
                BriefPatchDTO.from_partial(
                    {"status": BriefStatus.ACTIVE, "publish_date": published_at}
                ),
            )
            await self.session.flush()
        except IntegrityError as e:
            logger.warning("Concurrent publish rejected", extra={"brief_id": brief_id})
            raise PublishConflictError(brief_id) from e

        logger.info(
            "Brief published",
            extra={"brief_id": brief_id, "demoted": demoted.rowcount or 0},
        )
        return target

    async def unpublish(self, brief_id: str) -> Brief:
        """Return `brief_id` to draft. A draft stays a draft; other rows are untouched."""
        brief = await self.briefs.get(brief_id)
        if brief.status == BriefStatus.DRAFT:
            return brief

        brief.patch(self.session, BriefPatchDTO.from_partial({"status": BriefStatus.DRAFT}))
        await self.session.flush()
        logger.info("Brief unpublished", extra={"brief_id": brief_id})
        return brief

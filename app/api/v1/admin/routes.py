"""Admin console endpoints. Every route requires the admin role."""

import logging
from typing import Annotated

from fastapi import APIRouter, Body, Depends, Query, status

from app.dependencies import AdminSession, DbSession, Generator, ListingCache
from app.models.brief import Brief, BriefStatus
from app.repositories.brief_repository import BriefRepository
from app.repositories.subscriber_repository import SubscriberRepository
from app.schemas.brief import (
    AdminStatsResponse,
    BriefResponse,
    BriefSummary,
    BriefUpdate,
    GenerateBriefRequest,
    GenerateBriefResponse,
)
from app.services.admin_workflow import AdminWorkflowController

logger = logging.getLogger(__name__)

router = APIRouter()


def get_workflow(db: DbSession, generator: Generator, cache: ListingCache) -> AdminWorkflowController:
    return AdminWorkflowController(db, generator, cache)


Workflow = Annotated[AdminWorkflowController, Depends(get_workflow)]


@router.get("/briefs", response_model=list[BriefSummary])
async def list_briefs(
    admin: AdminSession,
    session: DbSession,
    status_filter: BriefStatus | None = Query(default=None, alias="status"),
) -> list[Brief]:
    """All briefs, or only drafts / only active ones."""
    return await BriefRepository(session).list_by_status(status_filter)


@router.get("/briefs/{brief_id}", response_model=BriefResponse)
async def get_brief(brief_id: str, admin: AdminSession, session: DbSession) -> Brief:
    return await BriefRepository(session).get(brief_id)


@router.post(
    "/briefs/generate",
    response_model=GenerateBriefResponse,
    status_code=status.HTTP_201_CREATED,
)
async def generate_brief(
    admin: AdminSession,
    workflow: Workflow,
    payload: GenerateBriefRequest | None = None,
) -> GenerateBriefResponse:
    """Generate a new brief with AI and stage it as a draft."""
    brief = await workflow.generate_and_stage_draft(admin, payload.topic if payload else None)
    return GenerateBriefResponse(success=True, brief=BriefResponse.model_validate(brief))


@router.patch("/briefs/{brief_id}", response_model=BriefResponse)
async def update_brief(
    brief_id: str,
    payload: BriefUpdate,
    admin: AdminSession,
    workflow: Workflow,
) -> Brief:
    return await workflow.save_edits(admin, brief_id, payload.changes())


@router.post("/briefs/{brief_id}/publish", response_model=BriefResponse)
async def publish_brief(
    brief_id: str,
    admin: AdminSession,
    workflow: Workflow,
    payload: Annotated[BriefUpdate | None, Body()] = None,
) -> Brief:
    """Save any pending edits, then make this the single active brief."""
    return await workflow.publish_draft(admin, brief_id, payload.changes() if payload else None)


@router.post("/briefs/{brief_id}/unpublish", response_model=BriefResponse)
async def unpublish_brief(brief_id: str, admin: AdminSession, workflow: Workflow) -> Brief:
    return await workflow.unpublish(admin, brief_id)


@router.delete("/briefs/{brief_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_brief(
    brief_id: str,
    admin: AdminSession,
    workflow: Workflow,
    confirm: bool = Query(default=False),
) -> None:
    """Permanently delete a brief. Requires `?confirm=true`."""
    await workflow.delete_brief(admin, brief_id, confirmed=confirm)


@router.get("/stats", response_model=AdminStatsResponse)
async def admin_stats(admin: AdminSession, session: DbSession) -> AdminStatsResponse:
    counts = await BriefRepository(session).count_by_status()
    subscribers = await SubscriberRepository(session).count()
    return AdminStatsResponse(
        total_briefs=sum(counts.values()),
        drafts=counts[BriefStatus.DRAFT],
        published=counts[BriefStatus.ACTIVE],
        subscribers=subscribers,
    )

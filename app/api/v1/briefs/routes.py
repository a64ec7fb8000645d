"""Public read path for published briefs."""

from typing import Any

from fastapi import APIRouter, Query

from app.api.v1.briefs.constants import BY_MONTH_CACHE_KEY, CURRENT_CACHE_KEY, SEARCH_MAX_LENGTH
from app.dependencies import DbSession, ListingCache
from app.repositories.brief_repository import BriefRepository, group_by_month
from app.schemas.brief import BriefResponse, BriefSummary
from app.services.listing_cache import archive_key

router = APIRouter()


@router.get("/current", response_model=BriefResponse | None)
async def get_current_brief(session: DbSession, cache: ListingCache) -> Any:
    """The brief readers should see now, or null when nothing is published."""

    async def load() -> dict[str, Any] | None:
        brief = await BriefRepository(session).get_current()
        if brief is None:
            return None
        return BriefResponse.model_validate(brief).model_dump(mode="json")

    return await cache.get_or_load(CURRENT_CACHE_KEY, load)


@router.get("", response_model=list[BriefSummary])
async def list_published_briefs(
    session: DbSession,
    cache: ListingCache,
    q: str | None = Query(default=None, max_length=SEARCH_MAX_LENGTH),
) -> Any:
    """Archive of published briefs, newest first, with optional title search."""

    async def load() -> list[dict[str, Any]]:
        briefs = await BriefRepository(session).list_published(q)
        return [BriefSummary.model_validate(brief).model_dump(mode="json") for brief in briefs]

    return await cache.get_or_load(archive_key(q), load)


@router.get("/by-month", response_model=dict[str, list[BriefSummary]])
async def list_briefs_by_month(session: DbSession, cache: ListingCache) -> Any:
    """Published briefs grouped by `YYYY-MM`."""

    async def load() -> dict[str, list[dict[str, Any]]]:
        briefs = await BriefRepository(session).list_published()
        return {
            month: [BriefSummary.model_validate(brief).model_dump(mode="json") for brief in items]
            for month, items in group_by_month(briefs).items()
        }

    return await cache.get_or_load(BY_MONTH_CACHE_KEY, load)


@router.get("/{brief_id}", response_model=BriefResponse)
async def get_published_brief(brief_id: str, session: DbSession) -> Any:
    """One published brief; drafts are reported as not found."""
    return await BriefRepository(session).get_published(brief_id)

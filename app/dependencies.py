"""Shared FastAPI dependencies."""

import logging
from typing import Annotated

from fastapi import Depends, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from app.agents.brief_writer import BriefWriterAgent
from app.config import settings
from app.core.database import get_session
from app.core.exceptions import ForbiddenError, UnauthorizedError
from app.core.redis import get_redis
from app.core.sessions import AuthSession, SessionService
from app.integrations.web_search import WebSearchClient
from app.services.generation import GenerationClient
from app.services.listing_cache import BriefListingCache

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

DbSession = Annotated[AsyncSession, Depends(get_session)]
RedisClient = Annotated[Redis, Depends(get_redis)]


def get_session_service(db: DbSession, redis: RedisClient) -> SessionService:
    return SessionService(db, redis)


Sessions = Annotated[SessionService, Depends(get_session_service)]


async def get_current_session(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Security(bearer_scheme)],
    sessions: Sessions,
) -> AuthSession:
    """Resolve the bearer token into a session (401 when missing or invalid)."""
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError()
    return await sessions.resolve(credentials.credentials)


CurrentSession = Annotated[AuthSession, Depends(get_current_session)]


async def get_admin_session(session: CurrentSession) -> AuthSession:
    """Require the admin role (403 otherwise); runs before any handler body."""
    if not session.is_admin:
        logger.warning("Non-admin blocked from admin route", extra={"user_id": session.user_id})
        raise ForbiddenError()
    return session


AdminSession = Annotated[AuthSession, Depends(get_admin_session)]


def get_listing_cache(redis: RedisClient) -> BriefListingCache:
    return BriefListingCache(redis)


ListingCache = Annotated[BriefListingCache, Depends(get_listing_cache)]


def get_generation_client() -> GenerationClient:
    """Build the generation client from settings; search is optional."""
    searcher = WebSearchClient() if settings.search_enabled else None
    return GenerationClient(BriefWriterAgent(), searcher)


Generator = Annotated[GenerationClient, Depends(get_generation_client)]

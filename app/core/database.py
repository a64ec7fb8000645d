"""Async SQLAlchemy database setup."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy.exc import InterfaceError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.config import settings

logger = logging.getLogger(__name__)


def _engine_options() -> dict[str, Any]:
    if settings.is_sqlite:
        return {"echo": settings.database_echo}
    return {
        "echo": settings.database_echo,
        "pool_size": settings.database_pool_size,
        "max_overflow": settings.database_max_overflow,
        "pool_pre_ping": True,
        "pool_recycle": 300,
    }


engine: AsyncEngine = create_async_engine(settings.database_url, **_engine_options())

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


def _has_pending_state(session: AsyncSession) -> bool:
    return bool(session.new or session.dirty or session.deleted)


async def _rollback_quietly(session: AsyncSession) -> None:
    try:
        await session.rollback()
    except Exception:
        logger.warning("Rollback also failed (connection likely closed)")


@asynccontextmanager
async def _session_scope(*, commit_on_exit: bool, context: str) -> AsyncGenerator[AsyncSession, None]:
    async with async_session_maker() as session:
        try:
            yield session
            if commit_on_exit:
                await session.commit()
            elif _has_pending_state(session):
                raise RuntimeError(
                    "Session has pending ORM changes but commit_on_exit=False. "
                    "Commit explicitly or use commit_on_exit=True."
                )
        except InterfaceError as exc:
            if not session.in_transaction() and not _has_pending_state(session):
                logger.debug("Session connection already closed during cleanup, ignoring")
                return
            logger.warning(
                "Database interface error with active transaction, rolling back",
                extra={"context": context, "error": repr(exc)},
            )
            await _rollback_quietly(session)
            raise
        except Exception as exc:
            logger.warning(
                "Database session error, rolling back",
                extra={"context": context, "error": repr(exc)},
            )
            await _rollback_quietly(session)
            raise


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session for dependency injection (commits on success)."""
    async with _session_scope(commit_on_exit=True, context="get_session") as session:
        yield session


@asynccontextmanager
async def get_session_context(
    *,
    commit_on_exit: bool = True,
) -> AsyncGenerator[AsyncSession, None]:
    """Get database session as context manager for non-DI usage."""
    async with _session_scope(commit_on_exit=commit_on_exit, context="get_session_context") as session:
        yield session


async def init_db() -> None:
    """Create tables if needed (development only; production uses alembic)."""
    logger.info("Initializing database tables")
    from app.models import Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    """Close database connections."""
    logger.info("Closing database connections")
    await engine.dispose()

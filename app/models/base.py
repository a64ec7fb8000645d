"""Base model and mixins for SQLAlchemy models."""

from datetime import datetime, timedelta, timezone
from typing import Any, Generic, TypeVar

from sqlalchemy import DateTime, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import String, TypeDecorator

from app.core.ids import generate_cuid
from app.persistence.typed.contracts import CreateDTOProtocol, PatchDTOProtocol

CreateDTOT = TypeVar("CreateDTOT", bound=CreateDTOProtocol)
PatchDTOT = TypeVar("PatchDTOT", bound=PatchDTOProtocol)
ModelSelfT = TypeVar("ModelSelfT", bound="TypedModelMixin[Any, Any]")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes (SQLite drops tzinfo on the way back)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def next_timestamp(previous: datetime | None) -> datetime:
    """Return now, bumped past `previous` so mutation timestamps always increase."""
    now = utc_now()
    if previous is None:
        return now
    floor = as_utc(previous) + timedelta(microseconds=1)
    return now if now >= floor else floor


class StringUUID(TypeDecorator):
    """String identifier type for CUID values."""

    impl = String(32)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return None if value is None else str(value)

    def process_result_value(self, value, dialect):
        return None if value is None else str(value)


class UTCDateTime(TypeDecorator):
    """Timezone-aware datetime that always comes back as UTC."""

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return None if value is None else as_utc(value)

    def process_result_value(self, value, dialect):
        return None if value is None else as_utc(value)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class TypedModelMixin(Generic[CreateDTOT, PatchDTOT]):
    """Typed CRUD helpers delegated to the typed write adapter layer."""

    @classmethod
    async def get(
        cls: type[ModelSelfT],
        session: AsyncSession,
        model_id: str,
    ) -> ModelSelfT | None:
        """Fetch a model by primary key."""
        return await session.get(cls, model_id)

    @classmethod
    def create(cls: type[ModelSelfT], session: AsyncSession, dto: CreateDTOT) -> ModelSelfT:
        """Create a model via registered typed adapter."""
        from app.persistence.typed import create as typed_create

        return typed_create(session, cls, dto)

    def patch(self: ModelSelfT, session: AsyncSession, dto: PatchDTOT) -> ModelSelfT:
        """Patch a model via registered typed adapter."""
        from app.persistence.typed import patch as typed_patch

        return typed_patch(session, type(self), self, dto)

    async def delete(self, session: AsyncSession) -> None:
        """Delete a model via registered typed adapter."""
        from app.persistence.typed import delete as typed_delete

        await typed_delete(session, type(self), self)


class UUIDMixin:
    """Mixin that adds a CUID-style string primary key."""

    id: Mapped[str] = mapped_column(
        StringUUID(),
        primary_key=True,
        default=generate_cuid,
    )


class TimestampMixin:
    """Mixin that adds created_at and updated_at timestamps."""

    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        default=utc_now,
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        default=utc_now,
        server_default=func.now(),
        onupdate=utc_now,
        nullable=False,
    )

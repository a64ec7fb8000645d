"""Facade for typed write operations."""

from __future__ import annotations

from typing import TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from app.persistence.typed.contracts import CreateDTOProtocol, PatchDTOProtocol
from app.persistence.typed.registry import get_adapter

ModelT = TypeVar("ModelT")


def create(session: AsyncSession, model_cls: type[ModelT], dto: CreateDTOProtocol) -> ModelT:
    """Create model instance via registered adapter."""
    return get_adapter(model_cls).create(session, dto)


def patch(
    session: AsyncSession,
    model_cls: type[ModelT],
    instance: ModelT,
    dto: PatchDTOProtocol,
) -> ModelT:
    """Patch model instance via registered adapter."""
    return get_adapter(model_cls).patch(session, instance, dto)


async def delete(session: AsyncSession, model_cls: type[ModelT], instance: ModelT) -> None:
    """Delete model instance via registered adapter."""
    await get_adapter(model_cls).delete(session, instance)

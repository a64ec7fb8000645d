"""Contracts for typed SQLAlchemy writes."""

from __future__ import annotations

from typing import Any, Protocol, TypeVar, runtime_checkable

from sqlalchemy.ext.asyncio import AsyncSession

ModelT = TypeVar("ModelT")


@runtime_checkable
class CreateDTOProtocol(Protocol):
    """Anything that can produce an ORM constructor payload."""

    def to_orm_kwargs(self) -> dict[str, Any]:
        """Convert DTO to ORM constructor payload."""


@runtime_checkable
class PatchDTOProtocol(Protocol):
    """Anything that can produce a sparse field patch."""

    def to_patch_dict(self) -> dict[str, Any]:
        """Convert DTO to sparse patch payload."""


class WriteAdapter(Protocol[ModelT]):
    """What the registry expects of a per-model adapter."""

    model_cls: type[ModelT]

    def create(self, session: AsyncSession, dto: CreateDTOProtocol) -> ModelT: ...

    def patch(self, session: AsyncSession, instance: ModelT, dto: PatchDTOProtocol) -> ModelT: ...

    async def delete(self, session: AsyncSession, instance: ModelT) -> None: ...

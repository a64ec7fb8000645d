"""Repository for Subscriber rows."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.dtos import SubscriberCreateDTO
from app.models.subscriber import Subscriber


class SubscriberRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_email(self, email: str) -> Subscriber | None:
        result = await self.session.execute(select(Subscriber).where(Subscriber.email == email))
        return result.scalar_one_or_none()

    async def insert(self, email: str, *, consent: bool = True) -> Subscriber:
        """Add a subscriber; raises IntegrityError on a duplicate email."""
        subscriber = Subscriber.create(self.session, SubscriberCreateDTO(email=email, consent=consent))
        await self.session.flush()
        return subscriber

    async def count(self) -> int:
        result = await self.session.execute(select(func.count(Subscriber.id)))
        return int(result.scalar_one())

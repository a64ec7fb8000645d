"""Newsletter signup."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal

from email_validator import EmailNotValidError, validate_email
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ValidationError
from app.repositories.subscriber_repository import SubscriberRepository

logger = logging.getLogger(__name__)

MAX_EMAIL_LENGTH = 255


@dataclass(frozen=True, slots=True)
class SubscribeResult:
    status: Literal["subscribed", "already_subscribed"]
    email: str

    @property
    def created(self) -> bool:
        return self.status == "subscribed"

    @property
    def message(self) -> str:
        if self.created:
            return "You're subscribed. Watch your inbox for the next brief."
        return "You're already subscribed."


def normalize_email(raw: str) -> str:
    """Trim and lower-case; raise `ValidationError` on a bad shape or length."""
    email = (raw or "").strip().lower()
    if not email:
        raise ValidationError("Email is required")
    if len(email) > MAX_EMAIL_LENGTH:
        raise ValidationError(f"Email must be at most {MAX_EMAIL_LENGTH} characters")
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError as e:
        raise ValidationError("Please enter a valid email address", {"reason": str(e)}) from e
    return email


class SubscriptionService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.subscribers = SubscriberRepository(session)

    async def subscribe(self, raw_email: str, *, consent: bool) -> SubscribeResult:
        """Add the subscriber once; repeats report `already_subscribed`."""
        email = normalize_email(raw_email)
        if not consent:
            raise ValidationError("Consent is required to subscribe")

        if await self.subscribers.get_by_email(email) is not None:
            return SubscribeResult(status="already_subscribed", email=email)

        try:
            async with self.session.begin_nested():
                await self.subscribers.insert(email, consent=True)
        except IntegrityError:
            logger.info("Concurrent duplicate signup", extra={"email": email})
            return SubscribeResult(status="already_subscribed", email=email)

        logger.info("Subscriber added", extra={"email": email})
        return SubscribeResult(status="subscribed", email=email)

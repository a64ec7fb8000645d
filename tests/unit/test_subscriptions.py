"""Tests for newsletter signup."""

from __future__ import annotations

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ValidationError
from app.repositories.subscriber_repository import SubscriberRepository
from app.services.subscriptions import SubscriptionService, normalize_email


@pytest.mark.asyncio
async def test_subscribe_is_idempotent_for_normalized_email(db_session: AsyncSession) -> None:
    service = SubscriptionService(db_session)

    first = await service.subscribe("  Reader@Example.COM ", consent=True)
    second = await service.subscribe("reader@example.com", consent=True)

    assert first.status == "subscribed"
    assert first.created
    assert second.status == "already_subscribed"
    assert not second.created
    assert await SubscriberRepository(db_session).count() == 1

    stored = await SubscriberRepository(db_session).get_by_email("reader@example.com")
    assert stored is not None
    assert stored.consent is True
    assert stored.status == "active"


@pytest.mark.asyncio
async def test_concurrent_duplicate_reports_already_subscribed(
    db_session: AsyncSession,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    service = SubscriptionService(db_session)
    await service.subscribe("reader@example.com", consent=True)
    await db_session.commit()

    async def _not_found(email: str) -> None:
        return None

    monkeypatch.setattr(service.subscribers, "get_by_email", _not_found)

    result = await service.subscribe("reader@example.com", consent=True)

    assert result.status == "already_subscribed"
    assert await SubscriberRepository(db_session).count() == 1


@pytest.mark.asyncio
async def test_subscribe_requires_consent(db_session: AsyncSession) -> None:
    with pytest.raises(ValidationError, match="Consent"):
        await SubscriptionService(db_session).subscribe("reader@example.com", consent=False)

    assert await SubscriberRepository(db_session).count() == 0


@pytest.mark.parametrize("raw", ["", "   ", "not-an-email", "a@", "@example.com", "two@@example.com"])
def test_normalize_email_rejects_invalid_addresses(raw: str) -> None:
    with pytest.raises(ValidationError):
        normalize_email(raw)


def test_normalize_email_rejects_overlong_addresses() -> None:
    with pytest.raises(ValidationError, match="at most 255"):
        normalize_email(f"{'a' * 250}@example.com")


def test_normalize_email_lowercases_and_trims() -> None:
    assert normalize_email("  Counsel@Firm.IN ") == "counsel@firm.in"


@pytest.mark.asyncio
async def test_mixed_case_signup_stores_one_lowercase_row(db_session: AsyncSession) -> None:
    service = SubscriptionService(db_session)

    await service.subscribe("A@Example.com", consent=True)
    await service.subscribe("a@example.com", consent=True)

    repo = SubscriberRepository(db_session)
    assert await repo.count() == 1
    assert await repo.get_by_email("a@example.com") is not None

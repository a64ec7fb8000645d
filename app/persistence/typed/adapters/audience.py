"""Subscriber write adapter."""

from __future__ import annotations

from app.models.dtos import SubscriberCreateDTO, SubscriberPatchDTO
from app.models.subscriber import Subscriber
from app.persistence.typed.adapters._base import BaseWriteAdapter

SUBSCRIBER_PATCH_ALLOWLIST = {
    "consent",
    "status",
}

_SUBSCRIBER_ADAPTER = BaseWriteAdapter[Subscriber, SubscriberCreateDTO, SubscriberPatchDTO](
    model_cls=Subscriber,
    patch_allowlist=SUBSCRIBER_PATCH_ALLOWLIST,
)


def register() -> None:
    """Register audience adapters."""
    from app.persistence.typed.registry import register_adapter

    register_adapter(Subscriber, _SUBSCRIBER_ADAPTER)

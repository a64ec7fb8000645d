"""Dataclass DTOs for typed model writes.

Create DTOs carry the constructor payload; patch DTOs are sparse and only
report the fields the caller actually supplied.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, ClassVar


class _SparsePatch:
    """Shared behaviour for patch DTOs with a `_provided_fields` slot."""

    _provided_fields: set[str]

    @classmethod
    def from_partial(cls, payload: dict[str, Any]) -> Any:
        obj = cls(**payload)
        obj._provided_fields = set(payload.keys())
        return obj

    def to_patch_dict(self) -> dict[str, Any]:
        payload = asdict(self)  # type: ignore[call-overload]
        payload.pop("_provided_fields", None)
        return {key: value for key, value in payload.items() if key in self._provided_fields}


class _DropNoneCreate:
    """Shared `to_orm_kwargs` that lets ORM defaults fill omitted optionals."""

    _DROP_NONE_FIELDS: ClassVar[set[str]] = set()

    def to_orm_kwargs(self) -> dict[str, Any]:
        payload = asdict(self)  # type: ignore[call-overload]
        for key in self._DROP_NONE_FIELDS:
            if payload.get(key) is None:
                payload.pop(key, None)
        return payload


@dataclass(slots=True)
class BriefCreateDTO(_DropNoneCreate):
    """Create DTO for `Brief`."""

    title: str
    deep_dive_text: str
    category: str | None = None
    fun_fact: str | None = None
    radar_points: list[str] | None = None
    jargon_term: str | None = None
    jargon_def: str | None = None
    social_caption: str | None = None
    cover_image: str | None = None
    audio_summary_url: str | None = None
    status: Any | None = None
    publish_date: datetime | None = None
    author_id: str | None = None

    _DROP_NONE_FIELDS: ClassVar[set[str]] = {"category", "radar_points", "status"}


@dataclass(slots=True)
class BriefPatchDTO(_SparsePatch):
    """Sparse patch DTO for `Brief`."""

    title: str | None = None
    deep_dive_text: str | None = None
    category: str | None = None
    fun_fact: str | None = None
    radar_points: list[str] | None = None
    jargon_term: str | None = None
    jargon_def: str | None = None
    social_caption: str | None = None
    cover_image: str | None = None
    audio_summary_url: str | None = None
    status: Any | None = None
    publish_date: datetime | None = None
    author_id: str | None = None
    _provided_fields: set[str] = field(default_factory=set, repr=False, compare=False)


@dataclass(slots=True)
class SubscriberCreateDTO(_DropNoneCreate):
    """Create DTO for `Subscriber`."""

    email: str
    consent: bool = True
    status: str | None = None

    _DROP_NONE_FIELDS: ClassVar[set[str]] = {"status"}


@dataclass(slots=True)
class SubscriberPatchDTO(_SparsePatch):
    """Sparse patch DTO for `Subscriber`."""

    email: str | None = None
    consent: bool | None = None
    status: str | None = None
    _provided_fields: set[str] = field(default_factory=set, repr=False, compare=False)


@dataclass(slots=True)
class UserCreateDTO(_DropNoneCreate):
    """Create DTO for `User`."""

    email: str
    hashed_password: str
    full_name: str | None = None
    is_active: bool | None = None

    _DROP_NONE_FIELDS: ClassVar[set[str]] = {"is_active"}


@dataclass(slots=True)
class UserPatchDTO(_SparsePatch):
    """Sparse patch DTO for `User`."""

    hashed_password: str | None = None
    full_name: str | None = None
    is_active: bool | None = None
    _provided_fields: set[str] = field(default_factory=set, repr=False, compare=False)


@dataclass(slots=True)
class UserRoleCreateDTO(_DropNoneCreate):
    """Create DTO for `UserRole`."""

    user_id: str
    role: str


@dataclass(slots=True)
class UserRolePatchDTO(_SparsePatch):
    """Sparse patch DTO for `UserRole`."""

    role: str | None = None
    _provided_fields: set[str] = field(default_factory=set, repr=False, compare=False)


@dataclass(slots=True)
class AdminAuditEventCreateDTO(_DropNoneCreate):
    """Create DTO for `AdminAuditEvent`."""

    action: str
    user_id: str | None = None
    target_type: str | None = None
    target_id: str | None = None
    details: dict[str, Any] | None = None

    _DROP_NONE_FIELDS: ClassVar[set[str]] = {"details"}


@dataclass(slots=True)
class AdminAuditEventPatchDTO(_SparsePatch):
    """Mirrors the columns; the adapter allowlist is empty, so events are append-only."""

    action: str | None = None
    target_type: str | None = None
    target_id: str | None = None
    details: dict[str, Any] | None = None
    _provided_fields: set[str] = field(default_factory=set, repr=False, compare=False)


__all__ = [
    "AdminAuditEventCreateDTO",
    "AdminAuditEventPatchDTO",
    "BriefCreateDTO",
    "BriefPatchDTO",
    "SubscriberCreateDTO",
    "SubscriberPatchDTO",
    "UserCreateDTO",
    "UserPatchDTO",
    "UserRoleCreateDTO",
    "UserRolePatchDTO",
]

"""Authentication and audit write adapters."""

from __future__ import annotations

from app.models.audit import AdminAuditEvent
from app.models.dtos import (
    AdminAuditEventCreateDTO,
    AdminAuditEventPatchDTO,
    UserCreateDTO,
    UserPatchDTO,
    UserRoleCreateDTO,
    UserRolePatchDTO,
)
from app.models.user import User, UserRole
from app.persistence.typed.adapters._base import BaseWriteAdapter

USER_PATCH_ALLOWLIST = {
    "hashed_password",
    "full_name",
    "is_active",
}

USER_ROLE_PATCH_ALLOWLIST = {
    "role",
}

_USER_ADAPTER = BaseWriteAdapter[User, UserCreateDTO, UserPatchDTO](
    model_cls=User,
    patch_allowlist=USER_PATCH_ALLOWLIST,
)

_USER_ROLE_ADAPTER = BaseWriteAdapter[UserRole, UserRoleCreateDTO, UserRolePatchDTO](
    model_cls=UserRole,
    patch_allowlist=USER_ROLE_PATCH_ALLOWLIST,
)

_AUDIT_EVENT_ADAPTER = BaseWriteAdapter[
    AdminAuditEvent,
    AdminAuditEventCreateDTO,
    AdminAuditEventPatchDTO,
](
    model_cls=AdminAuditEvent,
    patch_allowlist=set(),
)


def register() -> None:
    """Register auth adapters."""
    from app.persistence.typed.registry import register_adapter

    register_adapter(User, _USER_ADAPTER)
    register_adapter(UserRole, _USER_ROLE_ADAPTER)
    register_adapter(AdminAuditEvent, _AUDIT_EVENT_ADAPTER)

"""Operator accounts and role claims."""

from __future__ import annotations

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base, StringUUID, TimestampMixin, TypedModelMixin, UUIDMixin
from app.models.dtos import UserCreateDTO, UserPatchDTO, UserRoleCreateDTO, UserRolePatchDTO


class User(TypedModelMixin[UserCreateDTO, UserPatchDTO], Base, UUIDMixin, TimestampMixin):
    """Identity that can sign in to the admin console."""

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    full_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    is_active: Mapped[bool] = mapped_column(default=True, nullable=False)

    roles: Mapped[list[UserRole]] = relationship(
        "UserRole",
        back_populates="user",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<User {self.email}>"


class UserRole(TypedModelMixin[UserRoleCreateDTO, UserRolePatchDTO], Base, UUIDMixin, TimestampMixin):
    """Role claim held by a user (e.g. `admin`)."""

    __tablename__ = "user_roles"
    __table_args__ = (UniqueConstraint("user_id", "role", name="uq_user_roles_user_role"),)

    user_id: Mapped[str] = mapped_column(
        StringUUID(),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role: Mapped[str] = mapped_column(String(32), nullable=False)

    user: Mapped[User] = relationship("User", back_populates="roles")

    def __repr__(self) -> str:
        return f"<UserRole {self.user_id}:{self.role}>"

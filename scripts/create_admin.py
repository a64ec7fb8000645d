"""Create an operator account (or promote an existing one) with the admin role."""

from __future__ import annotations

import argparse
import asyncio
import getpass

from sqlalchemy import select

from app.config import settings
from app.core.database import close_db, get_session_context
from app.core.security import get_password_hash
from app.models.dtos import UserCreateDTO, UserPatchDTO, UserRoleCreateDTO
from app.models.user import User, UserRole


async def _create_admin(email: str, password: str | None, full_name: str | None) -> str:
    normalized = email.strip().lower()
    async with get_session_context() as session:
        result = await session.execute(select(User).where(User.email == normalized))
        user = result.scalar_one_or_none()

        if user is None:
            if not password:
                raise SystemExit("A password is required for a new account")
            user = User.create(
                session,
                UserCreateDTO(
                    email=normalized,
                    hashed_password=get_password_hash(password),
                    full_name=full_name,
                ),
            )
            await session.flush()
            outcome = "created"
        else:
            if password:
                user.patch(
                    session,
                    UserPatchDTO.from_partial({"hashed_password": get_password_hash(password)}),
                )
            outcome = "updated"

        role_result = await session.execute(
            select(UserRole).where(UserRole.user_id == user.id, UserRole.role == settings.admin_role)
        )
        if role_result.scalar_one_or_none() is None:
            UserRole.create(session, UserRoleCreateDTO(user_id=user.id, role=settings.admin_role))
        await session.flush()
        return f"Admin {outcome}: {user.email} ({user.id})"


async def _run(args: argparse.Namespace) -> None:
    try:
        message = await _create_admin(args.email, args.password, args.full_name)
    finally:
        await close_db()
    print(message)


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("email")
    parser.add_argument("--full-name", default=None)
    parser.add_argument(
        "--password",
        default=None,
        help="Omit to be prompted (keeps the password out of shell history).",
    )
    args = parser.parse_args()
    if args.password is None:
        args.password = getpass.getpass("Password (leave blank to keep existing): ") or None

    asyncio.run(_run(args))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

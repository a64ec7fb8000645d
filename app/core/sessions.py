"""Explicit session lifecycle: sign in, refresh, sign out, resolve."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from redis.asyncio import Redis
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.exceptions import InvalidCredentialsError, InvalidTokenError, UnauthorizedError
from app.core.security import TokenClaims, create_token, decode_token, verify_password
from app.models.base import utc_now
from app.models.user import User, UserRole

logger = logging.getLogger(__name__)

REVOKED_KEY_PREFIX = "intel:revoked:"


@dataclass(frozen=True, slots=True)
class AuthSession:
    """The identity behind one request, resolved from its access token."""

    user_id: str
    email: str
    roles: frozenset[str]
    token_id: str
    expires_at: datetime

    @property
    def is_admin(self) -> bool:
        return settings.admin_role in self.roles


@dataclass(frozen=True, slots=True)
class TokenPair:
    access_token: str
    refresh_token: str
    expires_at: datetime


class SessionService:
    """Issues, rotates, revokes and resolves JWT-backed sessions.

    Revoked token ids are kept in Redis until the token would have expired
    anyway.
    """

    def __init__(self, db: AsyncSession, redis: Redis) -> None:
        self.db = db
        self.redis = redis

    async def sign_in(self, email: str, password: str) -> TokenPair:
        user = await self._get_user_by_email(email.strip().lower())
        if user is None or not verify_password(password, user.hashed_password):
            logger.info("Sign-in rejected", extra={"email": email})
            raise InvalidCredentialsError()
        if not user.is_active:
            raise UnauthorizedError("Account is disabled")

        logger.info("Signed in", extra={"user_id": user.id})
        return self._issue(user.id)

    async def refresh(self, refresh_token: str) -> TokenPair:
        """Rotate the pair; the presented refresh token cannot be used again."""
        claims = decode_token(refresh_token, expected_type="refresh")
        await self._ensure_not_revoked(claims)
        user = await self.db.get(User, claims.subject)
        if user is None or not user.is_active:
            raise InvalidTokenError("User not found or inactive")

        await self._revoke(claims)
        return self._issue(user.id)

    async def sign_out(self, session: AuthSession, refresh_token: str | None = None) -> None:
        await self.redis.set(
            f"{REVOKED_KEY_PREFIX}{session.token_id}",
            "1",
            ex=max(1, int((session.expires_at - utc_now()).total_seconds())),
        )
        if refresh_token:
            try:
                claims = decode_token(refresh_token, expected_type="refresh")
            except InvalidTokenError:
                logger.info("Ignoring invalid refresh token at sign-out", extra={"user_id": session.user_id})
            else:
                if claims.subject == session.user_id:
                    await self._revoke(claims)
        logger.info("Signed out", extra={"user_id": session.user_id})

    async def resolve(self, access_token: str) -> AuthSession:
        """Validate the access token and load the user's current roles."""
        claims = decode_token(access_token, expected_type="access")
        await self._ensure_not_revoked(claims)

        user = await self.db.get(User, claims.subject)
        if user is None or not user.is_active:
            raise InvalidTokenError("User not found or inactive")

        return AuthSession(
            user_id=user.id,
            email=user.email,
            roles=await self._load_roles(user.id),
            token_id=claims.token_id,
            expires_at=claims.expires_at,
        )

    def _issue(self, user_id: str) -> TokenPair:
        access_token, access_claims = create_token(user_id, "access")
        refresh_token, _ = create_token(user_id, "refresh")
        return TokenPair(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_at=access_claims.expires_at,
        )

    async def _revoke(self, claims: TokenClaims) -> None:
        ttl = claims.remaining_seconds()
        if ttl > 0:
            await self.redis.set(f"{REVOKED_KEY_PREFIX}{claims.token_id}", "1", ex=ttl)

    async def _ensure_not_revoked(self, claims: TokenClaims) -> None:
        if await self.redis.exists(f"{REVOKED_KEY_PREFIX}{claims.token_id}"):
            raise InvalidTokenError("Session has been signed out")

    async def _load_roles(self, user_id: str) -> frozenset[str]:
        result = await self.db.execute(select(UserRole.role).where(UserRole.user_id == user_id))
        return frozenset(result.scalars().all())

    async def _get_user_by_email(self, email: str) -> User | None:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

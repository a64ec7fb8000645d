"""JWT session tokens and password hashing utilities."""

import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Literal

import bcrypt
from jose import JWTError, jwt

from app.config import settings
from app.core.exceptions import InvalidTokenError

logger = logging.getLogger(__name__)

TokenType = Literal["access", "refresh"]


@dataclass(frozen=True, slots=True)
class TokenClaims:
    """Decoded, validated token claims."""

    subject: str
    token_id: str
    token_type: TokenType
    expires_at: datetime

    def remaining_seconds(self, now: datetime | None = None) -> int:
        current = now or datetime.now(timezone.utc)
        return max(0, int((self.expires_at - current).total_seconds()))


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def _lifetime(token_type: TokenType) -> timedelta:
    if token_type == "refresh":
        return timedelta(days=settings.refresh_token_expire_days)
    return timedelta(minutes=settings.access_token_expire_minutes)


def create_token(
    subject: str,
    token_type: TokenType = "access",
    expires_delta: timedelta | None = None,
) -> tuple[str, TokenClaims]:
    """Create a signed JWT and return it with its claims."""
    expire = datetime.now(timezone.utc) + (expires_delta or _lifetime(token_type))
    claims = TokenClaims(
        subject=subject,
        token_id=secrets.token_urlsafe(16),
        token_type=token_type,
        expires_at=expire,
    )
    to_encode: dict[str, Any] = {
        "sub": subject,
        "jti": claims.token_id,
        "type": token_type,
        "exp": expire,
    }
    token = jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)
    return token, claims


def decode_token(token: str, expected_type: TokenType = "access") -> TokenClaims:
    """Decode and validate a JWT; raise `InvalidTokenError` on any problem."""
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        logger.warning("Token decode failed", extra={"error": str(e)})
        raise InvalidTokenError() from e

    token_type = payload.get("type")
    if token_type != expected_type:
        logger.warning("Token type mismatch", extra={"expected": expected_type, "got": token_type})
        raise InvalidTokenError(f"Expected {expected_type} token")

    subject = payload.get("sub")
    token_id = payload.get("jti")
    if not subject or not token_id:
        logger.warning("Token missing subject or id")
        raise InvalidTokenError("Token missing subject")

    return TokenClaims(
        subject=str(subject),
        token_id=str(token_id),
        token_type=expected_type,
        expires_at=datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc),
    )

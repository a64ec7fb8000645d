"""Authentication API endpoints."""

import logging

from fastapi import APIRouter, status

from app.dependencies import CurrentSession, Sessions
from app.schemas.auth import LogoutRequest, SessionResponse, Token, TokenRefresh, UserLogin

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=Token)
async def login(credentials: UserLogin, sessions: Sessions) -> Token:
    """Sign in and get an access/refresh token pair."""
    logger.info("Login attempt", extra={"email": credentials.email})
    pair = await sessions.sign_in(credentials.email, credentials.password)
    return Token(
        access_token=pair.access_token,
        refresh_token=pair.refresh_token,
        expires_at=pair.expires_at,
    )


@router.post("/refresh", response_model=Token)
async def refresh_token(payload: TokenRefresh, sessions: Sessions) -> Token:
    """Rotate the token pair using a refresh token."""
    pair = await sessions.refresh(payload.refresh_token)
    return Token(
        access_token=pair.access_token,
        refresh_token=pair.refresh_token,
        expires_at=pair.expires_at,
    )


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(session: CurrentSession, sessions: Sessions, payload: LogoutRequest | None = None) -> None:
    """Invalidate the current session (and the refresh token, if supplied)."""
    await sessions.sign_out(session, payload.refresh_token if payload else None)


@router.get("/me", response_model=SessionResponse)
async def me(session: CurrentSession) -> SessionResponse:
    """Return the caller's session."""
    return SessionResponse(
        user_id=session.user_id,
        email=session.email,
        roles=sorted(session.roles),
        is_admin=session.is_admin,
        expires_at=session.expires_at,
    )

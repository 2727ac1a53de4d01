"""
Security utilities for the LocaLink backend.

Sign-in and sessions belong to the external auth provider. This module only:
- Verifies the provider's HS256 access tokens and extracts the actor identity
- Mints tokens with the same shape (local development and tests)
- Implements the presence-only bearer check of the gated relay write
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials as HTTPAuthCredentials
from pydantic import BaseModel
import jwt

from app.config import get_settings
from core.exceptions import UnauthenticatedError, UnauthorizedError

ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = 60

# auto_error=False so a missing header surfaces as UnauthenticatedError
security_scheme = HTTPBearer(auto_error=False)


class Actor(BaseModel):
    """Authenticated actor identity taken from an access token."""

    id: str
    email: str = ""


def create_access_token(user_id: str, email: str, expires_minutes: int = ACCESS_TOKEN_EXPIRE_MINUTES) -> str:
    """
    Create an access token shaped like the auth provider's.

    Args:
        user_id: User ID (``sub`` claim)
        email: User email
        expires_minutes: Token lifetime

    Returns:
        Encoded JWT token
    """
    settings = get_settings()
    now = datetime.now(timezone.utc)

    payload = {
        "sub": user_id,
        "email": email,
        "aud": settings.AUTH_JWT_AUDIENCE,
        "role": "authenticated",
        "iat": now,
        "exp": now + timedelta(minutes=expires_minutes),
    }
    return jwt.encode(payload, settings.AUTH_JWT_SECRET, algorithm=ALGORITHM)


def verify_token(token: str) -> Actor:
    """
    Verify and decode an access token.

    Args:
        token: Encoded JWT token

    Returns:
        Actor carried by the token

    Raises:
        UnauthenticatedError: If the token is invalid, expired or has no subject
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.AUTH_JWT_SECRET,
            algorithms=[ALGORITHM],
            audience=settings.AUTH_JWT_AUDIENCE,
        )
    except jwt.ExpiredSignatureError:
        raise UnauthenticatedError("Token has expired")
    except jwt.InvalidTokenError:
        raise UnauthenticatedError("Invalid token")

    user_id = payload.get("sub")
    if not user_id:
        raise UnauthenticatedError("Invalid token payload")

    return Actor(id=user_id, email=payload.get("email") or "")


async def get_current_actor(
    credentials: Optional[HTTPAuthCredentials] = Depends(security_scheme),
) -> Actor:
    """
    FastAPI dependency returning the authenticated actor.

    Raises:
        UnauthenticatedError: If no bearer token is present or it does not verify
    """
    if not credentials or not credentials.credentials:
        raise UnauthenticatedError()
    return verify_token(credentials.credentials)


def require_bearer_presence(request: Request) -> str:
    """Presence-only authorization check for inbound automation writes.

    The token value is not validated; any non-empty ``Bearer <token>``
    header is accepted.

    Returns:
        The raw token

    Raises:
        UnauthorizedError: If the header is absent or empty
    """
    header = request.headers.get("authorization", "").strip()
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise UnauthorizedError()
    return token.strip()

import hmac
import logging
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt
from fastapi import Depends, Header, Request

from catalog.config import Settings, get_settings
from catalog.exceptions import InvalidCredentialsError, InvalidTokenError, MissingTokenError

logger = logging.getLogger(__name__)


def create_access_token(username: str, settings: Settings, now: datetime | None = None) -> str:
    issued_at = now or datetime.now(timezone.utc)
    claims = {
        "username": username,
        "iat": issued_at,
        "exp": issued_at + timedelta(hours=settings.TOKEN_TTL_HOURS),
    }
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str, settings: Settings) -> dict:
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except jwt.InvalidTokenError as e:
        logger.info(f"Rejected token: {e}")
        raise InvalidTokenError()


def _same(given: Any, expected: str) -> bool:
    if not isinstance(given, str):
        return False
    return hmac.compare_digest(given.encode("utf-8"), expected.encode("utf-8"))


def authenticate_admin(username: Any, password: Any, settings: Settings) -> str:
    """
    Exchange the configured admin pair for a signed token.

    Both values must match exactly, anything else raises
    InvalidCredentialsError.
    """
    # evaluate both so a wrong username costs the same as a wrong password
    user_ok = _same(username, settings.ADMIN_USERNAME)
    password_ok = _same(password, settings.ADMIN_PASSWORD)
    if not (user_ok and password_ok):
        logger.warning("Failed admin login attempt")
        raise InvalidCredentialsError()

    logger.info(f"Admin '{username}' logged in")
    return create_access_token(username, settings)


def extract_bearer_token(authorization: str | None) -> str:
    if not authorization or not authorization.strip():
        raise MissingTokenError()

    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer":
        raise InvalidTokenError()
    token = token.strip()
    if not token:
        raise MissingTokenError()
    return token


async def require_token(
    request: Request,
    authorization: str | None = Header(default=None),
    settings: Settings = Depends(get_settings),
) -> dict:
    """Route guard: verify the bearer token and attach its claims to the request."""
    token = extract_bearer_token(authorization)
    user = decode_access_token(token, settings)
    request.state.user = user
    return user


async def require_token_on_update(
    request: Request,
    authorization: str | None = Header(default=None),
    settings: Settings = Depends(get_settings),
) -> dict | None:
    if not settings.REQUIRE_AUTH_ON_UPDATE:
        return None
    return await require_token(request, authorization, settings)

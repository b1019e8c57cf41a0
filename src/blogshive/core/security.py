"""Bearer token helpers built on python-jose."""
from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any

from jose import jwt

from blogshive.core.settings import settings


def create_access_token(subject: int | str, extra_claims: dict[str, Any] | None = None) -> str:
    """Create a signed JWT whose ``sub`` claim is the user id.

    Args:
        subject: User id; stored as a string claim.
        extra_claims: Additional claims merged into the payload.

    Returns:
        The encoded token.
    """
    to_encode: dict[str, Any] = {"sub": str(subject)}
    if extra_claims:
        to_encode.update(extra_claims)
    to_encode["exp"] = datetime.now(UTC) + timedelta(minutes=settings.access_token_expire_minutes)
    encoded_jwt: str = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt


def decode_access_token(token: str) -> dict[str, Any]:
    """Decode and verify a token, raising ``jose.JWTError`` when invalid or expired."""
    payload: dict[str, Any] = jwt.decode(
        token,
        settings.secret_key,
        algorithms=[settings.jwt_algorithm],
    )
    return payload

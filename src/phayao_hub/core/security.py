"""Password hashing and access token utilities."""
from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
from jose import jwt

from phayao_hub.core.settings import settings


def hash_password(password: str) -> str:
    """Return a bcrypt hash of `password` using the configured cost factor."""
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Return True if `password` matches the stored bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed hash in storage; treat as a mismatch.
        return False


def create_access_token(
    user_id: int,
    extra_claims: dict[str, Any] | None = None,
    expires_minutes: int | None = None,
) -> str:
    """Create a signed JWT access token for a user.

    Args:
        user_id: Primary key of the authenticated user, stored in `sub`.
        extra_claims: Additional claims such as username, role and status.
        expires_minutes: Override for the configured token lifetime.

    Returns:
        Encoded JWT string.
    """
    to_encode: dict[str, Any] = {"sub": str(user_id)}
    if extra_claims:
        to_encode.update(extra_claims)
    lifetime = settings.access_token_expire_minutes if expires_minutes is None else expires_minutes
    to_encode["exp"] = datetime.now(UTC) + timedelta(minutes=lifetime)
    encoded_jwt: str = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt


def decode_access_token(token: str) -> dict[str, Any]:
    """Decode and verify a JWT access token.

    Raises:
        jose.ExpiredSignatureError: If the token has expired.
        jose.JWTError: If the token is malformed or the signature is invalid.
    """
    payload: dict[str, Any] = jwt.decode(
        token,
        settings.secret_key,
        algorithms=[settings.jwt_algorithm],
    )
    return payload

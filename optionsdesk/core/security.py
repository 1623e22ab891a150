"""Password hashing and JWT issuing/verification for access and refresh tokens."""

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import bcrypt
import jwt
from pydantic import ValidationError

from optionsdesk.core.exceptions import InvalidInputError, InvalidTokenError
from optionsdesk.schemas.auth import PASSWORD_MAX_BYTES, TokenPayload

if TYPE_CHECKING:
    from optionsdesk.core.config import Settings
    from optionsdesk.models.user import User

DEFAULT_BCRYPT_ROUNDS = 10

REQUIRED_CLAIMS = ["sub", "exp", "iat"]


def hash_password(plain_password: str, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> str:
    """
    Hash a plain-text password for storage. Do not store plain passwords.

    Raises InvalidInputError for passwords over bcrypt's 72-byte limit; they are
    never truncated, so two different passwords can not share a hash.
    """
    pw_bytes = plain_password.encode("utf-8")
    if len(pw_bytes) > PASSWORD_MAX_BYTES:
        raise InvalidInputError(f"Password must be at most {PASSWORD_MAX_BYTES} bytes.")
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash. A malformed hash never matches."""
    pw_bytes = plain_password.encode("utf-8")
    # Nothing longer can have been hashed.
    if len(pw_bytes) > PASSWORD_MAX_BYTES:
        return False
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def _encode_token(user: "User", secret: str, algorithm: str, lifetime: timedelta) -> str:
    now = datetime.now(UTC)
    payload: dict[str, Any] = {
        "sub": str(user.id),
        "email": user.email,
        "username": user.username,
        "iat": now,
        "exp": now + lifetime,
    }
    return jwt.encode(payload, secret, algorithm=algorithm)


def create_access_token(user: "User", settings: "Settings") -> str:
    """Create a short-lived access token signed with the access secret."""
    return _encode_token(
        user,
        settings.JWT_ACCESS_SECRET.get_secret_value(),
        settings.JWT_ALGORITHM,
        timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )


def create_refresh_token(user: "User", settings: "Settings") -> str:
    """Create a long-lived refresh token signed with the refresh secret."""
    return _encode_token(
        user,
        settings.JWT_REFRESH_SECRET.get_secret_value(),
        settings.JWT_ALGORITHM,
        timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
    )


def decode_token(token: str, secret: str, algorithm: str) -> TokenPayload:
    """
    Decode and validate a JWT against one secret; return its payload.

    Raises InvalidTokenError on bad signature, wrong secret, expiry, malformed
    token, or missing claims.
    """
    try:
        claims = jwt.decode(
            token,
            secret,
            algorithms=[algorithm],
            options={"require": REQUIRED_CLAIMS},
        )
        return TokenPayload.model_validate(claims)
    except (jwt.PyJWTError, ValidationError) as e:
        raise InvalidTokenError() from e


def decode_access_token(token: str, settings: "Settings") -> TokenPayload:
    """Verify an access token."""
    return decode_token(
        token, settings.JWT_ACCESS_SECRET.get_secret_value(), settings.JWT_ALGORITHM
    )


def decode_refresh_token(token: str, settings: "Settings") -> TokenPayload:
    """Verify a refresh token."""
    return decode_token(
        token, settings.JWT_REFRESH_SECRET.get_secret_value(), settings.JWT_ALGORITHM
    )

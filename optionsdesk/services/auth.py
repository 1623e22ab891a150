"""Auth service: registration, login, token validation/refresh, password change, logout.

Stateless between calls: a session is wholly the bearer token the client holds.
"""

import logging
from functools import lru_cache
from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from optionsdesk.core.exceptions import (
    DuplicateEmailError,
    InvalidCredentialsError,
    InvalidCurrentPasswordError,
    InvalidTokenError,
    UserNotFoundError,
)
from optionsdesk.core.security import (
    create_access_token,
    create_refresh_token,
    decode_access_token,
    decode_refresh_token,
    hash_password,
    verify_password,
)
from optionsdesk.models import ExperienceLevel, User
from optionsdesk.schemas.auth import (
    AuthResponse,
    ChangePasswordRequest,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    TokenPayload,
    UserResponse,
)
from optionsdesk.services.users import (
    commit_or_duplicate_email,
    get_profile,
    get_user_by_email,
    normalize_email,
)

if TYPE_CHECKING:
    from optionsdesk.core.config import Settings

logger = logging.getLogger(__name__)


@lru_cache
def _dummy_hash(rounds: int) -> str:
    """A hash no password matches, checked against when the email is unknown."""
    return hash_password("unknown-user-placeholder", rounds)


def _issue_tokens(user: User, settings: "Settings") -> AuthResponse:
    return AuthResponse(
        user=UserResponse.model_validate(user),
        access_token=create_access_token(user, settings),
        refresh_token=create_refresh_token(user, settings),
    )


def register(db: Session, settings: "Settings", body: RegisterRequest) -> AuthResponse:
    """
    Create a user and issue an access/refresh token pair.

    Raises DuplicateEmailError if the email is taken, including when a
    concurrent registration wins the race at commit.
    """
    email = normalize_email(body.email)
    if get_user_by_email(db, email) is not None:
        raise DuplicateEmailError()

    level = body.experience_level or ExperienceLevel.NOVICE
    user = User(
        username=body.username,
        email=email,
        password_hash=hash_password(body.password, settings.BCRYPT_ROUNDS),
        experience_level=level.value,
    )
    db.add(user)
    commit_or_duplicate_email(db)
    db.refresh(user)

    logger.info("User registered", extra={"event": "register", "user_id": user.id})
    return _issue_tokens(user, settings)


def login(db: Session, settings: "Settings", body: LoginRequest) -> AuthResponse:
    """
    Check credentials, touch updated_at, and issue a fresh token pair.

    Unknown email and wrong password raise the same InvalidCredentialsError.
    """
    user = get_user_by_email(db, body.email)
    # Run bcrypt either way so response time does not reveal whether the email exists.
    stored_hash = user.password_hash if user is not None else _dummy_hash(settings.BCRYPT_ROUNDS)
    if not verify_password(body.password, stored_hash) or user is None:
        logger.warning("Login failed", extra={"event": "login_failed"})
        raise InvalidCredentialsError()

    user.touch()
    db.commit()
    db.refresh(user)

    logger.info("User logged in", extra={"event": "login", "user_id": user.id})
    return _issue_tokens(user, settings)


def validate_token(settings: "Settings", token: str) -> TokenPayload:
    """Verify an access token and return its payload. Raises InvalidTokenError."""
    try:
        return decode_access_token(token, settings)
    except InvalidTokenError:
        logger.warning("Access token rejected", extra={"event": "invalid_token"})
        raise


def get_current_user(db: Session, user_id: str) -> User:
    """Load the user a token refers to. Raises UserNotFoundError."""
    return get_profile(db, user_id)


def change_password(
    db: Session,
    settings: "Settings",
    user_id: str,
    body: ChangePasswordRequest,
) -> MessageResponse:
    """Replace the stored hash after verifying the current password; the hash is unchanged on failure."""
    user = get_profile(db, user_id)
    if not verify_password(body.current_password, user.password_hash):
        logger.warning(
            "Password change rejected", extra={"event": "change_password_failed", "user_id": user.id}
        )
        raise InvalidCurrentPasswordError()

    user.password_hash = hash_password(body.new_password, settings.BCRYPT_ROUNDS)
    user.touch()
    db.commit()

    logger.info("Password changed", extra={"event": "change_password", "user_id": user.id})
    return MessageResponse(message="Password changed successfully.")


def logout(user_id: str) -> MessageResponse:
    """
    Acknowledge logout. Nothing is revoked: the client discards its tokens,
    and an access token already issued stays valid until it expires.
    """
    logger.info("User logged out", extra={"event": "logout", "user_id": user_id})
    return MessageResponse(message="Logged out successfully.")


def refresh_tokens(db: Session, settings: "Settings", refresh_token: str) -> AuthResponse:
    """
    Exchange a refresh token for a new access/refresh pair.

    Raises InvalidTokenError if the token does not verify against the refresh
    secret or its user no longer exists.
    """
    payload = decode_refresh_token(refresh_token, settings)
    try:
        user = get_profile(db, payload.sub)
    except UserNotFoundError as e:
        raise InvalidTokenError() from e

    logger.info("Tokens refreshed", extra={"event": "refresh", "user_id": user.id})
    return _issue_tokens(user, settings)

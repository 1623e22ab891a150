"""User store access and profile management: lookups, partial update, delete."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from optionsdesk.core.exceptions import DuplicateEmailError, InvalidInputError, UserNotFoundError
from optionsdesk.models import User
from optionsdesk.schemas.auth import MessageResponse, UpdateProfileRequest

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    """Emails are compared case-insensitively; store and look them up lower-cased."""
    return email.strip().lower()


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == normalize_email(email)).first()


def get_profile(db: Session, user_id: str) -> User:
    """Return the user with this id. Raises UserNotFoundError if absent."""
    user = db.get(User, user_id)
    if user is None:
        raise UserNotFoundError(user_id)
    return user


def commit_or_duplicate_email(db: Session) -> None:
    """
    Commit the session, mapping a unique-email violation to DuplicateEmailError.

    The existence check before insert/update is not atomic with the write;
    the unique index is what rejects the loser of a concurrent race.
    """
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise DuplicateEmailError() from e


def update_profile(db: Session, user_id: str, body: UpdateProfileRequest) -> User:
    """Apply the fields present in body to the user's profile and touch updated_at."""
    # Explicit nulls leave a field unchanged, so they do not count as updates.
    if not body.model_dump(exclude_none=True):
        raise InvalidInputError("No profile fields to update.")
    user = get_profile(db, user_id)

    if body.email is not None:
        email = normalize_email(body.email)
        existing = get_user_by_email(db, email)
        if existing is not None and existing.id != user.id:
            raise DuplicateEmailError()
        user.email = email
    if body.username is not None:
        user.username = body.username
    if body.experience_level is not None:
        user.experience_level = body.experience_level.value

    user.touch()
    commit_or_duplicate_email(db)
    db.refresh(user)
    logger.info("Profile updated", extra={"event": "profile_update", "user_id": user.id})
    return user


def delete_user(db: Session, user_id: str) -> MessageResponse:
    """Hard-delete the user. Raises UserNotFoundError if absent."""
    user = get_profile(db, user_id)
    db.delete(user)
    db.commit()
    logger.info("User deleted", extra={"event": "user_delete", "user_id": user_id})
    return MessageResponse(message="User deleted.")

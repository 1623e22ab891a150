"""ORM model for application users (credentials and profile)."""

import enum
import uuid
from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, String, func

from optionsdesk.models.base import Base


class ExperienceLevel(str, enum.Enum):
    """Self-reported options-trading experience."""

    NOVICE = "NOVICE"
    INTERMEDIATE = "INTERMEDIATE"
    ADVANCED = "ADVANCED"
    EXPERT = "EXPERT"


def _new_user_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(UTC)


class User(Base):
    """
    User account: login credentials plus profile metadata.

    email is unique and stored lower-cased; it is the login key.
    """

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_new_user_id)
    username = Column(String(255), nullable=False)
    email = Column(String(320), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    experience_level = Column(
        String(32),
        nullable=False,
        default=ExperienceLevel.NOVICE.value,
        server_default=ExperienceLevel.NOVICE.value,
    )
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )

    def touch(self) -> None:
        """Refresh updated_at; call on login and on every profile or password change."""
        self.updated_at = utcnow()

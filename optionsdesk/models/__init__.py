"""SQLAlchemy ORM models."""

from optionsdesk.models.base import Base
from optionsdesk.models.user import ExperienceLevel, User

__all__ = ["Base", "ExperienceLevel", "User"]

"""Test package. Provides the environment the app needs at import time."""

import os

# optionsdesk.main builds a module-level app, which requires both signing secrets.
os.environ.setdefault("JWT_ACCESS_SECRET", "test-access-secret")
os.environ.setdefault("JWT_REFRESH_SECRET", "test-refresh-secret")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from optionsdesk.core.config import Settings  # noqa: E402
from optionsdesk.core.database import Database  # noqa: E402
from optionsdesk.models import Base  # noqa: E402


def make_settings(**overrides: object) -> Settings:
    """Settings for an in-memory SQLite database with cheap bcrypt rounds; ignores .env."""
    values: dict[str, object] = {
        "APP_ENV": "dev",
        "DATABASE_URL": "sqlite://",
        "JWT_ACCESS_SECRET": "unit-access-secret",
        "JWT_REFRESH_SECRET": "unit-refresh-secret",
        "BCRYPT_ROUNDS": 4,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def make_database(settings: Settings) -> Database:
    """Fresh database with the schema created."""
    database = Database(settings.DATABASE_URL)
    Base.metadata.create_all(database.engine)
    return database


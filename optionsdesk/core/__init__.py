"""Core app configuration, database handle, security helpers and exceptions."""

from optionsdesk.core.config import Settings, get_app_settings, get_settings
from optionsdesk.core.database import Database, get_db

__all__ = ["Database", "Settings", "get_app_settings", "get_db", "get_settings"]

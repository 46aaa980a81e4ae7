"""Core app configuration and database."""

from campus_connect.core.config import get_settings, settings
from campus_connect.core.database import get_db

__all__ = ["get_settings", "settings", "get_db"]

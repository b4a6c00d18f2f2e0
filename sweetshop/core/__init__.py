"""Core app configuration, database and errors."""

from sweetshop.core.config import Settings, get_settings, settings
from sweetshop.core.database import get_db

__all__ = ["Settings", "get_settings", "settings", "get_db"]

"""Core: settings, database sessions, security primitives and the error taxonomy."""

from app.core.config import Settings, get_settings
from app.core.database import get_db, session_scope
from app.core.errors import AppError

__all__ = ["AppError", "Settings", "get_settings", "get_db", "session_scope"]

"""Core app configuration, database, security and access policy."""

from app.core.access_policy import USER_MANAGEMENT_POLICY, Verdict, evaluate
from app.core.config import get_settings, settings
from app.core.database import get_db

__all__ = ["USER_MANAGEMENT_POLICY", "Verdict", "evaluate", "get_settings", "settings", "get_db"]

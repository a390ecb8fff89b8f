"""SQLAlchemy models."""

from src.models.dashboard import Dashboard
from src.models.user import User

__all__ = [
    "User",
    "Dashboard",
]

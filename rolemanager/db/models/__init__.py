"""Database models for the host role/user store."""

from rolemanager.db.models.role import Role
from rolemanager.db.models.user import User

__all__ = [
    "Role",
    "User",
]

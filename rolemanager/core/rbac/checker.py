"""Permission checking utilities for the role manager.

A user holds a permission when their role grants the matching capability.
"""

from typing import Mapping, Optional

from rolemanager.core.errors import PermissionDenied


class PermissionChecker:
    """Checks if a user has specific capabilities based on their role."""

    def __init__(self, role_capabilities: Optional[Mapping[str, bool]]):
        """
        Initialize with the capability map of the user's role.

        Args:
            role_capabilities: Mapping of capability name to granted flag
        """
        self.capabilities = {
            name for name, granted in (role_capabilities or {}).items() if granted
        }

    def has_permission(self, permission: str) -> bool:
        """Check if the role grants a capability."""
        return permission in self.capabilities


def has_permission(user, permission: str) -> bool:
    """
    Check if a user has a specific capability.

    Args:
        user: User model instance with role relationship
        permission: Capability name

    Returns:
        True if the user's role grants the capability
    """
    if not user or not user.role:
        return False

    checker = PermissionChecker(user.role.capabilities)
    return checker.has_permission(permission)


def ensure_permission(user, permission: str) -> None:
    """Raise PermissionDenied unless the user holds the capability."""
    if not has_permission(user, permission):
        raise PermissionDenied(permission)

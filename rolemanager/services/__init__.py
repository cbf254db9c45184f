"""Service layer for the role manager."""

from rolemanager.services.role_manager import MutationOutcome, RoleManagerService

__all__ = ["MutationOutcome", "RoleManagerService"]

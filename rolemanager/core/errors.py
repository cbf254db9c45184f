"""Error taxonomy for role management operations.

Two families:

- Hard stops (``PermissionDenied``, ``SecurityCheckFailed``) abort the request
  and are answered with HTTP 403 by the application's exception handlers.
- Recoverable errors (``InvalidRequest``, ``NotFound``, ``NoSelection``) abort
  the operation before any mutation and are shown to the administrator as a
  dismissible notice on the next rendered page.
"""

from typing import Optional


class RoleManagerError(Exception):
    """Base class for all role manager errors."""

    default_message = "Role manager error."

    def __init__(self, message: Optional[str] = None, *, redirect_to: Optional[str] = None):
        self.message = message or self.default_message
        self.redirect_to = redirect_to
        super().__init__(self.message)


class HardStopError(RoleManagerError):
    """Fatal error that terminates the request."""


class PermissionDenied(HardStopError):
    """Raised when the caller lacks the manage permission."""

    default_message = "You do not have sufficient permissions to perform this action."

    def __init__(self, required_permission: str, message: Optional[str] = None):
        super().__init__(message)
        self.required_permission = required_permission


class SecurityCheckFailed(HardStopError):
    """Raised when the anti-forgery token is missing or invalid."""

    default_message = "Security check failed."

    def __init__(self, action: str, message: Optional[str] = None):
        super().__init__(message)
        self.action = action


class RecoverableError(RoleManagerError):
    """Error reported back to the administrator as a notice."""


class InvalidRequest(RecoverableError):
    default_message = "Invalid request."


class NotFound(RecoverableError):
    default_message = "Role not found."


class NoSelection(RecoverableError):
    default_message = "Please make a selection first."

"""API routers for the role manager."""

from . import roles
from . import capabilities

__all__ = [
    "roles",
    "capabilities",
]

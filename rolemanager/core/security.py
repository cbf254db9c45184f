from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID

from jose import JWTError, jwt

from rolemanager.core.config import get_settings
from rolemanager.core.errors import SecurityCheckFailed

# Mutation actions that require an anti-forgery token
ACTION_DELETE_ROLES = "delete_roles"
ACTION_UPDATE_CAPABILITIES = "update_capabilities"
ACTION_COPY_CAPABILITIES = "copy_capabilities"
ACTION_CLEANUP_CAPABILITIES = "cleanup_capabilities"
ACTION_QUICK_REMOVE = "quick_remove"


def create_access_token(user_id: UUID, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token for an admin session."""
    settings = get_settings()
    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(minutes=settings.access_token_expire_minutes)

    to_encode = {
        "sub": str(user_id),
        "exp": expire,
        "type": "access",
    }
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def decode_token(token: str) -> Optional[UUID]:
    """Decode and validate JWT access token. Returns user_id if valid."""
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
        user_id: str = payload.get("sub")

        if user_id is None or payload.get("type") != "access":
            return None

        return UUID(user_id)
    except (JWTError, ValueError):
        return None


def issue_action_token(action: str, user_id: UUID, expires_delta: Optional[timedelta] = None) -> str:
    """
    Issue an anti-forgery token bound to one action and one user.

    Views hand these out with their forms; the matching mutation endpoint
    refuses to run without a token for the same action and user.
    """
    settings = get_settings()
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.action_token_expire_minutes)

    to_encode = {
        "sub": str(user_id),
        "act": action,
        "exp": datetime.utcnow() + expires_delta,
        "type": "action",
    }
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def verify_action_token(token: Optional[str], action: str, user_id: UUID) -> None:
    """
    Verify an anti-forgery token.

    Raises:
        SecurityCheckFailed: If the token is missing, expired, forged, or was
            issued for another action or user
    """
    if not token:
        raise SecurityCheckFailed(action)

    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        raise SecurityCheckFailed(action)

    if (
        payload.get("type") != "action"
        or payload.get("act") != action
        or payload.get("sub") != str(user_id)
    ):
        raise SecurityCheckFailed(action)

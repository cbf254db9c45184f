from typing import Generator
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from rolemanager.core.cache import DerivedCache, TransientStore, create_transient_store
from rolemanager.core.config import get_settings
from rolemanager.core.notices import NoticeQueue
from rolemanager.core.rbac.checker import ensure_permission
from rolemanager.core.security import decode_token
from rolemanager.db.models import User
from rolemanager.db.session import SessionLocal
from rolemanager.db.store import RoleStore
from rolemanager.services.role_manager import RoleManagerService

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


def get_db() -> Generator:
    """Database session dependency."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_transient_store() -> TransientStore:
    """Process-wide transient store for cache slots and notices."""
    return create_transient_store(get_settings())


def get_current_user(
    db: Session = Depends(get_db),
    token: str = Depends(oauth2_scheme),
) -> User:
    """Get current authenticated user from JWT token."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if token:
        user_id = decode_token(token)
        if user_id:
            user = db.query(User).filter(User.id == user_id).first()
            if user and user.is_active:
                return user

    raise credentials_exception


def require_manager(current_user: User = Depends(get_current_user)) -> User:
    """Current user, provided their role grants the manage permission."""
    ensure_permission(current_user, get_settings().manage_permission)
    return current_user


def get_role_manager(
    db: Session = Depends(get_db),
    store: TransientStore = Depends(get_transient_store),
) -> RoleManagerService:
    settings = get_settings()
    return RoleManagerService(RoleStore(db), DerivedCache(store, settings), settings)


def get_notice_queue(
    current_user: User = Depends(get_current_user),
    store: TransientStore = Depends(get_transient_store),
) -> NoticeQueue:
    """Notices queued for the current admin's session."""
    return NoticeQueue(store, str(current_user.id), prefix=get_settings().cache_key_prefix)

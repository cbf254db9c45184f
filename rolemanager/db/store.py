"""Host role/user store adapter.

The role manager never touches the ORM directly; every read and write of the
role table and of user role assignments goes through ``RoleStore``. Writes are
committed one at a time, so a failure part-way through a bulk operation keeps
the writes that already happened.
"""

from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from rolemanager.db.models import Role, User


class RoleStore:
    """SQLAlchemy-backed access to roles and user role assignments."""

    def __init__(self, db: Session):
        self.db = db

    # Roles

    def list_roles(self) -> List[Role]:
        """All roles in registration order."""
        return self.db.query(Role).order_by(Role.created_at, Role.slug).all()

    def get_role(self, slug: str) -> Optional[Role]:
        if not slug:
            return None
        return self.db.query(Role).filter(Role.slug == slug).first()

    def delete_role(self, slug: str) -> bool:
        role = self.get_role(slug)
        if role is None:
            return False
        self.db.delete(role)
        self.db.commit()
        return True

    # Capabilities

    def add_capability(self, role: Role, capability: str, granted: bool = True) -> None:
        role.capabilities[capability] = granted
        self.db.commit()

    def remove_capability(self, role: Role, capability: str) -> bool:
        """Remove a capability key from a role. Returns False if it was absent."""
        if capability not in role.capabilities:
            return False
        del role.capabilities[capability]
        self.db.commit()
        return True

    # Users

    def list_users_by_role(self, slug: str) -> List[User]:
        return self.db.query(User).filter(User.role_slug == slug).all()

    def set_user_role(self, user: User, slug: str) -> None:
        user.role_slug = slug
        self.db.commit()

    def count_users_by_role(self) -> Dict[str, int]:
        """Number of users holding each role slug."""
        rows = (
            self.db.query(User.role_slug, func.count(User.id))
            .filter(User.role_slug.isnot(None))
            .group_by(User.role_slug)
            .all()
        )
        return {slug: count for slug, count in rows}

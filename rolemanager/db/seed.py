"""Database seeding for the role manager.

Creates the protected core roles with their default capabilities.
"""

from sqlalchemy.orm import Session

from rolemanager.db.models import Role
from rolemanager.core.rbac.roles import DEFAULT_ROLES, get_default_role_capabilities


def seed_default_roles(db: Session) -> dict[str, Role]:
    """
    Create the 5 protected core roles.

    Roles are idempotent - if they already exist, returns existing roles
    untouched, including any capabilities edited since.

    Args:
        db: Database session

    Returns:
        Dict mapping role slug to Role object
    """
    created_roles = {}

    for slug, role_config in DEFAULT_ROLES.items():
        existing = db.query(Role).filter(Role.slug == slug).first()

        if existing:
            created_roles[slug] = existing
            continue

        role = Role(
            slug=slug,
            name=role_config["name"],
            capabilities={capability: True for capability in get_default_role_capabilities(slug)},
        )
        db.add(role)
        created_roles[slug] = role

    db.flush()
    return created_roles

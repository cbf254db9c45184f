"""Role manager service.

Builds the admin view-models from the role table and runs the mutation
operations against the host store:

- delete roles, reassigning their users to the fallback role
- add or remove capabilities on a role
- copy capabilities from one role to another (full replace)
- remove selected capabilities from every role
- quick removal of a single capability

Authorization and anti-forgery checks happen at the API boundary before any
of these methods run. Every mutation invalidates the cache slots it affects.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Set

from rolemanager.core.cache import DerivedCache
from rolemanager.core.config import Settings, get_settings
from rolemanager.core.errors import InvalidRequest, NoSelection, NotFound
from rolemanager.core.rbac.capabilities import (
    BUILTIN_CAPABILITIES,
    classify,
    is_builtin,
    validate_capability_name,
)
from rolemanager.core.rbac.grouping import group_capabilities
from rolemanager.core.rbac.indexer import build_usage_index, plugin_capabilities
from rolemanager.core.rbac.roles import PROTECTED_ROLES, get_plugin_owner, is_protected_role
from rolemanager.db.store import RoleStore

logger = logging.getLogger(__name__)

ROLES_PAGE = "/api/roles"
CLEANUP_PAGE = "/api/capabilities/cleanup"

OPERATION_ADD = "add"
OPERATION_REMOVE = "remove"

CAPABILITY_PREVIEW_SIZE = 5

_SLUG_STRIP = re.compile(r"[^a-z0-9_\-]")


def edit_page(slug: str) -> str:
    return f"{ROLES_PAGE}/{slug}" if slug else ROLES_PAGE


def sanitize_slug(value: Optional[str]) -> str:
    """Lowercase a role slug and drop characters a slug cannot contain."""
    if not value:
        return ""
    return _SLUG_STRIP.sub("", value.strip().lower())


def _plural(count: int, singular: str, plural: str) -> str:
    return (singular if count == 1 else plural) % count


@dataclass
class MutationOutcome:
    """Result of a mutation: the summary shown to the admin and where to go next."""
    message: str
    redirect_to: str
    notice_type: str = "success"
    counts: Dict[str, int] = field(default_factory=dict)
    details: Dict[str, Any] = field(default_factory=dict)


class RoleManagerService:
    """
    High-level service for role and capability management.

    Handles:
    - Role list, role edit and cleanup view-models
    - Role deletion with user reassignment
    - Capability add/remove, copy and cleanup
    - Derived-data cache population and invalidation
    """

    def __init__(self, store: RoleStore, cache: DerivedCache, settings: Optional[Settings] = None):
        """
        Initialize the role manager service.

        Args:
            store: Host role/user store adapter
            cache: Derived-data cache slots
            settings: Application settings
        """
        self.store = store
        self.cache = cache
        self.settings = settings or get_settings()

    # ------------------------------------------------------------------
    # Derived data
    # ------------------------------------------------------------------

    def _role_capability_maps(self) -> Dict[str, Dict[str, bool]]:
        return {role.slug: dict(role.capabilities or {}) for role in self.store.list_roles()}

    def get_plugin_capabilities(self) -> Set[str]:
        """Custom capabilities in use across all roles (cached)."""
        cached = self.cache.plugin_capabilities.get()
        if cached is not None:
            return cached

        index = build_usage_index(self._role_capability_maps())
        plugin_caps = plugin_capabilities(index)
        self.cache.plugin_capabilities.set(plugin_caps)
        return plugin_caps

    def get_user_counts(self) -> Dict[str, int]:
        """Number of users per role slug (cached)."""
        cached = self.cache.user_counts.get()
        if cached is not None:
            return cached

        counts = self.store.count_users_by_role()
        self.cache.user_counts.set(counts)
        return counts

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def role_list_view(self) -> Dict[str, Any]:
        """Every role with its protection status, owner, users and capabilities."""
        roles = self.store.list_roles()
        user_counts = self.get_user_counts()

        items = []
        for role in roles:
            capabilities = list((role.capabilities or {}).keys())
            preview = ", ".join(capabilities[:CAPABILITY_PREVIEW_SIZE])
            if len(capabilities) > CAPABILITY_PREVIEW_SIZE:
                preview += "..."
            protected = is_protected_role(role.slug)
            items.append({
                "slug": role.slug,
                "name": role.name,
                "is_protected": protected,
                "deletable": not protected and role.slug != self.settings.fallback_role,
                "plugin_owner": get_plugin_owner(role.slug),
                "user_count": user_counts.get(role.slug, 0),
                "capability_count": len(capabilities),
                "capabilities": capabilities,
                "capability_preview": preview,
            })

        protected_count = sum(1 for role in roles if role.slug in PROTECTED_ROLES)
        return {
            "roles": items,
            "total_roles": len(roles),
            "protected_count": protected_count,
            "custom_count": len(roles) - protected_count,
        }

    def role_edit_view(self, slug: str) -> Dict[str, Any]:
        """
        Current and available capabilities for one role.

        Raises:
            InvalidRequest: If the slug is empty
            NotFound: If the role does not exist
        """
        slug = sanitize_slug(slug)
        if not slug:
            raise InvalidRequest("Invalid role.", redirect_to=ROLES_PAGE)

        role = self.store.get_role(slug)
        if role is None:
            raise NotFound(redirect_to=ROLES_PAGE)

        current = list((role.capabilities or {}).keys())
        known = BUILTIN_CAPABILITIES | self.get_plugin_capabilities()
        available = sorted(known - set(current))

        copy_sources = [
            {"slug": other.slug, "name": other.name}
            for other in self.store.list_roles()
            if other.slug != role.slug
        ]

        return {
            "slug": role.slug,
            "name": role.name,
            "is_protected": is_protected_role(role.slug),
            "plugin_owner": get_plugin_owner(role.slug),
            "user_count": self.get_user_counts().get(role.slug, 0),
            "current_capabilities": [
                {
                    "name": capability,
                    "granted": bool(granted),
                    "type": classify(capability),
                    "is_builtin": is_builtin(capability),
                }
                for capability, granted in role.capabilities.items()
            ],
            "available_capabilities": [
                {
                    "name": capability,
                    "granted": False,
                    "type": classify(capability),
                    "is_builtin": is_builtin(capability),
                }
                for capability in available
            ],
            "copy_sources": copy_sources,
        }

    def cleanup_view(self) -> Dict[str, Any]:
        """Custom capabilities grouped by owning extension, with usage counts."""
        role_maps = self._role_capability_maps()
        index = build_usage_index(role_maps)
        plugin_caps = plugin_capabilities(index)
        grouped = group_capabilities(plugin_caps)

        groups = [
            {
                "name": name,
                "capabilities": [
                    {"name": capability, "role_count": index.role_count(capability)}
                    for capability in sorted(members)
                ],
            }
            for name, members in grouped.items()
        ]

        return {
            "groups": groups,
            "total_capabilities": len(plugin_caps),
            "total_groups": len(groups),
            "total_roles": len(role_maps),
        }

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def delete_roles(self, role_slugs: Iterable[str]) -> MutationOutcome:
        """
        Delete roles, moving their users to the fallback role.

        Protected roles and the fallback role are skipped and counted, never
        deleted.

        Raises:
            NoSelection: If no role was selected
        """
        role_slugs = [slug for slug in (role_slugs or []) if slug]
        if not role_slugs:
            raise NoSelection(
                "Please select at least one role to delete.", redirect_to=ROLES_PAGE
            )

        fallback = self.settings.fallback_role
        deleted = 0
        protected_skipped = 0
        users_reassigned = 0
        plugin_roles_deleted: List[str] = []

        try:
            for raw_slug in role_slugs:
                slug = sanitize_slug(raw_slug)

                if slug in PROTECTED_ROLES or slug == fallback:
                    protected_skipped += 1
                    continue

                for user in self.store.list_users_by_role(slug):
                    self.store.set_user_role(user, fallback)
                    users_reassigned += 1

                if not self.store.delete_role(slug):
                    continue
                deleted += 1

                owner = get_plugin_owner(slug)
                if owner:
                    plugin_roles_deleted.append(f"{owner} ({slug})")
        finally:
            self.cache.user_counts.invalidate()
            self.cache.plugin_capabilities.invalidate()

        message = _plural(
            deleted, "Successfully deleted %d role.", "Successfully deleted %d roles."
        )
        if users_reassigned > 0:
            message += " " + _plural(
                users_reassigned,
                f"%d user was reassigned to the {fallback} role.",
                f"%d users were reassigned to the {fallback} role.",
            )
        if protected_skipped > 0:
            message += " " + _plural(
                protected_skipped,
                "%d protected role was skipped.",
                "%d protected roles were skipped.",
            )
        if plugin_roles_deleted:
            message += (
                f" Plugin roles deleted: {', '.join(plugin_roles_deleted)}."
                " These may be recreated if you reactivate the plugins."
            )

        logger.info(
            "Deleted %d role(s), reassigned %d user(s), skipped %d protected role(s)",
            deleted, users_reassigned, protected_skipped,
        )
        return MutationOutcome(
            message=message,
            redirect_to=ROLES_PAGE,
            counts={
                "deleted": deleted,
                "users_reassigned": users_reassigned,
                "protected_skipped": protected_skipped,
            },
            details={"plugin_roles_deleted": plugin_roles_deleted},
        )

    def update_capabilities(
        self,
        role_slug: str,
        operation: str,
        capabilities: Iterable[str],
    ) -> MutationOutcome:
        """
        Add or remove capabilities on one role.

        Added names must pass ``validate_capability_name``; invalid ones are
        skipped without failing the request. Removal applies to any key that
        is present on the role, valid name or not.

        Raises:
            InvalidRequest: If the slug or capability list is empty, or the
                operation is unknown
            NotFound: If the role does not exist
        """
        slug = sanitize_slug(role_slug)
        capabilities = list(capabilities or [])
        if not slug or not capabilities or operation not in (OPERATION_ADD, OPERATION_REMOVE):
            raise InvalidRequest(redirect_to=edit_page(slug))

        role = self.store.get_role(slug)
        if role is None:
            raise NotFound(redirect_to=ROLES_PAGE)

        count = 0
        try:
            if operation == OPERATION_ADD:
                for capability in capabilities:
                    if validate_capability_name(capability):
                        self.store.add_capability(role, capability)
                        count += 1
                message = _plural(
                    count,
                    f"Successfully added %d capability to {slug} role.",
                    f"Successfully added %d capabilities to {slug} role.",
                )
            else:
                for capability in capabilities:
                    if self.store.remove_capability(role, capability):
                        count += 1
                message = _plural(
                    count,
                    f"Successfully removed %d capability from {slug} role.",
                    f"Successfully removed %d capabilities from {slug} role.",
                )
        finally:
            self.cache.plugin_capabilities.invalidate()

        logger.info("Capability %s on role %s: %d changed", operation, slug, count)
        return MutationOutcome(
            message=message,
            redirect_to=edit_page(slug),
            counts={"changed": count},
        )

    def copy_capabilities(self, source_slug: str, target_slug: str) -> MutationOutcome:
        """
        Replace the target role's capabilities with the source role's.

        Every existing key on the target is removed first; then each
        capability granted on the source is added. The target's previous set
        is not merged and cannot be recovered.

        Raises:
            InvalidRequest: If either slug is empty
            NotFound: If either role does not exist
        """
        source_slug = sanitize_slug(source_slug)
        target_slug = sanitize_slug(target_slug)
        if not source_slug or not target_slug:
            raise InvalidRequest(redirect_to=edit_page(target_slug))

        source = self.store.get_role(source_slug)
        target = self.store.get_role(target_slug)
        if source is None or target is None:
            raise NotFound("One or more roles not found.", redirect_to=edit_page(target_slug))

        granted = [name for name, is_granted in source.capabilities.items() if is_granted]

        try:
            for capability in list(target.capabilities.keys()):
                self.store.remove_capability(target, capability)
            for capability in granted:
                self.store.add_capability(target, capability)
        finally:
            self.cache.plugin_capabilities.invalidate()

        logger.info(
            "Copied %d capabilities from %s to %s", len(granted), source_slug, target_slug
        )
        return MutationOutcome(
            message=(
                f"Successfully copied {len(granted)} capabilities "
                f"from {source_slug} to {target_slug}."
            ),
            redirect_to=edit_page(target_slug),
            counts={"copied": len(granted)},
        )

    def cleanup_capabilities(self, capabilities: Iterable[str]) -> MutationOutcome:
        """
        Remove the selected capabilities from every role.

        Raises:
            NoSelection: If no capability was selected
        """
        capabilities = [capability for capability in (capabilities or []) if capability]
        if not capabilities:
            raise NoSelection(
                "Please select at least one capability to remove.", redirect_to=CLEANUP_PAGE
            )

        removed = 0
        roles_affected: Set[str] = set()

        try:
            for role in self.store.list_roles():
                for capability in capabilities:
                    if self.store.remove_capability(role, capability):
                        removed += 1
                        roles_affected.add(role.slug)
        finally:
            self.cache.plugin_capabilities.invalidate()

        logger.info(
            "Cleanup removed %d capability instance(s) from %d role(s)",
            removed, len(roles_affected),
        )
        return MutationOutcome(
            message=(
                f"Successfully removed {removed} capability instance(s) "
                f"from {len(roles_affected)} role(s)."
            ),
            redirect_to=CLEANUP_PAGE,
            counts={"removed": removed, "roles_affected": len(roles_affected)},
            details={"roles_affected": sorted(roles_affected)},
        )

    def quick_remove_capability(self, role_slug: str, capability: str) -> MutationOutcome:
        """
        Remove one capability from one role.

        Raises:
            InvalidRequest: If the slug or capability is empty
            NotFound: If the role does not exist
        """
        slug = sanitize_slug(role_slug)
        if not slug or not capability:
            raise InvalidRequest("Invalid request", redirect_to=edit_page(slug))

        role = self.store.get_role(slug)
        if role is None:
            raise NotFound("Role not found", redirect_to=ROLES_PAGE)

        try:
            removed = self.store.remove_capability(role, capability)
        finally:
            self.cache.plugin_capabilities.invalidate()

        logger.info("Quick-removed %s from role %s (present: %s)", capability, slug, removed)
        return MutationOutcome(
            message="Capability removed successfully",
            redirect_to=edit_page(slug),
            counts={"changed": int(removed)},
        )

"""Role tables for the role manager.

Defines the protected core roles with their default capability sets, the
registry of roles known to be owned by plugins, and the fallback role users
are moved to when their role is deleted.

Protected roles:
1. Administrator - Full site administration
2. Editor - Publishes and manages everyone's content
3. Author - Publishes and manages own posts
4. Contributor - Writes own posts without publishing
5. Subscriber - Reads content only
"""

from types import MappingProxyType
from typing import Dict, FrozenSet, List, Mapping, Optional


ROLE_ADMINISTRATOR = "administrator"
ROLE_EDITOR = "editor"
ROLE_AUTHOR = "author"
ROLE_CONTRIBUTOR = "contributor"
ROLE_SUBSCRIBER = "subscriber"

# Roles that can never be deleted through the role manager
PROTECTED_ROLES: FrozenSet[str] = frozenset({
    ROLE_ADMINISTRATOR,
    ROLE_EDITOR,
    ROLE_AUTHOR,
    ROLE_CONTRIBUTOR,
    ROLE_SUBSCRIBER,
})

# Roles registered by plugins; the plugin may recreate them on reactivation
PLUGIN_ROLES: Mapping[str, str] = MappingProxyType({
    "shop_manager": "WooCommerce",
    "customer": "WooCommerce",
})


SUBSCRIBER_CAPABILITIES = [
    "read",
]

CONTRIBUTOR_CAPABILITIES = SUBSCRIBER_CAPABILITIES + [
    "edit_posts",
    "delete_posts",
]

AUTHOR_CAPABILITIES = CONTRIBUTOR_CAPABILITIES + [
    "upload_files",
    "publish_posts",
    "edit_published_posts",
    "delete_published_posts",
]

EDITOR_CAPABILITIES = AUTHOR_CAPABILITIES + [
    "moderate_comments",
    "manage_categories",
    "manage_links",
    "edit_others_posts",
    "edit_pages",
    "edit_others_pages",
    "edit_published_pages",
    "publish_pages",
    "delete_pages",
    "delete_others_pages",
    "delete_published_pages",
    "delete_others_posts",
    "delete_private_posts",
    "edit_private_posts",
    "read_private_posts",
    "delete_private_pages",
    "edit_private_pages",
    "read_private_pages",
    "unfiltered_html",
]

ADMINISTRATOR_CAPABILITIES = EDITOR_CAPABILITIES + [
    "switch_themes",
    "edit_themes",
    "activate_plugins",
    "edit_plugins",
    "edit_users",
    "manage_options",
    "import",
    "unfiltered_upload",
    "edit_dashboard",
    "update_plugins",
    "delete_plugins",
    "install_plugins",
    "update_themes",
    "install_themes",
    "update_core",
    "list_users",
    "remove_users",
    "promote_users",
    "edit_theme_options",
    "delete_themes",
    "export",
    "delete_users",
    "create_users",
]


# Default roles configuration, in the host's registration order
DEFAULT_ROLES: Dict[str, dict] = {
    ROLE_ADMINISTRATOR: {
        "name": "Administrator",
        "capabilities": ADMINISTRATOR_CAPABILITIES,
    },
    ROLE_EDITOR: {
        "name": "Editor",
        "capabilities": EDITOR_CAPABILITIES,
    },
    ROLE_AUTHOR: {
        "name": "Author",
        "capabilities": AUTHOR_CAPABILITIES,
    },
    ROLE_CONTRIBUTOR: {
        "name": "Contributor",
        "capabilities": CONTRIBUTOR_CAPABILITIES,
    },
    ROLE_SUBSCRIBER: {
        "name": "Subscriber",
        "capabilities": SUBSCRIBER_CAPABILITIES,
    },
}


def is_protected_role(slug: str) -> bool:
    return slug in PROTECTED_ROLES


def get_plugin_owner(slug: str) -> Optional[str]:
    """Name of the plugin that owns a role, if the role is a known plugin role."""
    return PLUGIN_ROLES.get(slug)


def get_default_role_capabilities(slug: str) -> List[str]:
    """Get the default capability list for a protected role."""
    role = DEFAULT_ROLES.get(slug)
    if not role:
        raise ValueError(f"Unknown default role: {slug}")
    return role["capabilities"]

"""Capability classification for the role manager.

A capability is a permission flag stored as a key in a role's capability map.
Capabilities shipped with the host platform are "builtin"; everything else was
added by plugins, themes or custom code and is "custom".

Capability name format: lowercase letters, digits and underscores.
Examples:
  - edit_posts
  - manage_woocommerce
  - wpseo_manage_options
"""

import re
from typing import FrozenSet


# Complete host platform core capability list.
# Builtin capabilities are never flagged as plugin/custom capabilities.
BUILTIN_CAPABILITIES: FrozenSet[str] = frozenset([
    # Basic
    "read",

    # Posts
    "edit_posts",
    "delete_posts",
    "publish_posts",
    "edit_published_posts",
    "delete_published_posts",
    "edit_others_posts",
    "delete_others_posts",
    "read_private_posts",
    "edit_private_posts",
    "delete_private_posts",

    # Pages
    "edit_pages",
    "delete_pages",
    "publish_pages",
    "edit_published_pages",
    "delete_published_pages",
    "edit_others_pages",
    "delete_others_pages",
    "read_private_pages",
    "edit_private_pages",
    "delete_private_pages",

    # Media
    "upload_files",
    "unfiltered_upload",

    # Categories & tags
    "manage_categories",
    "edit_categories",
    "delete_categories",
    "assign_categories",
    "manage_post_tags",
    "edit_post_tags",
    "delete_post_tags",
    "assign_post_tags",

    # Links (legacy)
    "manage_links",
    "edit_links",
    "delete_links",

    # Comments
    "moderate_comments",
    "edit_comment",

    # Themes
    "switch_themes",
    "edit_themes",
    "edit_theme_options",
    "delete_themes",
    "install_themes",
    "update_themes",
    "resume_themes",

    # Plugins
    "activate_plugins",
    "edit_plugins",
    "install_plugins",
    "update_plugins",
    "delete_plugins",
    "resume_plugins",

    # Users
    "list_users",
    "create_users",
    "edit_users",
    "delete_users",
    "promote_users",
    "remove_users",
    "add_users",

    # General administration
    "manage_options",
    "edit_dashboard",
    "customize",
    "unfiltered_html",

    # Core updates
    "update_core",
    "update_php",

    # Import / export
    "import",
    "export",

    # Site management
    "delete_site",

    # Privacy
    "manage_privacy_options",
    "export_others_personal_data",
    "erase_others_personal_data",

    # Site health
    "view_site_health_checks",

    # Multisite
    "manage_network",
    "manage_sites",
    "manage_network_users",
    "manage_network_themes",
    "manage_network_plugins",
    "manage_network_options",
    "create_sites",
    "delete_sites",
    "upload_plugins",
    "upload_themes",
])

BUILTIN = "builtin"
CUSTOM = "custom"

CAPABILITY_NAME_PATTERN = re.compile(r"[a-z0-9_]+")
MIN_CAPABILITY_LENGTH = 2
MAX_CAPABILITY_LENGTH = 100


def is_builtin(capability: str) -> bool:
    """Check if a capability belongs to the host platform's core list."""
    return capability in BUILTIN_CAPABILITIES


def classify(capability: str) -> str:
    """Return ``"builtin"`` or ``"custom"`` for a capability."""
    return BUILTIN if is_builtin(capability) else CUSTOM


def validate_capability_name(capability: str) -> bool:
    """
    Check if a string is acceptable as a new capability name.

    Names must be lowercase alphanumeric with underscores, between 2 and 100
    characters long, and cannot be purely numeric.
    """
    if not isinstance(capability, str):
        return False
    if not CAPABILITY_NAME_PATTERN.fullmatch(capability):
        return False
    if len(capability) < MIN_CAPABILITY_LENGTH or len(capability) > MAX_CAPABILITY_LENGTH:
        return False
    if capability.isdigit():
        return False
    return True

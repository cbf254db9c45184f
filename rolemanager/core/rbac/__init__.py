"""Capability classification, grouping and usage indexing for the role manager.

This module defines the builtin capability reference list, the extension
prefix rules, the protected and plugin role tables and access check utilities.
"""

from .capabilities import (
    BUILTIN_CAPABILITIES,
    is_builtin,
    classify,
    validate_capability_name,
)
from .grouping import KNOWN_PREFIXES, OTHER_GROUP, group_capabilities, resolve_group
from .indexer import UsageIndex, build_usage_index, plugin_capabilities
from .roles import PROTECTED_ROLES, PLUGIN_ROLES, is_protected_role, get_plugin_owner
from .checker import PermissionChecker, has_permission, ensure_permission

__all__ = [
    "BUILTIN_CAPABILITIES",
    "is_builtin",
    "classify",
    "validate_capability_name",
    "KNOWN_PREFIXES",
    "OTHER_GROUP",
    "group_capabilities",
    "resolve_group",
    "UsageIndex",
    "build_usage_index",
    "plugin_capabilities",
    "PROTECTED_ROLES",
    "PLUGIN_ROLES",
    "is_protected_role",
    "get_plugin_owner",
    "PermissionChecker",
    "has_permission",
    "ensure_permission",
]

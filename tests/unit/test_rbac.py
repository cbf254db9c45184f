"""Tests for capability classification, role tables and permission checks."""

import pytest

from rolemanager.core.errors import PermissionDenied
from rolemanager.core.rbac.capabilities import (
    BUILTIN_CAPABILITIES,
    classify,
    is_builtin,
    validate_capability_name,
)
from rolemanager.core.rbac.checker import PermissionChecker, ensure_permission, has_permission
from rolemanager.core.rbac.roles import (
    DEFAULT_ROLES,
    PLUGIN_ROLES,
    PROTECTED_ROLES,
    get_default_role_capabilities,
    get_plugin_owner,
    is_protected_role,
)


class TestCapabilityClassifier:
    """Test builtin vs custom classification."""

    def test_builtin_capabilities(self):
        assert is_builtin("read")
        assert is_builtin("edit_posts")
        assert is_builtin("manage_options")
        assert is_builtin("delete_themes")
        assert is_builtin("upload_themes")

    def test_custom_capabilities(self):
        assert not is_builtin("manage_woocommerce")
        assert not is_builtin("custom_plugin_x")
        assert not is_builtin("wpseo_manage_options")

    def test_exact_match_only(self):
        """Membership is case-sensitive with no normalization."""
        assert not is_builtin("Edit_Posts")
        assert not is_builtin(" read")
        assert not is_builtin("edit_post")

    def test_builtin_matches_reference_list(self):
        for capability in BUILTIN_CAPABILITIES:
            assert is_builtin(capability)
        assert len(BUILTIN_CAPABILITIES) == 79

    def test_classify(self):
        assert classify("edit_pages") == "builtin"
        assert classify("elementor_edit") == "custom"


class TestCapabilityNameValidation:
    """Test validation of capability names on add."""

    @pytest.mark.parametrize("name", ["read", "edit_posts", "ab", "cap_2", "2fa_manage", "a" * 100])
    def test_valid_names(self, name):
        assert validate_capability_name(name)

    @pytest.mark.parametrize("name", [
        "123",          # purely numeric
        "a",            # too short
        "a" * 101,      # too long
        "Edit_Posts",   # uppercase
        "edit-posts",   # hyphen
        "edit posts",   # whitespace
        "edit_posts\n", # trailing newline
        "",
    ])
    def test_invalid_names(self, name):
        assert not validate_capability_name(name)

    def test_non_string_rejected(self):
        assert not validate_capability_name(None)
        assert not validate_capability_name(42)


class TestRoleTables:
    """Test protected, plugin and default role tables."""

    def test_protected_roles(self):
        assert PROTECTED_ROLES == {"administrator", "editor", "author", "contributor", "subscriber"}
        assert is_protected_role("administrator")
        assert not is_protected_role("shop_manager")

    def test_plugin_roles(self):
        assert get_plugin_owner("shop_manager") == "WooCommerce"
        assert get_plugin_owner("customer") == "WooCommerce"
        assert get_plugin_owner("editor") is None

    def test_plugin_roles_are_immutable(self):
        with pytest.raises(TypeError):
            PLUGIN_ROLES["new_role"] = "Someone"

    def test_default_roles_are_protected(self):
        assert set(DEFAULT_ROLES) == set(PROTECTED_ROLES)

    def test_default_capabilities_are_builtin(self):
        for slug in DEFAULT_ROLES:
            for capability in get_default_role_capabilities(slug):
                assert is_builtin(capability), f"{slug}: {capability}"

    def test_administrator_can_manage_options(self):
        assert "manage_options" in get_default_role_capabilities("administrator")
        assert "manage_options" not in get_default_role_capabilities("editor")

    def test_unknown_default_role_raises(self):
        with pytest.raises(ValueError):
            get_default_role_capabilities("shop_manager")


class _Role:
    def __init__(self, capabilities):
        self.capabilities = capabilities


class _User:
    def __init__(self, role):
        self.role = role


class TestPermissionChecker:
    """Test PermissionChecker class."""

    def test_granted_capability(self):
        checker = PermissionChecker({"manage_options": True, "read": True})
        assert checker.has_permission("manage_options")
        assert checker.has_permission("read")
        assert not checker.has_permission("edit_posts")

    def test_denied_capability_is_not_granted(self):
        checker = PermissionChecker({"manage_options": False})
        assert not checker.has_permission("manage_options")

    def test_empty_capabilities(self):
        assert not PermissionChecker(None).has_permission("read")

    def test_has_permission_for_user(self):
        admin = _User(_Role({"manage_options": True}))
        assert has_permission(admin, "manage_options")
        assert not has_permission(_User(None), "manage_options")
        assert not has_permission(None, "manage_options")

    def test_ensure_permission_raises(self):
        subscriber = _User(_Role({"read": True}))
        with pytest.raises(PermissionDenied) as exc_info:
            ensure_permission(subscriber, "manage_options")
        assert exc_info.value.required_permission == "manage_options"

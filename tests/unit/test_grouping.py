"""Tests for grouping custom capabilities by owning extension."""

from rolemanager.core.rbac.grouping import (
    KNOWN_PREFIXES,
    OTHER_GROUP,
    group_capabilities,
    resolve_group,
)


class TestKnownPrefixes:
    """Test the extension prefix rule table."""

    def test_woocommerce_prefixes(self):
        assert resolve_group("woocommerce_manage_orders") == "WooCommerce"
        assert resolve_group("manage_woocommerce") == "WooCommerce"
        assert resolve_group("shop_export") == "WooCommerce"

    def test_shop_prefix_beats_fallback(self):
        """A configured prefix wins over the inferred 'Shop' group."""
        groups = group_capabilities({"shop_export"})
        assert groups == {"WooCommerce": {"shop_export"}}
        assert "Shop" not in groups

    def test_other_extensions(self):
        assert resolve_group("wpProQuiz_edit") == "WP Pro Quiz"
        assert resolve_group("amelia_read_calendar") == "Amelia"
        assert resolve_group("tinvwl_manage") == "TI WooCommerce Wishlist"
        assert resolve_group("ap_new_question") == "AnsPress"
        assert resolve_group("wpseo_bulk_edit") == "Yoast SEO"
        assert resolve_group("loco_admin") == "Loco Translate"
        assert resolve_group("wpcf7_edit_contact_form") == "Contact Form 7"
        assert resolve_group("optimizemember_level1") == "OptimizeMember"
        assert resolve_group("access_optimizemember_level0") == "OptimizeMember"
        assert resolve_group("learndash_manage") == "LearnDash"
        assert resolve_group("ld_course") == "LearnDash"
        assert resolve_group("sfwd_lessons") == "LearnDash"
        assert resolve_group("elementor_edit") == "Elementor"

    def test_prefix_match_without_delimiter(self):
        assert resolve_group("elementor") == "Elementor"
        assert resolve_group("wpseoadmin") == "Yoast SEO"

    def test_rule_table_order(self):
        prefixes = [prefix for prefix, _ in KNOWN_PREFIXES]
        assert prefixes.index("woocommerce") < prefixes.index("shop_")
        assert prefixes.index("shop_") < prefixes.index("manage_woocommerce")
        assert prefixes[-1] == "elementor"
        assert len(KNOWN_PREFIXES) == 16


class TestRulePrecedence:
    """Test that the earlier rule wins when several prefixes match."""

    def test_earlier_rule_wins(self):
        rules = (("shop_order", "Orders"), ("shop_", "Shop Plugin"))
        assert resolve_group("shop_order_edit", rules) == "Orders"
        assert resolve_group("shop_coupon", rules) == "Shop Plugin"

    def test_general_before_specific_shadows(self):
        rules = (("shop_", "Shop Plugin"), ("shop_order", "Orders"))
        assert resolve_group("shop_order_edit", rules) == "Shop Plugin"

    def test_custom_rules_replace_defaults(self):
        assert resolve_group("wpseo_manage", rules=()) == "Wpseo"


class TestFallbackGrouping:
    """Test inferred prefix groups and the Other bucket."""

    def test_inferred_prefix_is_capitalised(self):
        assert resolve_group("custom_plugin_x") == "Custom"
        assert resolve_group("gravityforms_edit") == "Gravityforms"
        assert resolve_group("2fa_manage") == "2fa"

    def test_no_delimiter_goes_to_other(self):
        assert resolve_group("somecapability") == OTHER_GROUP
        assert resolve_group("_leading") == OTHER_GROUP

    def test_uppercase_token_not_inferred(self):
        assert resolve_group("Mixed_case") == OTHER_GROUP


class TestGroupCapabilities:
    """Test partition properties of group_capabilities."""

    CAPS = {
        "manage_woocommerce",
        "shop_export",
        "wpseo_bulk_edit",
        "custom_plugin_x",
        "custom_other",
        "ld_course",
        "somecap",
        "elementor_edit",
    }

    def test_every_capability_in_exactly_one_group(self):
        groups = group_capabilities(self.CAPS)
        members = [cap for caps in groups.values() for cap in caps]
        assert sorted(members) == sorted(self.CAPS)
        assert len(members) == len(set(members))

    def test_groups_sorted_by_name(self):
        names = list(group_capabilities(self.CAPS).keys())
        assert names == sorted(names)

    def test_expected_partition(self):
        groups = group_capabilities(self.CAPS)
        assert groups["WooCommerce"] == {"manage_woocommerce", "shop_export"}
        assert groups["Custom"] == {"custom_plugin_x", "custom_other"}
        assert groups["LearnDash"] == {"ld_course"}
        assert groups[OTHER_GROUP] == {"somecap"}

    def test_idempotent(self):
        assert group_capabilities(self.CAPS) == group_capabilities(self.CAPS)

    def test_empty_input(self):
        assert group_capabilities(set()) == {}

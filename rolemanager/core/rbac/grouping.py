"""Grouping of custom capabilities by their owning extension.

Capabilities carry no record of which plugin registered them, so ownership is
inferred from the name:

1. The first matching entry of ``KNOWN_PREFIXES`` wins. Order matters: a more
   specific prefix must come before a more general one.
2. Otherwise the leading ``[a-z0-9]+`` token before an underscore becomes an
   ad-hoc group name, with its first letter capitalised.
3. Otherwise the capability goes to ``"Other"``.
"""

import re
from collections import OrderedDict
from typing import Dict, Iterable, Optional, Sequence, Set, Tuple


OTHER_GROUP = "Other"

# (prefix, extension display name), matched in order
KNOWN_PREFIXES: Tuple[Tuple[str, str], ...] = (
    ("woocommerce", "WooCommerce"),
    ("shop_", "WooCommerce"),
    ("manage_woocommerce", "WooCommerce"),
    ("wpProQuiz", "WP Pro Quiz"),
    ("amelia", "Amelia"),
    ("tinvwl", "TI WooCommerce Wishlist"),
    ("ap_", "AnsPress"),
    ("wpseo", "Yoast SEO"),
    ("loco", "Loco Translate"),
    ("wpcf7", "Contact Form 7"),
    ("optimizemember", "OptimizeMember"),
    ("access_optimizemember", "OptimizeMember"),
    ("learndash", "LearnDash"),
    ("ld_", "LearnDash"),
    ("sfwd", "LearnDash"),
    ("elementor", "Elementor"),
)

_FALLBACK_PREFIX = re.compile(r"^([a-z0-9]+)_")


def resolve_group(
    capability: str,
    rules: Optional[Sequence[Tuple[str, str]]] = None,
) -> str:
    """Return the group name a single capability belongs to."""
    for prefix, extension in (KNOWN_PREFIXES if rules is None else rules):
        if capability.startswith(prefix):
            return extension

    match = _FALLBACK_PREFIX.match(capability)
    if match:
        token = match.group(1)
        return token[0].upper() + token[1:]

    return OTHER_GROUP


def group_capabilities(
    capabilities: Iterable[str],
    rules: Optional[Sequence[Tuple[str, str]]] = None,
) -> "OrderedDict[str, Set[str]]":
    """
    Partition capabilities into named groups.

    Args:
        capabilities: Custom capability names
        rules: Ordered (prefix, group name) pairs; defaults to KNOWN_PREFIXES

    Returns:
        Mapping of group name to member capabilities, sorted by group name
    """
    groups: Dict[str, Set[str]] = {}
    for capability in capabilities:
        groups.setdefault(resolve_group(capability, rules), set()).add(capability)

    return OrderedDict((name, groups[name]) for name in sorted(groups))

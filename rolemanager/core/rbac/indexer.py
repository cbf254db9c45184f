"""Capability usage index built from the host's role table."""

from typing import Dict, FrozenSet, Mapping, NamedTuple, Set

from .capabilities import BUILTIN_CAPABILITIES


class UsageIndex(NamedTuple):
    """Capabilities in use and the roles that carry each of them."""
    all_capabilities: Set[str]
    usage: Dict[str, Set[str]]

    def role_count(self, capability: str) -> int:
        """Number of roles whose capability map contains the capability."""
        return len(self.usage.get(capability, ()))


def build_usage_index(roles: Mapping[str, Mapping[str, bool]]) -> UsageIndex:
    """
    Scan every role's capability keys once.

    Args:
        roles: Mapping of role slug to that role's capability map

    Returns:
        UsageIndex with the union of all capability keys and, per capability,
        the set of role slugs whose map contains it
    """
    all_capabilities: Set[str] = set()
    usage: Dict[str, Set[str]] = {}

    for slug, capabilities in roles.items():
        for capability in capabilities:
            all_capabilities.add(capability)
            usage.setdefault(capability, set()).add(slug)

    return UsageIndex(all_capabilities, usage)


def plugin_capabilities(
    index: UsageIndex,
    builtin: FrozenSet[str] = BUILTIN_CAPABILITIES,
) -> Set[str]:
    """Capabilities in use that are not part of the builtin reference list."""
    return index.all_capabilities - builtin

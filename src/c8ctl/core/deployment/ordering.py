"""Deterministic ordering of resources before deployment."""

from typing import Iterable, List, Tuple

from c8ctl.core.models import GroupType, ResourceFile

TIER_RANK = {
    GroupType.BUILDING_BLOCK: 0,
    GroupType.PROCESS_APPLICATION: 1,
    GroupType.NONE: 2,
}


def priority_key(resource: ResourceFile) -> Tuple[int, str, str]:
    """Sort key: tier, then group root, then full path.

    Python string comparison is ordinal, so the order does not depend on
    the locale.
    """
    return (TIER_RANK[resource.group_type], resource.group_path or "", resource.path)


def sort_resources(resources: Iterable[ResourceFile]) -> List[ResourceFile]:
    """Return resources with building blocks first, then process applications, then the rest."""
    return sorted(resources, key=priority_key)

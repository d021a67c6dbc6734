import logging
from collections.abc import Mapping, Sequence

from preference_service.features.preferences.models.preference_group import PreferenceGroup
from preference_service.features.preferences.schemas import GroupNode, PreferenceWithValue

logger = logging.getLogger(__name__)


def build_group_tree(
    groups: Sequence[PreferenceGroup],
    parent_id: str,
    preferences_by_group: Mapping[str, list[PreferenceWithValue]],
) -> list[GroupNode]:
    """
    Recursively build the group tree below `parent_id`.

    Nodes follow the order of `groups`. A group is kept only when it has preferences of its own
    or at least one kept child group, so empty branches are pruned.
    A group that is its own parent is skipped. Each group has a single parent, so this is the only loop
    reachable from the root and it would otherwise recurse forever or list groups twice.
    """
    tree: list[GroupNode] = []
    for group in groups:
        if group.parent_group != parent_id:
            continue
        if group.id == parent_id:
            logger.warning("preference group is its own parent, skipping", extra={"group_id": group.id})
            continue

        children = build_group_tree(groups, group.id, preferences_by_group)
        preferences = preferences_by_group.get(group.id, [])
        if not children and not preferences:
            continue
        tree.append(
            GroupNode(group_id=group.id, group_name=group.name, preferences=preferences, child_groups=children)
        )
    return tree

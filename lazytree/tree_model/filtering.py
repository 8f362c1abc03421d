"""Search-filtered projections: matches plus their ancestor context rows."""

from __future__ import annotations

from collections.abc import Collection, Mapping, Sequence
from dataclasses import replace

from ..entry_model.types import TreeObject
from .build import walk_ancestors


def filter_objects_for_matches(
    objects: Sequence[TreeObject],
    mapping: Mapping[str, str],
    filter_ids: Collection[str],
) -> list[TreeObject]:
    """Return matched objects (highlighted) followed by their ancestors.

    Ancestors are appended once each, unhighlighted, unless they matched
    themselves. The upward walk stops at a missing parent or a cycle.
    """
    by_id = {obj.id: obj for obj in objects}
    wanted = set(filter_ids)
    included: dict[str, TreeObject] = {}
    for obj in objects:
        if obj.id in wanted and obj.id not in included:
            included[obj.id] = replace(obj, highlight=True)

    matched_ids = list(included)
    for obj_id in matched_ids:
        for ancestor_id in walk_ancestors(obj_id, mapping, by_id):
            if ancestor_id in included:
                continue
            included[ancestor_id] = replace(by_id[ancestor_id], highlight=False)
    return list(included.values())


def derive_entry_list(
    objects: Sequence[TreeObject],
    mapping: Mapping[str, str],
    search_query: str,
    filter_ids: Collection[str],
) -> list[TreeObject]:
    """Entry list for the current search state; no query means no filter."""
    if search_query == "":
        return [replace(obj, highlight=False) if obj.highlight else obj for obj in objects]
    return filter_objects_for_matches(objects, mapping, filter_ids)


__all__ = ["filter_objects_for_matches", "derive_entry_list"]

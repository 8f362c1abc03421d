"""Tree derivation: arena forest building, visible rows, and search filtering."""

from __future__ import annotations

from .build import apply_parent_mapping, build_forest, flatten_visible, resolve_parent_mapping, walk_ancestors
from .filtering import derive_entry_list, filter_objects_for_matches
from .types import TreeForest, TreeNode, VisibleRow

__all__ = [
    "TreeForest",
    "TreeNode",
    "VisibleRow",
    "resolve_parent_mapping",
    "apply_parent_mapping",
    "walk_ancestors",
    "build_forest",
    "flatten_visible",
    "derive_entry_list",
    "filter_objects_for_matches",
]

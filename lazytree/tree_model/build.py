"""Pure tree derivation from the flat entry collection."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import replace

from ..entry_model.types import TreeObject
from .types import TreeForest, TreeNode, VisibleRow


def resolve_parent_mapping(
    objects: Iterable[TreeObject],
    uses_child_references: bool,
) -> dict[str, str]:
    """Return the canonical child -> parent mapping.

    With child references the relation is inverted from every object's
    ``children``; otherwise each object's own ``parent`` is used.
    """
    mapping: dict[str, str] = {}
    if uses_child_references:
        for obj in objects:
            for child_id in obj.children:
                mapping[child_id] = obj.id
        return mapping
    for obj in objects:
        if obj.parent:
            mapping[obj.id] = obj.parent
    return mapping


def apply_parent_mapping(
    objects: Iterable[TreeObject],
    mapping: Mapping[str, str],
    uses_child_references: bool,
) -> list[TreeObject]:
    """Rewrite ``parent`` from ``mapping`` when the relation is child references."""
    if not uses_child_references:
        return list(objects)
    out: list[TreeObject] = []
    for obj in objects:
        parent = mapping.get(obj.id)
        out.append(replace(obj, parent=parent) if parent and parent != obj.parent else obj)
    return out


def walk_ancestors(node_id: str, mapping: Mapping[str, str], known_ids: Iterable[str] | None = None) -> list[str]:
    """Return ancestor ids nearest first.

    Stops at a root, at a parent missing from ``known_ids`` (when given),
    or when a cycle would revisit an id.
    """
    known = set(known_ids) if known_ids is not None else None
    seen = {node_id}
    chain: list[str] = []
    parent_id = mapping.get(node_id)
    while parent_id:
        if parent_id in seen:
            break
        if known is not None and parent_id not in known:
            break
        seen.add(parent_id)
        chain.append(parent_id)
        parent_id = mapping.get(parent_id)
    return chain


def build_forest(objects: Sequence[TreeObject]) -> TreeForest:
    """Nest ``objects`` into a forest keyed by ``parent``.

    Objects whose parent is not in ``objects`` are top-level candidates and
    are kept only when designated roots; orphans (parent not fetched yet)
    and everything beneath them are left out of the view.
    """
    by_id: dict[str, TreeObject] = {}
    for obj in objects:
        by_id.setdefault(obj.id, obj)

    children_by_parent: dict[str, list[str]] = {}
    top_level: list[str] = []
    for obj_id, obj in by_id.items():
        parent = obj.parent
        if parent and parent != obj_id and parent in by_id:
            children_by_parent.setdefault(parent, []).append(obj_id)
        else:
            top_level.append(obj_id)

    placed: list[tuple[TreeObject, int | None]] = []
    child_indices: dict[int, list[int]] = {}
    visited: set[str] = set()
    roots: list[int] = []

    def place(obj_id: str, parent_index: int | None) -> None:
        """Depth-first placement assigning arena indices in preorder."""
        visited.add(obj_id)
        index = len(placed)
        placed.append((by_id[obj_id], parent_index))
        if parent_index is None:
            roots.append(index)
        else:
            child_indices.setdefault(parent_index, []).append(index)
        for child_id in children_by_parent.get(obj_id, []):
            if child_id in visited:
                continue
            place(child_id, index)

    for obj_id in top_level:
        if not by_id[obj_id].root:
            continue
        place(obj_id, None)

    nodes = tuple(
        TreeNode(
            obj=obj,
            index=index,
            parent_index=parent_index,
            children=tuple(child_indices.get(index, ())),
        )
        for index, (obj, parent_index) in enumerate(placed)
    )
    return TreeForest(nodes=nodes, roots=tuple(roots))


def flatten_visible(forest: TreeForest) -> list[VisibleRow]:
    """Depth-first rows, descending only into expanded nodes."""
    rows: list[VisibleRow] = []

    def walk(node: TreeNode, depth: int) -> None:
        leaf = not node.children and (node.obj.is_loaded or node.obj.has_children is False)
        rows.append(VisibleRow(obj=node.obj, depth=depth, index=node.index, is_leaf=leaf))
        if not node.obj.is_expanded:
            return
        for child in forest.children_of(node):
            walk(child, depth + 1)

    for root in forest.root_nodes():
        walk(root, 0)
    return rows


__all__ = [
    "resolve_parent_mapping",
    "apply_parent_mapping",
    "walk_ancestors",
    "build_forest",
    "flatten_visible",
]

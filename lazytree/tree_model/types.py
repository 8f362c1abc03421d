"""Arena datatypes for derived tree views.

Nodes live in one flat tuple and point at each other by index, so a forest
is trivially serializable and never holds reference cycles.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from ..entry_model.types import TreeObject


@dataclass(frozen=True)
class TreeNode:
    """One placed node: its snapshot plus parent/child arena indices."""

    obj: TreeObject
    index: int
    parent_index: int | None
    children: tuple[int, ...] = ()

    @property
    def id(self) -> str:
        return self.obj.id


@dataclass(frozen=True)
class TreeForest:
    """Derived forest: ``nodes`` in depth-first preorder, ``roots`` by index."""

    nodes: tuple[TreeNode, ...] = ()
    roots: tuple[int, ...] = ()

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self) -> Iterator[TreeNode]:
        return iter(self.nodes)

    def __contains__(self, node_id: object) -> bool:
        return any(node.id == node_id for node in self.nodes)

    def ids(self) -> list[str]:
        return [node.id for node in self.nodes]

    def find(self, node_id: str) -> TreeNode | None:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def root_nodes(self) -> list[TreeNode]:
        return [self.nodes[idx] for idx in self.roots]

    def children_of(self, node: TreeNode) -> list[TreeNode]:
        return [self.nodes[idx] for idx in node.children]

    def parent_of(self, node: TreeNode) -> TreeNode | None:
        if node.parent_index is None:
            return None
        return self.nodes[node.parent_index]

    def depth_of(self, node: TreeNode) -> int:
        depth = 0
        current = node
        while current.parent_index is not None:
            depth += 1
            current = self.nodes[current.parent_index]
        return depth


@dataclass(frozen=True)
class VisibleRow:
    """One row of the expanded-aware flattening of a forest."""

    obj: TreeObject
    depth: int
    index: int
    is_leaf: bool = False


__all__ = ["TreeNode", "TreeForest", "VisibleRow"]

"""Search filtering tests: matches are highlighted and keep their ancestors."""

from __future__ import annotations

import unittest

from lazytree.entry_model import TreeObject
from lazytree.tree_model import build_forest, derive_entry_list, filter_objects_for_matches, resolve_parent_mapping


def _objects() -> list[TreeObject]:
    return [
        TreeObject(id="r", root=True),
        TreeObject(id="a", parent="r"),
        TreeObject(id="b", parent="a"),
        TreeObject(id="c", parent="r"),
        TreeObject(id="d", parent="c"),
    ]


class FilterForMatchesTests(unittest.TestCase):
    def test_match_pulls_in_unhighlighted_ancestors(self) -> None:
        objects = _objects()
        mapping = resolve_parent_mapping(objects, uses_child_references=False)

        filtered = filter_objects_for_matches(objects, mapping, {"b"})

        self.assertEqual([(obj.id, obj.highlight) for obj in filtered], [("b", True), ("a", False), ("r", False)])
        self.assertEqual(build_forest(filtered).ids(), ["r", "a", "b"])

    def test_matched_ancestor_stays_highlighted_and_appears_once(self) -> None:
        objects = _objects()
        mapping = resolve_parent_mapping(objects, uses_child_references=False)

        filtered = filter_objects_for_matches(objects, mapping, {"b", "a"})

        self.assertEqual([(obj.id, obj.highlight) for obj in filtered], [("a", True), ("b", True), ("r", False)])

    def test_unknown_match_ids_are_ignored(self) -> None:
        objects = _objects()
        mapping = resolve_parent_mapping(objects, uses_child_references=False)
        self.assertEqual(filter_objects_for_matches(objects, mapping, {"zzz"}), [])

    def test_cyclic_ancestry_terminates(self) -> None:
        objects = [TreeObject(id="x", parent="y"), TreeObject(id="y", parent="x")]
        mapping = resolve_parent_mapping(objects, uses_child_references=False)

        filtered = filter_objects_for_matches(objects, mapping, {"x"})

        self.assertEqual([obj.id for obj in filtered], ["x", "y"])


class DeriveEntryListTests(unittest.TestCase):
    def test_empty_query_returns_everything_without_highlight(self) -> None:
        objects = _objects()
        objects[2] = TreeObject(id="b", parent="a", highlight=True)
        mapping = resolve_parent_mapping(objects, uses_child_references=False)

        derived = derive_entry_list(objects, mapping, "", {"b"})

        self.assertEqual([obj.id for obj in derived], ["r", "a", "b", "c", "d"])
        self.assertFalse(any(obj.highlight for obj in derived))

    def test_query_with_no_results_is_empty(self) -> None:
        objects = _objects()
        mapping = resolve_parent_mapping(objects, uses_child_references=False)
        self.assertEqual(derive_entry_list(objects, mapping, "nothing", frozenset()), [])


if __name__ == "__main__":
    unittest.main()

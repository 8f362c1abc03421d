"""Entry wrapper behavior tests.

Covers how entries read identity and relationship fields from records, how
flag setters report changes, and how title strategies fall back.
"""

from __future__ import annotations

import unittest
from types import SimpleNamespace

from lazytree.entry_model import (
    NBSP,
    Entry,
    EntryAttributes,
    EntryOptions,
    RecordAdapter,
    Title,
    dynamic_title_method,
    static_title_method,
)
from lazytree.feed import ChangeFeed

PARENT_ATTRS = EntryAttributes(
    relation_type="node_parent",
    parent_ref="parent",
    has_child_attr="has_children",
    root_attr="root",
    icon_attr="icon",
    class_attr="css",
)
CHILD_ATTRS = EntryAttributes(relation_type="node_children", child_ref="kids")


def _entry(record: object, options: EntryOptions | None = None, attributes: EntryAttributes = PARENT_ATTRS, **kwargs) -> Entry:
    return Entry(record, options or EntryOptions(), attributes, RecordAdapter(), **kwargs)


class EntryFieldTests(unittest.TestCase):
    def test_reads_relationship_and_display_fields_from_record(self) -> None:
        entry = _entry({"id": "b", "parent": "a", "icon": "folder", "css": ""})

        self.assertEqual(entry.id, "b")
        self.assertEqual(entry.parent_id, "a")
        self.assertFalse(entry.is_root)
        self.assertIsNone(entry.has_children)
        self.assertEqual(entry.icon, "folder")
        self.assertIsNone(entry.class_name)
        self.assertFalse(entry.is_loaded)
        self.assertFalse(entry.is_expanded)
        self.assertFalse(entry.is_selected)

    def test_option_parent_overrides_record_reference(self) -> None:
        entry = _entry({"id": "b", "parent": "a"}, EntryOptions(parent="x"))
        self.assertEqual(entry.parent_id, "x")

    def test_non_string_ids_are_stringified(self) -> None:
        entry = _entry({"id": 5, "parent": 4})
        self.assertEqual(entry.id, "5")
        self.assertEqual(entry.parent_id, "4")

    def test_root_comes_from_attribute_or_options(self) -> None:
        self.assertTrue(_entry({"id": "r", "root": True}).is_root)
        self.assertTrue(_entry({"id": "r"}, EntryOptions(is_root=True)).is_root)
        self.assertFalse(_entry({"id": "r", "root": 0}).is_root)

    def test_has_children_attribute_is_tri_state(self) -> None:
        self.assertIs(_entry({"id": "a", "has_children": False}).has_children, False)
        self.assertIs(_entry({"id": "a", "has_children": 1}).has_children, True)
        self.assertIsNone(_entry({"id": "a"}).has_children)

    def test_child_references_are_deduplicated_and_drive_has_children(self) -> None:
        entry = _entry({"id": "a", "kids": ["b", "c", "b", ""]}, attributes=CHILD_ATTRS)
        self.assertEqual(entry.child_ids, ("b", "c"))
        self.assertTrue(entry.has_children)
        self.assertIsNone(entry.parent_id)

        leaf = _entry({"id": "z", "kids": []}, attributes=CHILD_ATTRS)
        self.assertEqual(leaf.child_ids, ())
        self.assertIs(leaf.has_children, False)

    def test_reads_attribute_style_records(self) -> None:
        record = SimpleNamespace(id="n", parent="p", root=False, icon=None, css="bold", has_children=None)
        entry = _entry(record)
        self.assertEqual(entry.parent_id, "p")
        self.assertEqual(entry.class_name, "bold")

    def test_to_tree_object_parent_override(self) -> None:
        entry = _entry({"id": "b", "parent": "a"})
        self.assertEqual(entry.to_tree_object().parent, "a")
        self.assertEqual(entry.to_tree_object(parent="z", highlight=True).parent, "z")
        self.assertTrue(entry.to_tree_object(highlight=True).highlight)


class EntryFlagTests(unittest.TestCase):
    def test_set_expanded_reports_change_and_notifies_unless_suppressed(self) -> None:
        kinds: list[str] = []
        writes: list[None] = []
        entry = _entry(
            {"id": "a"},
            listener=lambda kind, _entry: kinds.append(kind),
            on_expand_change=lambda: writes.append(None),
        )

        entry.set_expanded(True)
        entry.set_expanded(False, notify=False)

        self.assertEqual(kinds, ["expansion", "expansion"])
        self.assertEqual(len(writes), 1)
        self.assertFalse(entry.is_expanded)

    def test_selection_and_structure_setters_report_their_kind(self) -> None:
        kinds: list[str] = []
        entry = _entry({"id": "a"}, listener=lambda kind, _entry: kinds.append(kind))

        entry.set_selected(True)
        entry.set_loaded(True)
        entry.set_has_children(False)
        entry.set_loading(True)

        self.assertEqual(kinds, ["selection", "entries", "entries"])
        self.assertTrue(entry.is_loading)

    def test_set_parent_commit_writes_back_to_record(self) -> None:
        record = {"id": "b", "parent": "a"}
        entry = _entry(record)

        entry.set_parent("c")
        self.assertEqual(record["parent"], "a")

        entry.set_parent("d", commit=True)
        self.assertEqual(entry.parent_id, "d")
        self.assertEqual(record["parent"], "d")

    def test_adopt_ui_state_carries_flags_from_replaced_entry(self) -> None:
        previous = _entry({"id": "a"}, EntryOptions(is_loaded=True))
        previous.set_expanded(True, notify=False)
        previous.set_selected(True)
        previous.set_has_children(True)

        replacement = _entry({"id": "a", "title": "new"})
        replacement.adopt_ui_state(previous)

        self.assertTrue(replacement.is_expanded)
        self.assertTrue(replacement.is_selected)
        self.assertTrue(replacement.is_loaded)
        self.assertTrue(replacement.has_children)


class EntrySubscriptionTests(unittest.TestCase):
    def test_clear_subscriptions_releases_feed_registration_once(self) -> None:
        feed = ChangeFeed()
        entry = _entry({"id": "a"})
        entry.add_subscription(feed.register("a", lambda _record_id: None))
        self.assertEqual(feed.subscriber_count("a"), 1)
        self.assertEqual(entry.subscription_count, 1)

        entry.clear_subscriptions()
        entry.clear_subscriptions()

        self.assertEqual(feed.subscriber_count("a"), 0)
        self.assertEqual(entry.subscription_count, 0)


class EntryTitleTests(unittest.TestCase):
    def test_static_title_reads_attribute_and_falls_back_to_nbsp(self) -> None:
        method = static_title_method("title", RecordAdapter())
        self.assertEqual(method({"title": "Alpha"}), Title("Alpha", False))
        self.assertEqual(method({"title": ""}).text, NBSP)
        self.assertEqual(method({}).text, NBSP)

    def test_entry_without_title_strategy_uses_nbsp(self) -> None:
        self.assertEqual(_entry({"id": "a"}).title, Title())
        self.assertEqual(Title().text, NBSP)

    def test_static_title_html_flag(self) -> None:
        method = static_title_method("title", RecordAdapter(), render_as_html=True)
        self.assertTrue(method({"title": "<b>x</b>"}).is_html)


class DynamicTitleTests(unittest.IsolatedAsyncioTestCase):
    async def test_dynamic_title_awaits_provider(self) -> None:
        async def fetch(record: object) -> object:
            return f"title for {record['id']}"

        entry = _entry({"id": "a"}, EntryOptions(dynamic_title=dynamic_title_method(fetch)))
        title = await entry.resolve_title()
        self.assertEqual(title.text, "title for a")

    async def test_dynamic_title_failure_falls_back_to_nbsp(self) -> None:
        async def fetch(_record: object) -> object:
            raise RuntimeError("boom")

        method = dynamic_title_method(fetch, render_as_html=True)
        title = await method({"id": "a"})
        self.assertEqual(title, Title(NBSP, True))

    async def test_resolve_title_without_provider_uses_static(self) -> None:
        options = EntryOptions(static_title=static_title_method("title", RecordAdapter()))
        entry = _entry({"id": "a", "title": "Alpha"}, options)
        self.assertEqual((await entry.resolve_title()).text, "Alpha")


if __name__ == "__main__":
    unittest.main()

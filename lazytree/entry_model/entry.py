"""In-memory wrapper around one hierarchical record plus its UI flags."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from ..config import StoreConfig
from .records import RecordAdapter
from .types import EntryOptions, Title, TreeObject

EntryChangeListener = Callable[[str, "Entry"], None]


@dataclass(frozen=True)
class EntryAttributes:
    """Attribute mapping used to read relationship and display fields."""

    relation_type: str = "node_parent"
    parent_ref: str | None = None
    child_ref: str | None = None
    has_child_attr: str | None = None
    root_attr: str | None = None
    icon_attr: str | None = None
    class_attr: str | None = None

    @classmethod
    def from_config(cls, config: StoreConfig) -> EntryAttributes:
        return cls(
            relation_type=config.relation_type,
            parent_ref=config.parent_ref if config.relation_type == "node_parent" else None,
            child_ref=config.child_ref if config.relation_type == "node_children" else None,
            has_child_attr=config.has_child_attr,
            root_attr=config.root_attr,
            icon_attr=config.icon_attr,
            class_attr=config.class_attr,
        )

    @property
    def uses_child_references(self) -> bool:
        return self.relation_type == "node_children"


def _optional_text(value: object) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


class Entry:
    """One record and its expanded/selected/loaded flags.

    Identity and relationship fields are read from the record once, at
    construction. Flag setters report through ``listener`` so the owning
    store can notify its subscribers; ``set_expanded`` additionally calls
    ``on_expand_change`` (state persistence) unless told not to.
    """

    def __init__(
        self,
        record: object,
        options: EntryOptions,
        attributes: EntryAttributes,
        adapter: RecordAdapter,
        *,
        on_expand_change: Callable[[], None] | None = None,
        listener: EntryChangeListener | None = None,
    ) -> None:
        self.record = record
        self.options = options
        self.attributes = attributes
        self._adapter = adapter
        self._on_expand_change = on_expand_change
        self._listener = listener
        self._subscriptions: list[Callable[[], None]] = []

        self.id = adapter.record_id(record)
        self.child_ids: tuple[str, ...] = (
            adapter.references(record, attributes.child_ref) if attributes.uses_child_references else ()
        )
        if options.parent is not None:
            self.parent_id: str | None = options.parent
        else:
            self.parent_id = adapter.reference(record, attributes.parent_ref)
        self.is_root = bool(options.is_root) or bool(adapter.get(record, attributes.root_attr))
        self.has_children = self._read_has_children()
        self.is_loaded = bool(options.is_loaded)
        self.is_expanded = False
        self.is_selected = False
        self.is_loading = False
        self.icon = _optional_text(adapter.get(record, attributes.icon_attr))
        self.class_name = _optional_text(adapter.get(record, attributes.class_attr))

    def __repr__(self) -> str:
        return (
            f"Entry(id={self.id!r}, parent_id={self.parent_id!r}, expanded={self.is_expanded}, "
            f"selected={self.is_selected}, loaded={self.is_loaded})"
        )

    def _read_has_children(self) -> bool | None:
        """Tri-state: ``None`` means unknown until children are loaded."""
        if self.attributes.has_child_attr:
            value = self._adapter.get(self.record, self.attributes.has_child_attr)
            if value is None:
                return None
            return bool(value)
        if self.attributes.uses_child_references:
            return len(self.child_ids) > 0
        return None

    def _changed(self, kind: str) -> None:
        if self._listener is not None:
            self._listener(kind, self)

    # Flags

    def set_expanded(self, expanded: bool, notify: bool = True) -> None:
        self.is_expanded = bool(expanded)
        self._changed("expansion")
        if notify and self._on_expand_change is not None:
            self._on_expand_change()

    def set_selected(self, selected: bool) -> None:
        self.is_selected = bool(selected)
        self._changed("selection")

    def set_loaded(self, loaded: bool) -> None:
        self.is_loaded = bool(loaded)
        self._changed("entries")

    def set_loading(self, loading: bool) -> None:
        self.is_loading = bool(loading)

    def set_has_children(self, has_children: bool | None) -> None:
        self.has_children = has_children
        self._changed("entries")

    def set_parent(self, parent_id: str | None, commit: bool = False) -> None:
        """Point this entry at ``parent_id``; ``commit`` writes it to the record."""
        self.parent_id = parent_id
        if commit:
            self._adapter.set_reference(self.record, self.attributes.parent_ref, parent_id)
        self._changed("entries")

    def adopt_ui_state(self, previous: Entry) -> None:
        """Carry UI flags over from the entry this one replaces."""
        self.is_expanded = previous.is_expanded
        self.is_selected = previous.is_selected
        self.is_loading = previous.is_loading
        self.is_loaded = self.is_loaded or previous.is_loaded
        if previous.is_loaded and self.has_children is None:
            self.has_children = previous.has_children

    # Subscriptions

    def add_subscription(self, release: Callable[[], None]) -> None:
        self._subscriptions.append(release)

    def clear_subscriptions(self) -> None:
        """Release every registration; safe to call more than once."""
        subscriptions, self._subscriptions = self._subscriptions, []
        for release in subscriptions:
            release()

    @property
    def subscription_count(self) -> int:
        return len(self._subscriptions)

    # Titles

    @property
    def title(self) -> Title:
        if self.options.static_title is not None:
            return self.options.static_title(self.record)
        return Title()

    async def resolve_title(self) -> Title:
        if self.options.dynamic_title is not None:
            return await self.options.dynamic_title(self.record)
        return self.title

    def to_tree_object(self, parent: str | None = None, highlight: bool = False) -> TreeObject:
        """Snapshot for view derivation; ``parent`` overrides the own reference."""
        return TreeObject(
            id=self.id,
            parent=parent if parent is not None else self.parent_id,
            children=self.child_ids,
            root=self.is_root,
            has_children=self.has_children,
            is_loaded=self.is_loaded,
            is_expanded=self.is_expanded,
            is_selected=self.is_selected,
            highlight=highlight,
            icon=self.icon,
            class_name=self.class_name,
            title=self.title,
        )


__all__ = ["Entry", "EntryAttributes", "EntryChangeListener"]

"""Selection and expansion management for the node store."""

from __future__ import annotations

from ..entry_model.entry import Entry
from ..logging import get_logger
from ..tree_model import walk_ancestors

logger = get_logger(__name__)


class SelectionMixin:
    """Single selection, expanded-node tracking, and lazy load triggering."""

    @property
    def selected_entries(self) -> list[Entry]:
        return [entry for entry in self.entries if entry.is_selected]

    @property
    def selected_ids(self) -> list[str]:
        return [entry.id for entry in self.entries if entry.is_selected]

    @property
    def expanded_keys(self) -> list[str]:
        return [entry.id for entry in self.entries if entry.is_expanded]

    def select_entry(self, entry_id: str, expand_change: bool = True) -> None:
        """Select ``entry_id`` and deselect every other entry."""
        if not self.config.hold_selection or not self._can_interact("select_entry"):
            return
        with self._listeners.batch():
            selected_found = False
            for entry in self.selected_entries:
                if entry.id != entry_id:
                    entry.set_selected(False)
                else:
                    selected_found = True
            if not selected_found:
                entry = self.find_entry(entry_id)
                if entry is not None:
                    entry.set_selected(True)
        if expand_change:
            self._on_expand_change()

    def parent_ids_of(self, entry_id: str) -> list[str]:
        """Loaded ancestors of ``entry_id``, nearest first."""
        return walk_ancestors(entry_id, self._mapping(), (entry.id for entry in self.entries))

    def set_selected_from_external(self, entry_id: str) -> None:
        """Reveal and select ``entry_id``: only its ancestors stay expanded."""
        if not self.config.hold_selection or not self._can_interact("set_selected_from_external"):
            return
        found = self.find_entry(entry_id)
        logger.debug("set selected from external", entry_id=entry_id, found=found is not None)
        if found is None:
            return
        parent_ids = self.parent_ids_of(found.id)
        to_collapse = [key for key in self.expanded_keys if key not in parent_ids]
        with self._listeners.batch():
            for key in to_collapse:
                self.expand_key(key, False, notify=False)
            for parent_id in parent_ids:
                self.expand_key(parent_id, True, notify=False)
            self.select_entry(found.id)

    def expand_key(self, entry_id: str, expand: bool, notify: bool = True) -> None:
        """Open or close one node.

        Opening a node whose children were never fetched hands it to the
        child loader instead; the loader's merge expands it afterwards.
        """
        if not self._can_interact("expand_key"):
            return
        entry = self.find_entry(entry_id)
        if entry is None:
            return
        if expand and not entry.is_loaded:
            self._request_children(entry, entry_id)
            return
        entry.set_expanded(expand, notify)

    def expand_all(self, notify: bool = True) -> None:
        """Expand every materialized node that has children in the current view."""
        if not self._can_interact("expand_all"):
            return
        forest = self.entry_tree
        with self._listeners.batch():
            for node in forest:
                if not node.children:
                    continue
                entry = self.find_entry(node.id)
                if entry is not None and not entry.is_expanded:
                    entry.set_expanded(True, notify=False)
        if notify:
            self._on_expand_change()

    def collapse_all(self, notify: bool = True) -> None:
        if not self._can_interact("collapse_all"):
            return
        with self._listeners.batch():
            for entry in self.entries:
                if entry.is_expanded:
                    entry.set_expanded(False, notify=False)
        if notify:
            self._on_expand_change()


__all__ = ["SelectionMixin"]

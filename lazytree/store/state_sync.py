"""Navigation-state synchronization with the persistence collaborator.

Every non-suppressed expansion or selection change writes
``{context, expanded, selected}``. A context switch first snapshots the
outgoing context's expansion into a transient per-context cache, unless a
search is active (the expanded set then reflects matches, not intent).
"""

from __future__ import annotations

from collections.abc import Sequence

from ..entry_model.entry import Entry
from ..logging import get_logger
from ..persistence import TableState

logger = get_logger(__name__)


class StateSyncMixin:
    """Reads and writes ``TableState`` snapshots keyed by the active context."""

    def current_state(self) -> TableState:
        return TableState(
            context=self.context_id,
            expanded=tuple(self.expanded_keys),
            selected=tuple(self.selected_ids),
        )

    def _write_state(self, state: TableState) -> None:
        try:
            self.state_store.write(state)
        except Exception:
            logger.exception("state write failed", context=state.context)

    def _on_expand_change(self) -> None:
        if self.context_id is not None:
            self._write_state(self.current_state())

    def set_context(self, context_id: str | None) -> None:
        """Adopt a new root context, snapshotting the outgoing one first."""
        logger.debug("set context", previous=self.context_id, context=context_id)
        changed = context_id != self.context_id
        if changed:
            self.reset_state = True

        if self.context_id is not None and self.search_query == "":
            expanded = tuple(self.expanded_keys)
            self.expanded_mapping[self.context_id] = expanded
            self._write_state(
                TableState(
                    context=self.context_id,
                    expanded=expanded,
                    selected=tuple(self.selected_ids),
                )
            )

        if changed:
            self.generation += 1
        self.context_id = context_id
        self._emit("context")

    def acknowledge_reset(self) -> bool:
        """Clear the reset flag for the consuming layer; return its old value."""
        was_reset = self.reset_state
        self.reset_state = False
        return was_reset

    def _read_initial_state(self, context: str) -> TableState:
        try:
            return self.state_store.read(context)
        except Exception:
            logger.exception("state read failed", context=context)
            return TableState.empty(context)

    def _restore_initial_state(self, entries: Sequence[Entry]) -> None:
        """Restore expansion/selection after a clean merge.

        Selection is restored before expansion, both without per-entry
        writes; one snapshot is written at the end.
        """
        context = self.context_id
        if context is None:
            return
        if not self.config.state_full and context in self.expanded_mapping:
            mapping = set(self.expanded_mapping[context])
            for entry in entries:
                if entry.id in mapping:
                    entry.set_expanded(True, notify=False)
            self._write_state(self.current_state())
            return
        if not self.config.state_full:
            return

        initial = self._read_initial_state(context).filtered_to(entry.id for entry in entries)
        logger.debug(
            "restore state",
            context=context,
            expanded=len(initial.expanded),
            selected=len(initial.selected),
        )
        if self.config.hold_selection:
            for entry in entries:
                if entry.id not in initial.selected:
                    continue
                entry.set_selected(True)
                if self.on_load_selection is not None:
                    try:
                        self.on_load_selection(entry.record)
                    except Exception:
                        logger.exception("load selection handler failed", entry_id=entry.id)
                break
        expanded = set(initial.expanded)
        for entry in entries:
            if entry.id in expanded:
                entry.set_expanded(True, notify=False)
        self._write_state(self.current_state())


__all__ = ["StateSyncMixin"]

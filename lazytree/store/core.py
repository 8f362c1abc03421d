"""Node store: the authoritative entry collection and its public operations.

The entry collection is replaced wholesale on every structural change, so
derived views never observe a half-applied merge. Views (tree mapping,
search-filtered entry list, forest, visible rows) are pure functions of the
current state, cached per change revision.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Coroutine, Iterable
from typing import Any

from ..config import StoreConfig
from ..entry_model import Entry, EntryAttributes, EntryFactory, EntryOptions, RecordAdapter, TreeObject
from ..feed import ChangeFeed
from ..logging import get_logger
from ..persistence import DisabledStateStore, StateStore
from ..tree_model import (
    TreeForest,
    VisibleRow,
    apply_parent_mapping,
    build_forest,
    derive_entry_list,
    flatten_visible,
    resolve_parent_mapping,
)
from ..validation import ValidationMessage, validate_config
from .events import StoreChange, StoreListener, StoreListeners
from .search import SearchMixin
from .selection import SelectionMixin
from .state_sync import StateSyncMixin

logger = get_logger(__name__)

ChildLoader = Callable[[Entry, str | None], Awaitable[None]]
SearchHandler = Callable[[str], Awaitable[Iterable[str] | None]]
RecordResolver = Callable[[str], Awaitable[object | None]]


class NodeStore(SelectionMixin, SearchMixin, StateSyncMixin):
    """State container for one mounted tree view."""

    def __init__(
        self,
        config: StoreConfig | None = None,
        *,
        context_id: str | None = None,
        adapter: RecordAdapter | None = None,
        feed: ChangeFeed | None = None,
        child_loader: ChildLoader | None = None,
        search_handler: SearchHandler | None = None,
        resolve_record: RecordResolver | None = None,
        state_store: StateStore | None = None,
        on_load_selection: Callable[[object], None] | None = None,
        validation_messages: Iterable[ValidationMessage] | None = None,
    ) -> None:
        self.config = config if config is not None else StoreConfig()
        self.attributes = EntryAttributes.from_config(self.config)
        self.adapter = adapter if adapter is not None else RecordAdapter()
        self.child_loader = child_loader
        self.search_handler = search_handler
        self.resolve_record = resolve_record
        self.state_store: StateStore = state_store if state_store is not None else DisabledStateStore()
        self.on_load_selection = on_load_selection

        self.context_id = context_id
        self._entries: tuple[Entry, ...] = ()
        self._by_id: dict[str, Entry] = {}
        self.filter_ids: frozenset[str] = frozenset()
        self.search_query = ""
        self._loading = 0
        self.reset_state = False
        self.expanded_mapping: dict[str, tuple[str, ...]] = {}
        self.validation_messages: tuple[ValidationMessage, ...] = tuple(
            validation_messages if validation_messages is not None else validate_config(self.config)
        )

        self.generation = 0
        self.revision = 0
        self._listeners = StoreListeners()
        self._derived: dict[str, tuple[int, Any]] = {}
        self._tasks: set[asyncio.Task[Any]] = set()
        self._factory = EntryFactory(
            self.attributes,
            self.adapter,
            feed=feed,
            on_record_changed=self._on_record_changed,
            on_expand_change=self._on_expand_change,
            listener=self._on_entry_changed,
        )

    # Notifications

    def subscribe(self, listener: StoreListener) -> Callable[[], None]:
        """Register ``listener`` for committed changes; returns unsubscribe."""
        return self._listeners.subscribe(listener)

    def _emit(self, kind: str) -> None:
        self.revision += 1
        self._listeners.emit(StoreChange(kind=kind, revision=self.revision))

    def _on_entry_changed(self, kind: str, entry: Entry) -> None:
        if self.find_entry(entry.id) is entry:
            self._emit(kind)

    def _cached(self, name: str, compute: Callable[[], Any]) -> Any:
        cached = self._derived.get(name)
        if cached is not None and cached[0] == self.revision:
            return cached[1]
        value = compute()
        self._derived[name] = (self.revision, value)
        return value

    # Validation

    @property
    def has_fatal_errors(self) -> bool:
        return any(message.fatal for message in self.validation_messages)

    @property
    def disabled(self) -> bool:
        return self.has_fatal_errors or self.context_id is None

    def add_validation_message(self, message: ValidationMessage) -> None:
        self.validation_messages = (*self.validation_messages, message)
        self._emit("validation")

    def remove_validation_message(self, message_id: str) -> None:
        messages = list(self.validation_messages)
        for idx, message in enumerate(messages):
            if message.id == message_id:
                del messages[idx]
                self.validation_messages = tuple(messages)
                self._emit("validation")
                return

    def _can_ingest(self, operation: str) -> bool:
        if self.has_fatal_errors:
            logger.warning("store disabled by configuration errors", operation=operation)
            return False
        return True

    def _can_interact(self, operation: str) -> bool:
        if self.disabled:
            logger.debug("store disabled", operation=operation, context=self.context_id)
            return False
        return True

    # Entries

    @property
    def entries(self) -> tuple[Entry, ...]:
        return self._entries

    @entries.setter
    def entries(self, entries: Iterable[Entry]) -> None:
        self._entries = tuple(entries)
        self._by_id = {entry.id: entry for entry in self._entries}

    def find_entry(self, entry_id: str) -> Entry | None:
        return self._by_id.get(entry_id)

    def set_entries(
        self,
        records: Iterable[object],
        options: EntryOptions | None = None,
        clean: bool = True,
        expand_after: str | None = None,
    ) -> None:
        """Ingest ``records``.

        ``clean`` replaces the collection, clears search state and restores
        initial expansion/selection; otherwise entries merge by id, replacing
        in place and appending new ids. ``expand_after`` names a node forced
        open after the merge (used once a lazy load completes).
        """
        if not self._can_ingest("set_entries"):
            return
        options = options if options is not None else EntryOptions()
        records = list(records)
        logger.debug("set entries", count=len(records), clean=clean, expand_after=expand_after)
        entries = self._factory.create_many(records, options)

        with self._listeners.batch():
            if clean:
                for previous in self.entries:
                    previous.clear_subscriptions()
                self.entries = tuple(entries)
                self.filter_ids = frozenset()
                self.search_query = ""
                self.generation += 1
                self._emit("entries")
                self._emit("search")
                if self.config.load_full and self.context_id is not None:
                    self._restore_initial_state(self.entries)
            else:
                merged = list(self.entries)
                positions = {entry.id: idx for idx, entry in enumerate(merged)}
                for entry in entries:
                    idx = positions.get(entry.id)
                    if idx is None:
                        positions[entry.id] = len(merged)
                        merged.append(entry)
                        continue
                    previous = merged[idx]
                    previous.clear_subscriptions()
                    entry.adopt_ui_state(previous)
                    merged[idx] = entry
                self.entries = tuple(merged)
                self._emit("entries")

            if expand_after is not None:
                target = self.find_entry(expand_after)
                if target is not None:
                    target.set_expanded(True)

    def set_entry(self, record: object, options: EntryOptions | None = None) -> None:
        self.set_entries([record], options, clean=False)

    def remove_entry(self, entry_id: str) -> None:
        if not self._can_ingest("remove_entry"):
            return
        remaining: list[Entry] = []
        removed: Entry | None = None
        for entry in self.entries:
            if removed is None and entry.id == entry_id:
                removed = entry
                continue
            remaining.append(entry)
        if removed is None:
            return
        removed.clear_subscriptions()
        self.entries = tuple(remaining)
        self._emit("entries")

    def switch_entry_parent(self, node_id: str | None, target_parent_id: str | None) -> None:
        """Re-parent ``node_id`` under ``target_parent_id`` and commit it."""
        if not node_id or not target_parent_id or self.attributes.uses_child_references:
            return
        if not self._can_interact("switch_entry_parent"):
            return
        node = self.find_entry(node_id)
        parent = self.find_entry(target_parent_id)
        if node is None or parent is None or node.is_root or node is parent:
            return
        if node.id in self.parent_ids_of(parent.id):
            logger.warning("refusing to move a node under its own descendant", node_id=node_id)
            return
        node.set_parent(parent.id, commit=True)

    def load_entry_children(self, entry: Entry | None) -> None:
        if entry is None:
            return
        self._request_children(entry, None)

    @property
    def is_loading(self) -> bool:
        return self._loading > 0

    def set_loading(self, loading: bool) -> None:
        """Open (``True``) or close (``False``) one in-flight load."""
        if loading:
            self._loading += 1
        elif self._loading > 0:
            self._loading -= 1
        self._emit("loading")

    # Derived views

    @property
    def tree_mapping(self) -> dict[str, str]:
        """Child id -> parent id for the current collection (a copy)."""
        return dict(self._mapping())

    def _mapping(self) -> dict[str, str]:
        return self._cached(
            "tree_mapping",
            lambda: resolve_parent_mapping(
                [entry.to_tree_object() for entry in self.entries],
                self.attributes.uses_child_references,
            ),
        )

    @property
    def entry_list(self) -> list[TreeObject]:
        """Snapshots for the view: everything, or matches plus ancestors."""
        return list(self._entry_objects())

    def _entry_objects(self) -> tuple[TreeObject, ...]:
        def compute() -> tuple[TreeObject, ...]:
            mapping = self._mapping()
            objects = apply_parent_mapping(
                [entry.to_tree_object() for entry in self.entries],
                mapping,
                self.attributes.uses_child_references,
            )
            return tuple(derive_entry_list(objects, mapping, self.search_query, self.filter_ids))

        return self._cached("entry_list", compute)

    @property
    def entry_tree(self) -> TreeForest:
        return self._cached("entry_tree", lambda: build_forest(self._entry_objects()))

    def visible_rows(self) -> list[VisibleRow]:
        """Rows for the current revision; callers get their own list."""
        return list(self._cached("visible_rows", lambda: tuple(flatten_visible(self.entry_tree))))

    # Background work

    def _schedule(self, coro: Coroutine[Any, Any, None]) -> asyncio.Task[None] | None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("no running event loop; background work dropped")
            coro.close()
            return None
        task = loop.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def wait_idle(self) -> None:
        """Wait until scheduled child loads and record refreshes finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _request_children(self, entry: Entry, expand_after: str | None) -> None:
        if self.child_loader is None:
            return
        if entry.is_loading:
            logger.debug("child load already in flight", entry_id=entry.id)
            return
        entry.set_loading(True)
        self._schedule(self._run_child_load(entry, expand_after, self.generation))

    async def _run_child_load(self, entry: Entry, expand_after: str | None, generation: int) -> None:
        assert self.child_loader is not None
        try:
            await self.child_loader(entry, expand_after)
        except Exception:
            logger.exception("child loader failed", entry_id=entry.id)
            current = self.find_entry(entry.id)
            if generation == self.generation and current is not None:
                current.set_has_children(False)
                current.set_loaded(True)
        finally:
            entry.set_loading(False)
            current = self.find_entry(entry.id)
            if current is not None:
                current.set_loading(False)

    def is_current(self, entry: Entry, generation: int | None = None) -> bool:
        """Whether an async result for ``entry`` may still be applied."""
        if generation is not None and generation != self.generation:
            return False
        return self.find_entry(entry.id) is not None

    def _on_record_changed(self, record_id: str) -> None:
        if self.resolve_record is None:
            return
        self._schedule(self._refresh_entry(record_id, self.generation))

    async def _refresh_entry(self, record_id: str, generation: int) -> None:
        assert self.resolve_record is not None
        try:
            record = await self.resolve_record(record_id)
        except Exception:
            logger.exception("record refresh failed", record_id=record_id)
            return
        if generation != self.generation:
            logger.warning("discarding stale record refresh", record_id=record_id)
            return
        entry = self.find_entry(record_id)
        if entry is None:
            return
        if record is None:
            self.remove_entry(record_id)
        else:
            self.set_entry(record, entry.options)


__all__ = ["NodeStore", "ChildLoader", "SearchHandler", "RecordResolver"]

"""Mounted-tree session: wires a node store to its data collaborators.

A session owns one store and the host fetchers behind it. Opening a context
adopts it on the store and bulk-loads its records; expanding an unloaded
node fetches that node's children; searching delegates to the host.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from pathlib import Path

from .config import StoreConfig
from .entry_model import Entry, EntryOptions, RecordAdapter
from .feed import ChangeFeed
from .loaders import (
    FetchChildren,
    FetchRecords,
    FetchTitle,
    SearchRecords,
    call_collaborator,
    entry_options_for,
    search_result_ids,
)
from .logging import get_logger
from .persistence import StateStore, state_store_for_config
from .store import NodeStore, RecordResolver

logger = get_logger(__name__)

EXTERNAL_SELECTORS: dict[str, Callable[[str], None]] = {}


def external_select_name(context_id: str) -> str:
    return f"__TreeView_{context_id}_select"


class TreeSession:
    """One mounted tree: store plus bulk/child/search loaders."""

    def __init__(
        self,
        config: StoreConfig,
        *,
        fetch_records: FetchRecords,
        fetch_children: FetchChildren | None = None,
        search_records: SearchRecords | None = None,
        resolve_record: RecordResolver | None = None,
        fetch_title: FetchTitle | None = None,
        on_load_selection: Callable[[object], None] | None = None,
        state_store: StateStore | None = None,
        state_path: Path | None = None,
        adapter: RecordAdapter | None = None,
        feed: ChangeFeed | None = None,
    ) -> None:
        self.config = config
        self.adapter = adapter if adapter is not None else RecordAdapter()
        self._fetch_records = fetch_records
        self._fetch_children = fetch_children
        self._search_records = search_records
        self._fetch_title = fetch_title
        self._exposed_select: str | None = None

        restore_handler = on_load_selection
        if not (config.execute_select_on_restore and config.state_management != "disabled"):
            restore_handler = None
        self.search_enabled = config.search_active and search_records is not None

        self.store = NodeStore(
            config,
            adapter=self.adapter,
            feed=feed,
            child_loader=self.fetch_children,
            search_handler=self.search if self.search_enabled else None,
            resolve_record=resolve_record,
            state_store=state_store if state_store is not None else state_store_for_config(config, state_path),
            on_load_selection=restore_handler,
        )

    def entry_options(self, *, is_root: bool = False, parent: str | None = None, is_loaded: bool = False) -> EntryOptions:
        return entry_options_for(
            self.config,
            self.adapter,
            fetch_title=self._fetch_title,
            is_root=is_root,
            parent=parent,
            is_loaded=is_loaded,
        )

    async def open(self, context_id: str | None) -> None:
        """Adopt ``context_id`` and load its records."""
        if self.config.expose_select:
            self._remove_exposed_select()
        self.store.set_context(context_id)
        if context_id is None:
            return
        if self.config.expose_select:
            name = external_select_name(context_id)
            EXTERNAL_SELECTORS[name] = self.store.set_selected_from_external
            self._exposed_select = name
            logger.debug("expose external select method", name=name)
        await self.fetch_data(context_id)

    def close(self) -> None:
        """Unmount: drop the exposed selector and release entry subscriptions."""
        self._remove_exposed_select()
        for entry in self.store.entries:
            entry.clear_subscriptions()

    def _remove_exposed_select(self) -> None:
        name = self._exposed_select
        if name is not None and EXTERNAL_SELECTORS.pop(name, None) is not None:
            logger.debug("remove external select method", name=name)
        self._exposed_select = None

    async def fetch_data(self, context_id: str) -> None:
        """Bulk-load the records of ``context_id`` with a clean merge."""
        store = self.store
        logger.debug("fetch data", context=context_id)
        generation = store.generation
        store.set_loading(True)
        try:
            records = await call_collaborator("fetch_records", self._fetch_records, context_id)
            if store.context_id != context_id or store.generation != generation:
                logger.warning("discarding records for superseded context", context=context_id)
                return

            if records is not None:
                options = self.entry_options(
                    is_root=self.config.load_scenario == "top",
                    is_loaded=self.config.load_full,
                )
                store.set_entries(records, options)
            else:
                store.set_entries([], EntryOptions())
        finally:
            store.set_loading(False)

    async def fetch_children(self, parent: Entry, expand_after: str | None = None) -> None:
        """Child loader: merge ``parent``'s children, then expand ``expand_after``."""
        if self.config.load_full:
            return
        store = self.store
        logger.debug("fetch children", entry_id=parent.id)
        generation = store.generation

        records = None
        if self._fetch_children is None:
            logger.info("cannot load children: no child fetcher configured", entry_id=parent.id)
        else:
            store.set_loading(True)
            try:
                records = await call_collaborator("fetch_children", self._fetch_children, parent.record)
            finally:
                store.set_loading(False)

        if not store.is_current(parent, generation):
            logger.warning("discarding children for superseded node", entry_id=parent.id)
            return

        if records:
            options = self.entry_options(parent=parent.id)
            store.set_entries(records, options, clean=False, expand_after=expand_after)
            current = store.find_entry(parent.id)
            if current is not None:
                current.set_has_children(True)
                current.set_loaded(True)
            return

        current = store.find_entry(parent.id)
        if current is not None:
            current.set_has_children(False)
            current.set_loaded(True)

    async def search(self, query: str) -> list[str] | None:
        if self._search_records is None:
            return None
        result: Iterable[object] | None = await call_collaborator("search_records", self._search_records, query)
        return search_result_ids(result, self.adapter)


__all__ = ["EXTERNAL_SELECTORS", "TreeSession", "external_select_name"]

"""Entry construction with per-record change subscriptions attached."""

from __future__ import annotations

from collections.abc import Callable, Iterable

from ..feed import ChangeFeed
from .entry import Entry, EntryAttributes, EntryChangeListener
from .records import RecordAdapter
from .types import EntryOptions


class EntryFactory:
    """Wrap raw records into entries wired back to their owning store."""

    def __init__(
        self,
        attributes: EntryAttributes,
        adapter: RecordAdapter,
        *,
        feed: ChangeFeed | None = None,
        on_record_changed: Callable[[str], None] | None = None,
        on_expand_change: Callable[[], None] | None = None,
        listener: EntryChangeListener | None = None,
    ) -> None:
        self.attributes = attributes
        self.adapter = adapter
        self.feed = feed
        self._on_record_changed = on_record_changed
        self._on_expand_change = on_expand_change
        self._listener = listener

    def create(self, record: object, options: EntryOptions) -> Entry:
        entry = Entry(
            record,
            options,
            self.attributes,
            self.adapter,
            on_expand_change=self._on_expand_change,
            listener=self._listener,
        )
        if self.feed is not None and self._on_record_changed is not None and entry.id:
            entry.add_subscription(self.feed.register(entry.id, self._on_record_changed))
        return entry

    def create_many(self, records: Iterable[object], options: EntryOptions) -> list[Entry]:
        """Create entries; a repeated id keeps its first position and last record."""
        by_id: dict[str, Entry] = {}
        for record in records:
            entry = self.create(record, options)
            previous = by_id.get(entry.id)
            if previous is not None:
                previous.clear_subscriptions()
            by_id[entry.id] = entry
        return list(by_id.values())


__all__ = ["EntryFactory"]

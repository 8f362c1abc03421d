"""Host object model adapter.

The store only needs a stable identifier, reference lookups, and attribute
reads from each record. ``RecordAdapter`` performs those against plain
mappings and falls back to attribute access for other objects.
"""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping
from dataclasses import dataclass


@dataclass(frozen=True)
class RecordAdapter:
    """Read identity, references, and attributes from host records."""

    id_key: str = "id"

    def _read(self, record: object, key: str) -> object:
        if isinstance(record, Mapping):
            return record.get(key)
        return getattr(record, key, None)

    def record_id(self, record: object) -> str:
        value = self._read(record, self.id_key)
        return "" if value is None else str(value)

    def get(self, record: object, attr: str | None) -> object:
        """Return attribute ``attr`` or ``None`` when unset/unconfigured."""
        if not attr:
            return None
        return self._read(record, attr)

    def reference(self, record: object, attr: str | None) -> str | None:
        """Return a single reference id, normalizing blanks to ``None``."""
        value = self.get(record, attr)
        if value is None or value == "":
            return None
        return str(value)

    def references(self, record: object, attr: str | None) -> tuple[str, ...]:
        """Return an ordered, de-duplicated tuple of referenced ids."""
        value = self.get(record, attr)
        if value is None or isinstance(value, (str, bytes)):
            return ()
        try:
            items = list(value)  # type: ignore[call-overload]
        except TypeError:
            return ()
        seen: dict[str, None] = {}
        for item in items:
            if item is None or item == "":
                continue
            seen.setdefault(str(item), None)
        return tuple(seen)

    def set_reference(self, record: object, attr: str | None, value: str | None) -> bool:
        """Write a reference back to ``record``; return whether it was written."""
        if not attr:
            return False
        if isinstance(record, MutableMapping):
            record[attr] = value
            return True
        try:
            setattr(record, attr, value)
        except (AttributeError, TypeError):
            return False
        return True


__all__ = ["RecordAdapter"]

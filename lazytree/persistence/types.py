"""Serializable navigation-state snapshot."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Protocol


def _string_list(value: object) -> list[str]:
    if not isinstance(value, list):
        return []
    out: list[str] = []
    for item in value:
        if isinstance(item, str) and item and item not in out:
            out.append(item)
    return out


@dataclass(frozen=True)
class TableState:
    """Expanded and selected keys for one context, with a write timestamp (ms)."""

    context: str | None
    expanded: tuple[str, ...] = ()
    selected: tuple[str, ...] = ()
    last_update: int | None = field(default=None, compare=False)

    @classmethod
    def empty(cls, context: str | None) -> TableState:
        return cls(context=context)

    def filtered_to(self, known_ids: Iterable[str]) -> TableState:
        """Drop keys that do not name a known entry."""
        known = set(known_ids)
        return TableState(
            context=self.context,
            expanded=tuple(key for key in self.expanded if key in known),
            selected=tuple(key for key in self.selected if key in known),
            last_update=self.last_update,
        )

    def to_dict(self) -> dict[str, object]:
        data: dict[str, object] = {
            "context": self.context,
            "expanded": list(self.expanded),
            "selected": list(self.selected),
        }
        if self.last_update is not None:
            data["lastUpdate"] = self.last_update
        return data

    @classmethod
    def from_dict(cls, data: object, context: str | None = None) -> TableState:
        """Decode ``data``; malformed fields become empty instead of raising."""
        if not isinstance(data, dict):
            return cls.empty(context)
        raw_context = data.get("context")
        raw_update = data.get("lastUpdate")
        last_update = raw_update if isinstance(raw_update, int) and not isinstance(raw_update, bool) else None
        return cls(
            context=raw_context if isinstance(raw_context, str) else context,
            expanded=tuple(_string_list(data.get("expanded"))),
            selected=tuple(_string_list(data.get("selected"))),
            last_update=last_update,
        )


class StateStore(Protocol):
    """Persistence collaborator for navigation state."""

    def read(self, context: str) -> TableState: ...

    def write(self, state: TableState) -> None: ...


__all__ = ["TableState", "StateStore"]

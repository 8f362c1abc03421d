"""Push notifications for committed store changes."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from ..logging import get_logger

logger = get_logger(__name__)

CHANGE_KINDS = ("entries", "expansion", "selection", "search", "context", "loading", "validation")


@dataclass(frozen=True)
class StoreChange:
    """One committed change; ``revision`` increases with every change."""

    kind: str
    revision: int


StoreListener = Callable[[StoreChange], None]


class StoreListeners:
    """Listener list with optional batching.

    Inside ``batch()`` changes are collected and delivered once per kind, in
    first-seen order, when the outermost batch exits.
    """

    def __init__(self) -> None:
        self._listeners: list[StoreListener] = []
        self._batch_depth = 0
        self._pending: dict[str, StoreChange] = {}

    def subscribe(self, listener: StoreListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            try:
                self._listeners.remove(listener)
            except ValueError:
                pass

        return unsubscribe

    def __len__(self) -> int:
        return len(self._listeners)

    def emit(self, change: StoreChange) -> None:
        if self._batch_depth > 0:
            self._pending[change.kind] = change
            return
        self._deliver(change)

    def _deliver(self, change: StoreChange) -> None:
        for listener in list(self._listeners):
            try:
                listener(change)
            except Exception:
                logger.exception("store listener failed", kind=change.kind)

    @contextmanager
    def batch(self) -> Iterator[None]:
        self._batch_depth += 1
        try:
            yield
        finally:
            self._batch_depth -= 1
            if self._batch_depth == 0:
                pending, self._pending = self._pending, {}
                for change in pending.values():
                    self._deliver(change)


__all__ = ["CHANGE_KINDS", "StoreChange", "StoreListener", "StoreListeners"]

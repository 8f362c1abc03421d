"""Record-changed notification hub.

Hosts call ``ChangeFeed.notify(record_id)`` when a backing record changes.
Entries register one callback per record id and must deregister it when
they are destroyed; ``register`` returns the matching release callable.
"""

from __future__ import annotations

from collections.abc import Callable

from .logging import get_logger

logger = get_logger(__name__)

RecordChangedCallback = Callable[[str], None]


class ChangeFeed:
    """Explicit register/deregister pairs keyed by record id."""

    def __init__(self) -> None:
        self._callbacks: dict[str, list[RecordChangedCallback]] = {}

    def register(self, record_id: str, callback: RecordChangedCallback) -> Callable[[], None]:
        """Register ``callback`` for ``record_id`` and return its release."""
        self._callbacks.setdefault(record_id, []).append(callback)
        released = False

        def release() -> None:
            nonlocal released
            if released:
                return
            released = True
            self.deregister(record_id, callback)

        return release

    def deregister(self, record_id: str, callback: RecordChangedCallback) -> None:
        callbacks = self._callbacks.get(record_id)
        if not callbacks:
            return
        try:
            callbacks.remove(callback)
        except ValueError:
            return
        if not callbacks:
            del self._callbacks[record_id]

    def subscriber_count(self, record_id: str | None = None) -> int:
        """Return live registrations for one id, or across all ids."""
        if record_id is not None:
            return len(self._callbacks.get(record_id, ()))
        return sum(len(callbacks) for callbacks in self._callbacks.values())

    def notify(self, record_id: str) -> int:
        """Invoke callbacks for ``record_id``; return how many ran."""
        callbacks = list(self._callbacks.get(record_id, ()))
        for callback in callbacks:
            try:
                callback(record_id)
            except Exception:
                logger.exception("record change callback failed", record_id=record_id)
        return len(callbacks)


__all__ = ["ChangeFeed", "RecordChangedCallback"]

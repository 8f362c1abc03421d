"""Persistence backends for per-context navigation state.

Snapshots are keyed by ``TreeViewState-<key>[-<context>]``. A read of a
missing or expired snapshot writes and returns the empty state. IO and
decode errors never escape a backend.
"""

from __future__ import annotations

import json
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

from platformdirs import user_state_dir

from ..config import APP_NAME, StoreConfig
from ..logging import get_logger
from .types import TableState

logger = get_logger(__name__)

STATE_FILENAME = "tree_state.json"
DEFAULT_STATE_PATH = Path(user_state_dir(APP_NAME, appauthor=False)) / STATE_FILENAME
STATE_KEY_PREFIX = "TreeViewState"


def now_ms() -> int:
    return int(time.time() * 1000)


def state_storage_key(state_key: str, include_context: bool, context: str | None) -> str:
    """Return the storage key for ``context`` under the configured naming."""
    if state_key:
        if include_context:
            return f"{STATE_KEY_PREFIX}-{state_key}-{context}"
        return f"{STATE_KEY_PREFIX}-{state_key}"
    return f"{STATE_KEY_PREFIX}-{context}"


class _KeyedStateStore:
    """Shared TTL and key handling over a raw key/value backing."""

    def __init__(
        self,
        *,
        state_key: str = "",
        include_context: bool = True,
        ttl_minutes: int = 0,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self.state_key = state_key
        self.include_context = include_context
        self.ttl_minutes = ttl_minutes
        self._clock = clock

    def _get(self, key: str) -> object | None:
        raise NotImplementedError

    def _set(self, key: str, value: dict[str, object]) -> None:
        raise NotImplementedError

    def key_for(self, context: str | None) -> str:
        return state_storage_key(self.state_key, self.include_context, context)

    def _is_fresh(self, state: TableState) -> bool:
        if state.last_update is None:
            return False
        return self._clock() - state.last_update < self.ttl_minutes * 60 * 1000

    def read(self, context: str) -> TableState:
        key = self.key_for(context)
        raw = self._get(key)
        empty = TableState.empty(context)
        if raw is None:
            self.write(empty)
            return empty
        stored = TableState.from_dict(raw, context)
        logger.debug("state read", key=key, expanded=len(stored.expanded), selected=len(stored.selected))
        if self._is_fresh(stored):
            return stored
        self.write(empty)
        return empty

    def write(self, state: TableState) -> None:
        key = self.key_for(state.context)
        stamped = TableState(
            context=state.context,
            expanded=tuple(state.expanded),
            selected=tuple(state.selected),
            last_update=self._clock(),
        )
        logger.debug("state write", key=key, expanded=len(stamped.expanded), selected=len(stamped.selected))
        self._set(key, stamped.to_dict())


class SessionStateStore(_KeyedStateStore):
    """In-memory snapshots that live as long as the process."""

    def __init__(
        self,
        *,
        state_key: str = "",
        include_context: bool = True,
        ttl_minutes: int = 0,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        super().__init__(state_key=state_key, include_context=include_context, ttl_minutes=ttl_minutes, clock=clock)
        self._data: dict[str, dict[str, object]] = {}

    def _get(self, key: str) -> object | None:
        return self._data.get(key)

    def _set(self, key: str, value: dict[str, object]) -> None:
        self._data[key] = value


class LocalStateStore(_KeyedStateStore):
    """Durable snapshots in one JSON object file."""

    def __init__(
        self,
        path: Path | None = None,
        *,
        state_key: str = "",
        include_context: bool = True,
        ttl_minutes: int = 0,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        super().__init__(state_key=state_key, include_context=include_context, ttl_minutes=ttl_minutes, clock=clock)
        self.path = path if path is not None else DEFAULT_STATE_PATH

    def _load_all(self) -> dict[str, object]:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except Exception:
            return {}
        return data if isinstance(data, dict) else {}

    def _get(self, key: str) -> object | None:
        return self._load_all().get(key)

    def _set(self, key: str, value: dict[str, object]) -> None:
        data = self._load_all()
        data[key] = value
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
        except Exception as exc:
            logger.warning("state write failed", path=str(self.path), error=str(exc))


class DisabledStateStore:
    """State management switched off: reads are empty, writes are dropped."""

    def read(self, context: str) -> TableState:
        return TableState.empty(context)

    def write(self, state: TableState) -> None:
        return None


def state_store_for_config(
    config: StoreConfig,
    path: Path | None = None,
    clock: Callable[[], int] = now_ms,
) -> LocalStateStore | SessionStateStore | DisabledStateStore:
    """Return the backend selected by ``config.state_management``."""
    options: dict[str, Any] = dict(
        state_key=config.state_key,
        include_context=config.state_key_include_context,
        ttl_minutes=config.state_ttl_minutes,
        clock=clock,
    )
    if config.state_management == "local":
        return LocalStateStore(path, **options)
    if config.state_management == "session":
        return SessionStateStore(**options)
    return DisabledStateStore()


__all__ = [
    "DEFAULT_STATE_PATH",
    "DisabledStateStore",
    "LocalStateStore",
    "SessionStateStore",
    "now_ms",
    "state_storage_key",
    "state_store_for_config",
]

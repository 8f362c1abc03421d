"""Navigation-state snapshots and their persistence backends."""

from __future__ import annotations

from .stores import (
    DEFAULT_STATE_PATH,
    DisabledStateStore,
    LocalStateStore,
    SessionStateStore,
    now_ms,
    state_storage_key,
    state_store_for_config,
)
from .types import StateStore, TableState

__all__ = [
    "TableState",
    "StateStore",
    "DEFAULT_STATE_PATH",
    "DisabledStateStore",
    "LocalStateStore",
    "SessionStateStore",
    "now_ms",
    "state_storage_key",
    "state_store_for_config",
]

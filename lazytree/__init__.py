"""Lazily-loaded, filterable tree state container.

Turns a flat collection of hierarchical records into a derived tree with
search highlighting, single selection, lazy child loading, and persisted
per-context navigation state.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .config import StoreConfig, load_store_config, save_store_config
from .entry_model import Entry, EntryAttributes, EntryFactory, EntryOptions, RecordAdapter, Title, TreeObject
from .exceptions import ConfigError, LazyTreeError, RecordsFileError
from .feed import ChangeFeed
from .persistence import (
    DisabledStateStore,
    LocalStateStore,
    SessionStateStore,
    StateStore,
    TableState,
    state_store_for_config,
)
from .session import EXTERNAL_SELECTORS, TreeSession, external_select_name
from .store import NodeStore, StoreChange
from .tree_model import TreeForest, TreeNode, VisibleRow, build_forest, flatten_visible
from .validation import ValidationMessage, validate_config

__all__ = [
    # Store
    "NodeStore",
    "StoreChange",
    "TreeSession",
    "EXTERNAL_SELECTORS",
    "external_select_name",
    # Entries
    "Entry",
    "EntryAttributes",
    "EntryFactory",
    "EntryOptions",
    "RecordAdapter",
    "Title",
    "TreeObject",
    "ChangeFeed",
    # Views
    "TreeForest",
    "TreeNode",
    "VisibleRow",
    "build_forest",
    "flatten_visible",
    # State
    "TableState",
    "StateStore",
    "LocalStateStore",
    "SessionStateStore",
    "DisabledStateStore",
    "state_store_for_config",
    # Config
    "StoreConfig",
    "load_store_config",
    "save_store_config",
    "ValidationMessage",
    "validate_config",
    # Errors
    "LazyTreeError",
    "ConfigError",
    "RecordsFileError",
]

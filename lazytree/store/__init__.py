"""Node store façade with selection, search, and state-sync behavior."""

from __future__ import annotations

from .core import ChildLoader, NodeStore, RecordResolver, SearchHandler
from .events import CHANGE_KINDS, StoreChange, StoreListener, StoreListeners

__all__ = [
    "NodeStore",
    "ChildLoader",
    "SearchHandler",
    "RecordResolver",
    "CHANGE_KINDS",
    "StoreChange",
    "StoreListener",
    "StoreListeners",
]

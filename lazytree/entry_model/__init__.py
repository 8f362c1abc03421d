"""Entry model: record adapter, entry wrapper, factory, and title strategies."""

from __future__ import annotations

from .entry import Entry, EntryAttributes, EntryChangeListener
from .factory import EntryFactory
from .records import RecordAdapter
from .titles import (
    dynamic_title_from_record,
    dynamic_title_method,
    static_title_from_record,
    static_title_method,
)
from .types import NBSP, EntryOptions, Title, TreeObject

__all__ = [
    "Entry",
    "EntryAttributes",
    "EntryChangeListener",
    "EntryFactory",
    "EntryOptions",
    "RecordAdapter",
    "Title",
    "TreeObject",
    "NBSP",
    "static_title_from_record",
    "static_title_method",
    "dynamic_title_from_record",
    "dynamic_title_method",
]

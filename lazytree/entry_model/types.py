"""Entry datatypes shared by the entry factory, tree builder, and store."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

NBSP = "\u00a0"


@dataclass(frozen=True)
class Title:
    """Display title for one node; ``is_html`` marks markup titles."""

    text: str = NBSP
    is_html: bool = False


StaticTitleMethod = Callable[[object], Title]
DynamicTitleMethod = Callable[[object], Awaitable[Title]]


@dataclass(frozen=True)
class EntryOptions:
    """Per-ingestion options applied to every entry of one ``set_entries`` call."""

    is_root: bool = False
    parent: str | None = None
    is_loaded: bool = False
    static_title: StaticTitleMethod | None = field(default=None, compare=False)
    dynamic_title: DynamicTitleMethod | None = field(default=None, compare=False)


@dataclass(frozen=True)
class TreeObject:
    """Immutable snapshot of one entry, consumed by view derivations."""

    id: str
    parent: str | None = None
    children: tuple[str, ...] = ()
    root: bool = False
    has_children: bool | None = None
    is_loaded: bool = False
    is_expanded: bool = False
    is_selected: bool = False
    highlight: bool = False
    icon: str | None = None
    class_name: str | None = None
    title: Title = Title()


__all__ = [
    "NBSP",
    "Title",
    "StaticTitleMethod",
    "DynamicTitleMethod",
    "EntryOptions",
    "TreeObject",
]

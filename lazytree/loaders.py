"""Collaborator helpers shared by the session's bulk, child, and search loads.

External fetchers are host code; they may raise or return ``None``. Both
outcomes are reduced to ``None`` here so no failure crosses into the store.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable
from typing import Any, TypeVar

from .config import StoreConfig
from .entry_model import EntryOptions, RecordAdapter, dynamic_title_method, static_title_method
from .logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

FetchRecords = Callable[[str], Awaitable[list[Any] | None]]
FetchChildren = Callable[[object], Awaitable[list[Any] | None]]
SearchRecords = Callable[[str], Awaitable[Iterable[Any] | None]]
FetchTitle = Callable[[object], Awaitable[object]]


async def call_collaborator(
    what: str,
    fetch: Callable[..., Awaitable[T | None]],
    *args: object,
) -> T | None:
    """Await ``fetch(*args)``; exceptions are logged and become ``None``."""
    try:
        return await fetch(*args)
    except Exception:
        logger.exception("collaborator failed", collaborator=what)
        return None


def entry_options_for(
    config: StoreConfig,
    adapter: RecordAdapter,
    *,
    fetch_title: FetchTitle | None = None,
    is_root: bool = False,
    parent: str | None = None,
    is_loaded: bool = False,
) -> EntryOptions:
    """Entry options with the configured title strategy attached."""
    static_title = None
    dynamic_title = None
    if config.title_type == "attribute" and config.title_attr:
        static_title = static_title_method(config.title_attr, adapter, config.render_as_html)
    elif config.title_type == "dynamic" and fetch_title is not None:
        dynamic_title = dynamic_title_method(fetch_title, config.render_as_html)
    return EntryOptions(
        is_root=is_root,
        parent=parent,
        is_loaded=is_loaded,
        static_title=static_title,
        dynamic_title=dynamic_title,
    )


def search_result_ids(result: Iterable[object] | None, adapter: RecordAdapter) -> list[str] | None:
    """Normalize a search result of ids or records into ids."""
    if result is None:
        return None
    ids: list[str] = []
    for item in result:
        if isinstance(item, str):
            ids.append(item)
        else:
            record_id = adapter.record_id(item)
            if record_id:
                ids.append(record_id)
    return ids


__all__ = [
    "FetchRecords",
    "FetchChildren",
    "SearchRecords",
    "FetchTitle",
    "call_collaborator",
    "entry_options_for",
    "search_result_ids",
]

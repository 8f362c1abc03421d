"""Title strategies: a static attribute read or an async title provider."""

from __future__ import annotations

from collections.abc import Awaitable, Callable

from ..logging import get_logger
from .records import RecordAdapter
from .types import NBSP, DynamicTitleMethod, StaticTitleMethod, Title

logger = get_logger(__name__)


def _title_from_text(text: object, render_as_html: bool) -> Title:
    if text is None:
        text = ""
    text = str(text)
    if text == "":
        text = NBSP
    return Title(text=text, is_html=render_as_html)


def static_title_from_record(
    record: object,
    attribute: str,
    *,
    adapter: RecordAdapter,
    render_as_html: bool = False,
) -> Title:
    """Read ``attribute`` from ``record``; blank or unreadable becomes NBSP."""
    try:
        text = adapter.get(record, attribute)
    except Exception as exc:
        logger.warning("title attribute read failed", attribute=attribute, error=str(exc))
        text = ""
    return _title_from_text(text, render_as_html)


async def dynamic_title_from_record(
    record: object,
    fetch_title: Callable[[object], Awaitable[object]],
    *,
    render_as_html: bool = False,
) -> Title:
    """Await ``fetch_title(record)``; failures fall back to an empty title."""
    try:
        text = await fetch_title(record)
    except Exception as exc:
        logger.warning("dynamic title failed", error=str(exc))
        text = ""
    return _title_from_text(text, render_as_html)


def static_title_method(attribute: str, adapter: RecordAdapter, render_as_html: bool = False) -> StaticTitleMethod:
    def method(record: object) -> Title:
        return static_title_from_record(record, attribute, adapter=adapter, render_as_html=render_as_html)

    return method


def dynamic_title_method(
    fetch_title: Callable[[object], Awaitable[object]],
    render_as_html: bool = False,
) -> DynamicTitleMethod:
    async def method(record: object) -> Title:
        return await dynamic_title_from_record(record, fetch_title, render_as_html=render_as_html)

    return method


__all__ = [
    "static_title_from_record",
    "dynamic_title_from_record",
    "static_title_method",
    "dynamic_title_method",
]

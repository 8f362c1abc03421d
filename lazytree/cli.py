"""Command-line front door for lazytree.

``lazytree inspect`` loads a JSON list of records into an in-memory store,
applies the requested interactions, and prints the visible tree rows.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

from .config import StoreConfig, load_store_config
from .entry_model import RecordAdapter
from .exceptions import LazyTreeError, RecordsFileError
from .logging import configure_logging
from .persistence import SessionStateStore
from .session import TreeSession
from .tree_model import VisibleRow

DEFAULT_CONTEXT = "cli"


def load_records(path: Path) -> list[dict[str, object]]:
    """Read a JSON list of record objects; non-object items are skipped."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise RecordsFileError(f"cannot read records from {path}: {exc}") from exc
    if not isinstance(data, list):
        raise RecordsFileError(f"{path} must contain a JSON list of records")
    return [item for item in data if isinstance(item, dict)]


def format_row(row: VisibleRow) -> str:
    """Outline row: ``>`` selected, ``*`` highlighted, ``-``/``+`` open/closed."""
    obj = row.obj
    if obj.is_expanded:
        toggle = "-"
    elif row.is_leaf or obj.has_children is False:
        toggle = " "
    else:
        toggle = "+"
    marker = (">" if obj.is_selected else " ") + ("*" if obj.highlight else " ")
    return f"{marker}{'  ' * row.depth}{toggle} {obj.title.text} [{obj.id}]"


def row_to_dict(row: VisibleRow) -> dict[str, object]:
    obj = row.obj
    return {
        "id": obj.id,
        "parent": obj.parent,
        "depth": row.depth,
        "title": obj.title.text,
        "expanded": obj.is_expanded,
        "leaf": row.is_leaf,
        "selected": obj.is_selected,
        "highlight": obj.highlight,
    }


def _cli_config(config_path: Path | None) -> StoreConfig:
    config = load_store_config(config_path) if config_path is not None else StoreConfig()
    return config.with_overrides(load_scenario="all", search_enabled=True, state_management="session")


async def inspect_records(args: argparse.Namespace) -> list[VisibleRow]:
    records = load_records(Path(args.records))
    config = _cli_config(Path(args.config) if args.config else None)
    adapter = RecordAdapter()

    async def fetch_records(_context: str) -> list[dict[str, object]]:
        return records

    async def search_records(query: str) -> list[str]:
        needle = query.casefold()
        return [
            adapter.record_id(record)
            for record in records
            if needle in str(adapter.get(record, config.title_attr) or "").casefold()
        ]

    session = TreeSession(
        config,
        fetch_records=fetch_records,
        search_records=search_records,
        state_store=SessionStateStore(ttl_minutes=config.state_ttl_minutes),
        adapter=adapter,
    )
    store = session.store
    await session.open(args.context)
    for message in store.validation_messages:
        print(f"{'error' if message.fatal else 'warning'}: {message.message}", file=sys.stderr)

    if args.expand_all:
        store.expand_all()
    for entry_id in args.expand:
        store.expand_key(entry_id, True)
    if args.select:
        store.set_selected_from_external(args.select)
    if args.search is not None:
        await store.search(args.search)
    await store.wait_idle()
    rows = store.visible_rows()
    session.close()
    return rows


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="lazytree", description="Inspect hierarchical records as a tree.")
    parser.add_argument("--log-level", default="WARNING", help="Log level (DEBUG, INFO, WARNING, ERROR).")
    parser.add_argument("--log-json", action="store_true", help="Emit logs as JSON lines.")
    commands = parser.add_subparsers(dest="command", required=True)

    inspect = commands.add_parser("inspect", help="Print the visible rows for a records file.")
    inspect.add_argument("records", help="JSON file containing a list of record objects.")
    inspect.add_argument("--config", default=None, help="Store config JSON (default: built-in defaults).")
    inspect.add_argument("--context", default=DEFAULT_CONTEXT, help="Context id to browse under.")
    inspect.add_argument("--search", default=None, help="Filter to titles containing QUERY.")
    inspect.add_argument("--expand", action="append", default=[], metavar="ID", help="Expand node ID.")
    inspect.add_argument("--expand-all", action="store_true", help="Expand every node with children.")
    inspect.add_argument("--select", default=None, metavar="ID", help="Reveal and select node ID.")
    inspect.add_argument("--json", action="store_true", help="Print rows as JSON.")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(json_output=args.log_json, level=args.log_level)

    try:
        rows = asyncio.run(inspect_records(args))
    except LazyTreeError as exc:
        print(f"lazytree: {exc}", file=sys.stderr)
        return 2

    if args.json:
        sys.stdout.write(json.dumps([row_to_dict(row) for row in rows], indent=2) + "\n")
    else:
        for row in rows:
            sys.stdout.write(format_row(row) + "\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

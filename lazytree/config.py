"""Store configuration and its persistent JSON form.

``StoreConfig`` carries every switch the node store and its collaborators
read. Loading never fails: a missing or malformed file, values of the wrong
type, and unknown choice values all fall back to defaults.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path

from platformdirs import user_config_dir

from .exceptions import ConfigError

APP_NAME = "lazytree"
CONFIG_FILENAME = "config.json"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
CONFIG_PATH = DEFAULT_CONFIG_PATH

LOAD_SCENARIOS = ("all", "top")
RELATION_TYPES = ("node_parent", "node_children")
TITLE_TYPES = ("attribute", "dynamic")
STATE_MANAGEMENT_TYPES = ("disabled", "local", "session")

DEFAULT_STATE_TTL_MINUTES = 60 * 24


@dataclass(frozen=True)
class StoreConfig:
    """Configuration for one mounted tree."""

    load_scenario: str = "all"
    relation_type: str = "node_parent"
    parent_ref: str | None = "parent"
    child_ref: str | None = None
    has_child_attr: str | None = None
    root_attr: str | None = "root"
    icon_attr: str | None = None
    class_attr: str | None = None
    title_type: str = "attribute"
    title_attr: str | None = "title"
    render_as_html: bool = False
    hold_selection: bool = True
    search_enabled: bool = False
    execute_select_on_restore: bool = False
    expose_select: bool = False
    state_management: str = "disabled"
    state_key: str = ""
    state_key_include_context: bool = True
    state_ttl_minutes: int = DEFAULT_STATE_TTL_MINUTES

    @property
    def load_full(self) -> bool:
        return self.load_scenario == "all"

    @property
    def state_full(self) -> bool:
        """Durable state restore only applies when the whole tree is loaded."""
        return self.state_management != "disabled" and self.load_full

    @property
    def search_active(self) -> bool:
        return self.search_enabled and self.load_full

    def with_overrides(self, **overrides: object) -> StoreConfig:
        """Return a copy with ``overrides`` applied, rejecting unknown fields."""
        known = {item.name for item in fields(self)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise ConfigError(f"unknown config field(s): {', '.join(unknown)}")
        return replace(self, **overrides)

    def to_dict(self) -> dict[str, object]:
        return asdict(self)


_CHOICES: dict[str, tuple[str, ...]] = {
    "load_scenario": LOAD_SCENARIOS,
    "relation_type": RELATION_TYPES,
    "title_type": TITLE_TYPES,
    "state_management": STATE_MANAGEMENT_TYPES,
}


def _coerce_optional_name(value: object, default: str | None) -> str | None:
    """Attribute names: blank strings mean "not configured"."""
    if value is None:
        return None
    if not isinstance(value, str):
        return default
    stripped = value.strip()
    return stripped if stripped else None


def _coerce_field(name: str, value: object, default: object) -> object:
    if name in _CHOICES:
        return value if isinstance(value, str) and value in _CHOICES[name] else default
    if isinstance(default, bool):
        return value if isinstance(value, bool) else default
    if isinstance(default, int):
        if isinstance(value, bool) or not isinstance(value, int):
            return default
        return value
    if name == "state_key":
        return value.strip() if isinstance(value, str) else default
    return _coerce_optional_name(value, default)  # type: ignore[arg-type]


def config_from_dict(data: dict[str, object]) -> StoreConfig:
    """Build a config from a decoded JSON object, dropping invalid values."""
    defaults = StoreConfig()
    values: dict[str, object] = {}
    for item in fields(StoreConfig):
        if item.name not in data:
            continue
        values[item.name] = _coerce_field(item.name, data[item.name], getattr(defaults, item.name))
    return replace(defaults, **values)


def load_config_data(path: Path | None = None) -> dict[str, object]:
    """Load the persisted JSON object, or ``{}`` when missing or malformed."""
    config_path = path if path is not None else CONFIG_PATH
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def load_store_config(path: Path | None = None) -> StoreConfig:
    """Load ``StoreConfig`` from ``path`` (default: platform config dir)."""
    return config_from_dict(load_config_data(path))


def save_store_config(config: StoreConfig, path: Path | None = None) -> None:
    """Persist ``config`` as pretty-printed JSON; write errors are ignored."""
    config_path = path if path is not None else CONFIG_PATH
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(json.dumps(config.to_dict(), indent=2) + "\n", encoding="utf-8")
    except Exception:
        pass


__all__ = [
    "StoreConfig",
    "LOAD_SCENARIOS",
    "RELATION_TYPES",
    "TITLE_TYPES",
    "STATE_MANAGEMENT_TYPES",
    "config_from_dict",
    "load_config_data",
    "load_store_config",
    "save_store_config",
]

"""Configuration validation messages.

Problems are reported, never raised: a fatal message disables the store's
mutating operations instead.
"""

from __future__ import annotations

from dataclasses import dataclass

from .config import StoreConfig


@dataclass(frozen=True)
class ValidationMessage:
    """One configuration-level problem."""

    id: str
    message: str
    fatal: bool = False


def validate_config(config: StoreConfig) -> list[ValidationMessage]:
    """Return every problem found in ``config`` (empty when usable)."""
    messages: list[ValidationMessage] = []

    if config.relation_type == "node_parent" and not config.parent_ref:
        messages.append(
            ValidationMessage(
                "relation_parent_ref",
                "Relation type 'node_parent' requires a parent reference attribute",
                fatal=True,
            )
        )
    if config.relation_type == "node_children" and not config.child_ref:
        messages.append(
            ValidationMessage(
                "relation_child_ref",
                "Relation type 'node_children' requires a child reference attribute",
                fatal=True,
            )
        )
    if config.title_type == "attribute" and not config.title_attr:
        messages.append(
            ValidationMessage(
                "title_attr",
                "Title type 'attribute' requires a title attribute",
                fatal=True,
            )
        )
    if config.state_ttl_minutes < 0:
        messages.append(
            ValidationMessage(
                "state_ttl",
                "State time-to-live must not be negative",
                fatal=True,
            )
        )
    if config.search_enabled and not config.load_full:
        messages.append(
            ValidationMessage(
                "search_scenario",
                "Search is only available when all nodes are loaded; search is disabled",
            )
        )
    if config.state_management != "disabled" and not config.load_full:
        messages.append(
            ValidationMessage(
                "state_scenario",
                "State management is only available when all nodes are loaded; state is not restored",
            )
        )
    return messages


__all__ = ["ValidationMessage", "validate_config"]

"""Exception hierarchy for caller-facing helpers.

The node store itself never raises for collaborator or configuration
problems; those surface as ``None`` results and validation messages.
"""

from __future__ import annotations


class LazyTreeError(Exception):
    """Base class for lazytree errors."""


class ConfigError(LazyTreeError):
    """Raised when a caller passes an unusable configuration value."""


class RecordsFileError(LazyTreeError):
    """Raised when a records file cannot be read as a JSON list of objects."""


__all__ = ["LazyTreeError", "ConfigError", "RecordsFileError"]

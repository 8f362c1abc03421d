"""Pytest bootstrap: make ``import lazytree`` resolve to this checkout.

Tests are plain ``unittest`` classes; pytest only collects them. The console
script may start without the repository root on ``sys.path``.
"""

from __future__ import annotations

import sys
from pathlib import Path

REPO_ROOT = str(Path(__file__).resolve().parent.parent)

if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

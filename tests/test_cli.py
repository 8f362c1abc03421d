"""CLI behavior tests for ``lazytree inspect``."""

from __future__ import annotations

import io
import json
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from lazytree import cli
from lazytree.entry_model import TreeObject, Title
from lazytree.tree_model import VisibleRow

RECORDS = [
    {"id": "root", "title": "Root", "root": True},
    {"id": "a", "title": "Alpha", "parent": "root"},
    {"id": "a1", "title": "Alpha one", "parent": "a"},
    {"id": "b", "title": "Beta", "parent": "root"},
]


class CliInspectTests(unittest.TestCase):
    def _run(self, *args: str, records: object = RECORDS) -> tuple[int, str, str]:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "records.json"
            path.write_text(json.dumps(records), encoding="utf-8")
            stdout = io.StringIO()
            stderr = io.StringIO()
            with mock.patch("sys.stdout", stdout), mock.patch("sys.stderr", stderr):
                code = cli.main(["inspect", str(path), *args])
        return code, stdout.getvalue(), stderr.getvalue()

    def test_default_view_shows_collapsed_roots(self) -> None:
        code, out, _err = self._run()
        self.assertEqual(code, 0)
        self.assertEqual(out.splitlines(), ["  + Root [root]"])

    def test_expand_all_prints_outline(self) -> None:
        code, out, _err = self._run("--expand-all")
        self.assertEqual(code, 0)
        self.assertEqual(
            out.splitlines(),
            [
                "  - Root [root]",
                "    - Alpha [a]",
                "        Alpha one [a1]",
                "      Beta [b]",
            ],
        )

    def test_leaf_flag_in_json_rows(self) -> None:
        code, out, _err = self._run("--expand", "root", "--json")
        self.assertEqual(code, 0)
        rows = json.loads(out)
        self.assertEqual([(row["id"], row["leaf"]) for row in rows], [("root", False), ("a", False), ("b", True)])

    def test_select_reveals_node(self) -> None:
        code, out, _err = self._run("--select", "a1", "--json")
        self.assertEqual(code, 0)
        rows = json.loads(out)
        self.assertEqual([row["id"] for row in rows], ["root", "a", "a1", "b"])
        self.assertEqual([row["id"] for row in rows if row["selected"]], ["a1"])
        self.assertEqual([row["depth"] for row in rows], [0, 1, 2, 1])

    def test_search_filters_to_matches_and_ancestors(self) -> None:
        code, out, _err = self._run("--search", "one", "--json")
        self.assertEqual(code, 0)
        rows = json.loads(out)
        self.assertEqual([(row["id"], row["highlight"]) for row in rows], [("root", False), ("a", False), ("a1", True)])

    def test_unreadable_records_file_exits_with_error(self) -> None:
        code, out, err = self._run(records={"not": "a list"})
        self.assertEqual(code, 2)
        self.assertEqual(out, "")
        self.assertIn("must contain a JSON list", err)


class FormatRowTests(unittest.TestCase):
    def test_markers(self) -> None:
        obj = TreeObject(id="x", has_children=False, is_selected=True, highlight=True, title=Title("X"))
        self.assertEqual(cli.format_row(VisibleRow(obj=obj, depth=1, index=0)), ">*    X [x]")


if __name__ == "__main__":
    unittest.main()

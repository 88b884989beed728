from __future__ import annotations

import unittest

from codespace.models.entries import DirectoryEntry, FileEntry
from codespace.services.path_tree import (
    DEFAULT_EXPANDED,
    build_tree,
    child_path,
    parent_path,
    toggle_expanded,
    visible_rows,
)


def _file(entry_id: int, path: str) -> FileEntry:
    return FileEntry(id=entry_id, projectId=1, name=path.rsplit("/", 1)[-1], path=path)


def _dir(entry_id: int, path: str) -> DirectoryEntry:
    return DirectoryEntry(id=entry_id, projectId=1, name=path.rsplit("/", 1)[-1], path=path)


class PathTreeTests(unittest.TestCase):
    def test_parent_path(self) -> None:
        self.assertEqual(parent_path("/index.js"), "/")
        self.assertEqual(parent_path("/src/app.js"), "/src")
        self.assertEqual(parent_path("/a/b/c.txt"), "/a/b")

    def test_child_path(self) -> None:
        self.assertEqual(child_path("/", "x.py"), "/x.py")
        self.assertEqual(child_path("/src", "x.py"), "/src/x.py")
        self.assertEqual(child_path("/src/", "x.py"), "/src/x.py")

    def test_groups_every_entry_exactly_once(self) -> None:
        entries = [
            _file(1, "/index.js"),
            _dir(2, "/src"),
            _file(3, "/src/app.js"),
            _dir(4, "/src/lib"),
            _file(5, "/src/lib/util.js"),
            _file(6, "/README.md"),
        ]
        tree = build_tree(entries)
        self.assertEqual(sorted(tree), ["/", "/src", "/src/lib"])
        grouped_ids = sorted(e.id for group in tree.values() for e in group)
        self.assertEqual(grouped_ids, [1, 2, 3, 4, 5, 6])

    def test_directories_first_then_code_point_order(self) -> None:
        entries = [
            _file(1, "/b.txt"),
            _file(2, "/B.txt"),
            _dir(3, "/zeta"),
            _file(4, "/a.txt"),
            _dir(5, "/alpha"),
        ]
        names = [e.name for e in build_tree(entries)["/"]]
        self.assertEqual(names, ["alpha", "zeta", "B.txt", "a.txt", "b.txt"])

    def test_empty_listing_gives_empty_tree(self) -> None:
        self.assertEqual(build_tree([]), {})
        self.assertEqual(visible_rows({}), [])

    def test_unmaterialized_directory_still_groups_children(self) -> None:
        tree = build_tree([_file(1, "/ghost/a.js")])
        self.assertEqual([e.id for e in tree["/ghost"]], [1])
        # nothing at the root renders the folder, so the row walk skips it
        self.assertEqual(visible_rows(tree, {"/", "/ghost"}), [])

    def test_visible_rows_follow_expanded_paths(self) -> None:
        tree = build_tree([_dir(1, "/src"), _file(2, "/src/app.js"), _file(3, "/index.js")])

        collapsed = visible_rows(tree, DEFAULT_EXPANDED)
        self.assertEqual([(r.entry.id, r.depth, r.expanded) for r in collapsed], [(1, 0, False), (3, 0, False)])

        expanded = visible_rows(tree, toggle_expanded(DEFAULT_EXPANDED, "/src"))
        self.assertEqual([(r.entry.id, r.depth) for r in expanded], [(1, 0), (2, 1), (3, 0)])
        self.assertTrue(expanded[0].expanded)

    def test_toggle_expanded_is_symmetric(self) -> None:
        opened = toggle_expanded(DEFAULT_EXPANDED, "/src")
        self.assertIn("/src", opened)
        self.assertEqual(toggle_expanded(opened, "/src"), DEFAULT_EXPANDED)


if __name__ == "__main__":
    unittest.main()

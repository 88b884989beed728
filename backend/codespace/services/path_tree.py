from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping, Sequence

from ..models.entries import DIRECTORY, DirectoryEntry, FileEntry
from ..models.schema import split_path

ROOT = "/"
DEFAULT_EXPANDED: frozenset[str] = frozenset({ROOT})

TreeEntry = FileEntry | DirectoryEntry


@dataclass(frozen=True)
class TreeRow:
    entry: TreeEntry
    depth: int
    expanded: bool = False


def parent_path(path: str) -> str:
    parts = split_path(path)
    if len(parts) <= 1:
        return ROOT
    return ROOT + "/".join(parts[:-1])


def _render_key(entry: TreeEntry) -> tuple[int, str]:
    # directories first, then code-point order on name
    return (0 if entry.kind == DIRECTORY else 1, entry.name)


def build_tree(entries: Iterable[TreeEntry]) -> dict[str, list[TreeEntry]]:
    """Group entries by parent path.

    Grouping is derived from the path strings alone: an entry is listed under its
    parent path whether or not a directory entry exists for that path.
    """
    groups: dict[str, list[TreeEntry]] = {}
    for entry in entries:
        groups.setdefault(parent_path(entry.path), []).append(entry)
    return {key: sorted(group, key=_render_key) for key, group in groups.items()}


def visible_rows(
    tree: Mapping[str, Sequence[TreeEntry]],
    expanded_paths: Iterable[str] | None = None,
) -> list[TreeRow]:
    expanded = set(DEFAULT_EXPANDED if expanded_paths is None else expanded_paths)
    rows: list[TreeRow] = []

    def _walk(parent: str, depth: int) -> None:
        for entry in tree.get(parent) or []:
            is_open = entry.kind == DIRECTORY and entry.path in expanded
            rows.append(TreeRow(entry=entry, depth=depth, expanded=is_open))
            if is_open:
                _walk(entry.path, depth + 1)

    _walk(ROOT, 0)
    return rows


def toggle_expanded(expanded_paths: Iterable[str], path: str) -> frozenset[str]:
    current = set(expanded_paths)
    if path in current:
        current.discard(path)
    else:
        current.add(path)
    return frozenset(current)


def child_path(parent: str, name: str) -> str:
    return f"/{name}" if parent in ("", ROOT) else f"{parent.rstrip('/')}/{name}"

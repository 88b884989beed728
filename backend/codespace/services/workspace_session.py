from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Literal
from uuid import uuid4

import pydantic

from ..errors import NotFoundError, PersistenceError, WorkspaceError
from ..models.entries import DIRECTORY, FILE, DirectoryEntry, EntryKind, FileEntry, is_file
from ..models.schema import FileCreate
from ..repositories.interfaces import FileRepository, ProjectRepository
from . import files as file_service
from .languages import display_language
from .path_tree import DEFAULT_EXPANDED, ROOT, TreeRow, build_tree, child_path, toggle_expanded, visible_rows

logger = logging.getLogger(__name__)

NoticeVariant = Literal["default", "destructive"]


@dataclass(frozen=True)
class CursorPosition:
    line: int = 1
    column: int = 1

    def __post_init__(self) -> None:
        if int(self.line) < 1 or int(self.column) < 1:
            raise ValueError("cursor line and column start at 1")


@dataclass(frozen=True)
class Notice:
    title: str
    description: str = ""
    variant: NoticeVariant = "default"


@dataclass(frozen=True)
class ContentUpdate:
    """Outcome of one content write.

    ``applied`` is True when an open cached copy was rewritten. ``diverged`` is
    True when that local copy was kept although the store write failed; the
    session never rolls it back.
    """

    file_id: int
    applied: bool
    persisted: bool
    diverged: bool = False
    entry: FileEntry | None = None
    error: str | None = None

    def raise_for_error(self) -> None:
        if self.error is not None:
            raise PersistenceError(self.error)


@dataclass(frozen=True)
class StatusLine:
    language: str
    position: str
    encoding: str = "UTF-8"
    line_ending: str = "LF"


@dataclass
class _Listening:
    closed: bool = False
    pending: set[asyncio.Task] = field(default_factory=set)


class WorkspaceSession:
    """Per-project editing state: open tabs, the active tab, the cursor and the tree overlay."""

    def __init__(
        self,
        project_id: int,
        files: FileRepository,
        *,
        projects: ProjectRepository | None = None,
        session_id: str | None = None,
    ):
        self.project_id = int(project_id)
        self.session_id = session_id or uuid4().hex
        self.cursor = CursorPosition()
        self.expanded_paths: frozenset[str] = DEFAULT_EXPANDED
        self.notices: list[Notice] = []
        self._files = files
        self._projects = projects
        self._entries: list[FileEntry | DirectoryEntry] = []
        self._open: list[FileEntry] = []
        self._active_id: int | None = None
        self._listening = _Listening()

    @classmethod
    async def start(
        cls,
        project_id: int,
        files: FileRepository,
        projects: ProjectRepository,
        *,
        session_id: str | None = None,
    ) -> "WorkspaceSession":
        if await projects.get_project(project_id) is None:
            raise NotFoundError("Project not found")
        session = cls(project_id, files, projects=projects, session_id=session_id)
        session.load_entries(await files.list_files(project_id))
        logger.info(
            "workspace.start session=%s project=%s entries=%s",
            session.session_id,
            project_id,
            len(session._entries),
        )
        return session

    # --- state views ---

    @property
    def entries(self) -> list[FileEntry | DirectoryEntry]:
        return list(self._entries)

    @property
    def open_entries(self) -> list[FileEntry]:
        return list(self._open)

    @property
    def active_entry(self) -> FileEntry | None:
        if self._active_id is None:
            return None
        for entry in self._open:
            if entry.id == self._active_id:
                return entry
        return None

    @property
    def closed(self) -> bool:
        return self._listening.closed

    # --- listing ---

    def load_entries(self, entries: Iterable[FileEntry | DirectoryEntry]) -> FileEntry | None:
        """Replace the project listing; auto-open the first file when nothing is active."""
        self._entries = list(entries)
        if self.active_entry is not None:
            return None
        first = next((entry for entry in self._entries if is_file(entry)), None)
        if first is not None:
            self.open_file(first)
        return first

    async def refresh(self) -> None:
        self.load_entries(await self._files.list_files(self.project_id))

    def tree(self) -> dict[str, list[FileEntry | DirectoryEntry]]:
        return build_tree(self._entries)

    def rows(self) -> list[TreeRow]:
        return visible_rows(self.tree(), self.expanded_paths)

    def toggle_folder(self, path: str) -> bool:
        self.expanded_paths = toggle_expanded(self.expanded_paths, path)
        return path in self.expanded_paths

    # --- tabs ---

    def open_file(self, entry: Any) -> bool:
        if not is_file(entry):
            return False
        if not any(open_entry.id == entry.id for open_entry in self._open):
            self._open.append(entry)
        self._active_id = entry.id
        logger.debug("workspace.open session=%s file=%s", self.session_id, entry.id)
        return True

    def open_file_id(self, file_id: int) -> bool:
        for entry in self._entries:
            if entry.id == file_id:
                return self.open_file(entry)
        for entry in self._open:
            if entry.id == file_id:
                return self.open_file(entry)
        return False

    def close_file(self, file_id: int) -> bool:
        remaining = [entry for entry in self._open if entry.id != file_id]
        if len(remaining) == len(self._open):
            return False
        self._open = remaining
        if self._active_id == file_id:
            # most recently added of the remaining tabs, not the positional neighbour
            self._active_id = remaining[-1].id if remaining else None
        logger.debug("workspace.close session=%s file=%s", self.session_id, file_id)
        return True

    def set_cursor(self, position: CursorPosition) -> None:
        self.cursor = position

    # --- content ---

    def _apply_local(self, file_id: int, content: str) -> bool:
        applied = False
        for idx, entry in enumerate(self._open):
            if entry.id == file_id:
                self._open[idx] = entry.model_copy(update={"content": content})
                applied = True
        for idx, entry in enumerate(self._entries):
            if entry.id == file_id and entry.kind == FILE:
                self._entries[idx] = entry.model_copy(update={"content": content})
        return applied

    async def _write_refusal(self, file_id: int) -> str | None:
        current = await self._files.get_file(file_id)
        # entries of other projects are reported as missing
        if current is None or current.projectId != self.project_id:
            return "File not found"
        if not is_file(current):
            return "Directories have no content"
        return None

    async def _persist(self, file_id: int, content: str, applied: bool) -> ContentUpdate:
        try:
            refusal = await self._write_refusal(file_id)
            if refusal is not None:
                return self._persist_failed(file_id, applied, refusal)
            stored = await self._files.update_file(file_id, {"content": content})
        except Exception as err:
            return self._persist_failed(file_id, applied, str(err) or err.__class__.__name__)
        if stored is None:
            return self._persist_failed(file_id, applied, "File not found")
        return ContentUpdate(
            file_id=file_id,
            applied=applied,
            persisted=True,
            entry=stored if is_file(stored) else None,
        )

    def _persist_failed(self, file_id: int, applied: bool, message: str) -> ContentUpdate:
        logger.warning(
            "workspace.persist.failed session=%s file=%s diverged=%s error=%s",
            self.session_id,
            file_id,
            applied,
            message,
        )
        if not self.closed:
            self.notices.append(Notice("Failed to save file", message, "destructive"))
        return ContentUpdate(
            file_id=file_id,
            applied=applied,
            persisted=False,
            diverged=applied,
            error=message,
        )

    async def update_content(self, file_id: int, content: str) -> ContentUpdate:
        """Rewrite the cached copy immediately, then write it to the store.

        A failed write leaves the local copy as it is and is reported through the
        returned ``ContentUpdate``.
        """
        applied = self._apply_local(file_id, content)
        return await self._persist(file_id, content, applied)

    def schedule_content_update(
        self,
        file_id: int,
        content: str,
        on_result: Callable[[ContentUpdate], None] | None = None,
    ) -> asyncio.Task:
        applied = self._apply_local(file_id, content)
        task = asyncio.create_task(self._persist(file_id, content, applied))
        listening = self._listening
        listening.pending.add(task)

        def _done(done: asyncio.Task) -> None:
            listening.pending.discard(done)
            if listening.closed or on_result is None or done.cancelled():
                return
            on_result(done.result())

        task.add_done_callback(_done)
        return task

    # --- creation ---

    async def create_entry(self, name: str, kind: EntryKind, parent: str = ROOT) -> FileEntry | DirectoryEntry | None:
        label = "Folder" if kind == DIRECTORY else "File"
        clean = str(name or "").strip()
        if not clean:
            self.notices.append(Notice("Name required", "Please enter a name for your item", "destructive"))
            return None
        if self._projects is None:
            raise WorkspaceError("Session was created without a project repository")
        try:
            req = FileCreate(
                projectId=self.project_id,
                name=clean,
                path=child_path(parent, clean),
                content="",
                kind=kind,
            )
            entry = await file_service.create_entry(self._files, self._projects, req)
        except (pydantic.ValidationError, WorkspaceError) as err:
            self.notices.append(Notice(f"Failed to create {label.lower()}", str(err), "destructive"))
            return None

        self._entries.append(entry)
        if entry.kind == DIRECTORY:
            self.expanded_paths = self.expanded_paths | {entry.path}
        self.notices.append(Notice(f"{label} created", f"Your {label.lower()} has been created successfully"))
        return entry

    # --- status and lifecycle ---

    def status(self) -> StatusLine:
        active = self.active_entry
        return StatusLine(
            language=display_language(active.language if active else None),
            position=f"Ln {self.cursor.line}, Col {self.cursor.column}",
        )

    def drain_notices(self) -> list[Notice]:
        out, self.notices = self.notices, []
        return out

    def teardown(self) -> int:
        """Stop listening for pending writes. They still run to completion."""
        self._listening.closed = True
        pending = len(self._listening.pending)
        logger.info("workspace.teardown session=%s pending_writes=%s", self.session_id, pending)
        return pending

    def snapshot(self) -> dict[str, Any]:
        active = self.active_entry
        status = self.status()
        return {
            "session_id": self.session_id,
            "project_id": self.project_id,
            "open": [
                {"id": e.id, "name": e.name, "path": e.path, "language": e.language}
                for e in self._open
            ],
            "active": active.model_dump(mode="json") if active else None,
            "cursor": {"line": self.cursor.line, "column": self.cursor.column},
            "tree": [
                {
                    "id": row.entry.id,
                    "name": row.entry.name,
                    "path": row.entry.path,
                    "kind": row.entry.kind,
                    "depth": row.depth,
                    "expanded": row.expanded,
                    "active": bool(active and row.entry.id == active.id),
                }
                for row in self.rows()
            ],
            "expanded": sorted(self.expanded_paths),
            "status": {
                "language": status.language,
                "encoding": status.encoding,
                "line_ending": status.line_ending,
                "position": status.position,
            },
        }

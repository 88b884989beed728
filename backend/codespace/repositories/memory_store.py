from __future__ import annotations

from datetime import datetime
from typing import Any, Callable

from ..models.entries import DirectoryEntry, FileEntry, Project, entry_from_doc, project_from_doc, utcnow
from ..models.schema import ProjectCreate


class IdSequence:
    """Monotonically increasing integer ids, starting at ``start``."""

    def __init__(self, start: int = 1):
        self._next = int(start)

    def __call__(self) -> int:
        value = self._next
        self._next += 1
        return value


class InMemoryStore:
    """Project and file records kept in id-keyed dicts.

    Each instance owns its own id sequences, so tests can build isolated stores
    and pass deterministic generators or clocks.
    """

    def __init__(
        self,
        *,
        project_ids: Callable[[], int] | None = None,
        file_ids: Callable[[], int] | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self._projects: dict[int, dict[str, Any]] = {}
        self._files: dict[int, dict[str, Any]] = {}
        self._project_ids = project_ids or IdSequence()
        self._file_ids = file_ids or IdSequence()
        self._clock = clock or utcnow

    # --- projects ---

    async def list_projects(self) -> list[Project]:
        return [project_from_doc(doc) for doc in self._projects.values()]

    async def get_project(self, project_id: int) -> Project | None:
        doc = self._projects.get(int(project_id))
        return project_from_doc(doc) if doc else None

    async def create_project(self, data: ProjectCreate) -> Project:
        now = self._clock()
        doc = {
            **data.model_dump(),
            "id": int(self._project_ids()),
            "createdAt": now,
            "updatedAt": now,
        }
        self._projects[doc["id"]] = doc
        return project_from_doc(doc)

    async def update_project(self, project_id: int, patch: dict[str, Any]) -> Project | None:
        doc = self._projects.get(int(project_id))
        if doc is None:
            return None
        doc.update({k: v for k, v in patch.items() if k not in ("id", "createdAt")})
        doc["updatedAt"] = self._clock()
        return project_from_doc(doc)

    async def delete_project(self, project_id: int) -> bool:
        pid = int(project_id)
        for file_id in [fid for fid, row in self._files.items() if row.get("projectId") == pid]:
            del self._files[file_id]
        return self._projects.pop(pid, None) is not None

    async def count_projects(self) -> int:
        return len(self._projects)

    # --- files ---

    async def list_files(self, project_id: int) -> list[FileEntry | DirectoryEntry]:
        pid = int(project_id)
        return [entry_from_doc(row) for row in self._files.values() if row.get("projectId") == pid]

    async def get_file(self, file_id: int) -> FileEntry | DirectoryEntry | None:
        row = self._files.get(int(file_id))
        return entry_from_doc(row) if row else None

    async def get_file_by_path(self, project_id: int, path: str) -> FileEntry | DirectoryEntry | None:
        pid = int(project_id)
        for row in self._files.values():
            if row.get("projectId") == pid and row.get("path") == path:
                return entry_from_doc(row)
        return None

    async def create_file(self, doc: dict[str, Any]) -> FileEntry | DirectoryEntry:
        now = self._clock()
        row = {**doc, "id": int(self._file_ids()), "createdAt": now, "updatedAt": now}
        self._files[row["id"]] = row
        return entry_from_doc(row)

    async def update_file(self, file_id: int, patch: dict[str, Any]) -> FileEntry | DirectoryEntry | None:
        row = self._files.get(int(file_id))
        if row is None:
            return None
        row.update({k: v for k, v in patch.items() if k not in ("id", "projectId", "createdAt")})
        row["updatedAt"] = self._clock()
        return entry_from_doc(row)

    async def delete_file(self, file_id: int) -> bool:
        return self._files.pop(int(file_id), None) is not None

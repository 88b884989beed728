from __future__ import annotations

from typing import Any, Protocol

from ..models.entries import DirectoryEntry, FileEntry, Project
from ..models.schema import ProjectCreate


class ProjectRepository(Protocol):
    async def list_projects(self) -> list[Project]: ...

    async def get_project(self, project_id: int) -> Project | None: ...

    async def create_project(self, data: ProjectCreate) -> Project: ...

    async def update_project(self, project_id: int, patch: dict[str, Any]) -> Project | None: ...

    async def delete_project(self, project_id: int) -> bool: ...

    async def count_projects(self) -> int: ...


class FileRepository(Protocol):
    async def list_files(self, project_id: int) -> list[FileEntry | DirectoryEntry]: ...

    async def get_file(self, file_id: int) -> FileEntry | DirectoryEntry | None: ...

    async def get_file_by_path(self, project_id: int, path: str) -> FileEntry | DirectoryEntry | None: ...

    async def create_file(self, doc: dict[str, Any]) -> FileEntry | DirectoryEntry: ...

    async def update_file(self, file_id: int, patch: dict[str, Any]) -> FileEntry | DirectoryEntry | None: ...

    async def delete_file(self, file_id: int) -> bool: ...

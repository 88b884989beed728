from __future__ import annotations

import logging

from ..errors import NotFoundError, ValidationError
from ..models.entries import DIRECTORY, FILE, DirectoryEntry, FileEntry
from ..models.schema import FileCreate, FileUpdate
from ..repositories.interfaces import FileRepository, ProjectRepository
from .languages import language_for_filename
from .path_tree import child_path, parent_path

logger = logging.getLogger(__name__)


async def create_entry(
    files: FileRepository,
    projects: ProjectRepository,
    req: FileCreate,
) -> FileEntry | DirectoryEntry:
    if await projects.get_project(req.projectId) is None:
        raise NotFoundError("Project not found")
    if await files.get_file_by_path(req.projectId, req.path) is not None:
        raise ValidationError(f"An entry already exists at {req.path}")

    doc = req.model_dump()
    if req.kind == FILE and not req.language:
        doc["language"] = language_for_filename(req.name)
    if req.kind == DIRECTORY:
        doc.pop("content", None)
    entry = await files.create_file(doc)
    logger.info(
        "files.create id=%s project=%s path=%s kind=%s",
        entry.id,
        entry.projectId,
        entry.path,
        entry.kind,
    )
    return entry


async def _rename_descendants(files: FileRepository, directory: DirectoryEntry, new_path: str) -> int:
    prefix = directory.path.rstrip("/") + "/"
    moved = 0
    for entry in await files.list_files(directory.projectId):
        if entry.path.startswith(prefix):
            await files.update_file(entry.id, {"path": new_path + "/" + entry.path[len(prefix):]})
            moved += 1
    return moved


async def update_entry(files: FileRepository, file_id: int, req: FileUpdate) -> FileEntry | DirectoryEntry:
    current = await files.get_file(file_id)
    if current is None:
        raise NotFoundError("File not found")

    patch = req.model_dump(exclude_unset=True)
    if current.kind == DIRECTORY and patch.get("content"):
        raise ValidationError("Directories have no content")
    if current.kind == DIRECTORY:
        patch.pop("content", None)

    new_name = patch.get("name")
    if new_name is not None and new_name != current.name:
        new_path = child_path(parent_path(current.path), new_name)
        if await files.get_file_by_path(current.projectId, new_path) is not None:
            raise ValidationError(f"An entry already exists at {new_path}")
        patch["path"] = new_path
        if current.kind == DIRECTORY:
            moved = await _rename_descendants(files, current, new_path)
            logger.info("files.rename.descendants id=%s moved=%s", current.id, moved)

    updated = await files.update_file(file_id, patch)
    if updated is None:
        raise NotFoundError("File not found")
    logger.info("files.update id=%s fields=%s", file_id, ",".join(sorted(patch)) or "-")
    return updated


async def delete_entry(files: FileRepository, file_id: int) -> None:
    # Children of a deleted directory stay in the store and keep grouping under its path.
    if not await files.delete_file(file_id):
        raise NotFoundError("File not found")
    logger.info("files.delete id=%s", file_id)

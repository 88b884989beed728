from __future__ import annotations

from typing import Any

from pymongo import ReturnDocument

from ..db import get_db
from ..models.entries import DirectoryEntry, FileEntry, Project, entry_from_doc, project_from_doc, utcnow
from ..models.schema import ProjectCreate

_NO_OID: dict[str, int] = {"_id": 0}


class MongoStore:
    """Projects and files in Mongo, addressed by integer ids drawn from a ``counters`` collection."""

    def __init__(self, db=None):
        self._db = db if db is not None else get_db()

    async def _next_id(self, name: str) -> int:
        row = await self._db["counters"].find_one_and_update(
            {"_id": name},
            {"$inc": {"seq": 1}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return int((row or {}).get("seq") or 1)

    # --- projects ---

    async def list_projects(self) -> list[Project]:
        rows = await self._db["projects"].find({}, _NO_OID).sort("id", 1).to_list(length=1000)
        return [project_from_doc(row) for row in rows if isinstance(row, dict)]

    async def get_project(self, project_id: int) -> Project | None:
        row = await self._db["projects"].find_one({"id": int(project_id)}, _NO_OID)
        return project_from_doc(row) if row else None

    async def create_project(self, data: ProjectCreate) -> Project:
        now = utcnow()
        doc = {
            **data.model_dump(),
            "id": await self._next_id("projects"),
            "createdAt": now,
            "updatedAt": now,
        }
        await self._db["projects"].insert_one(dict(doc))
        return project_from_doc(doc)

    async def update_project(self, project_id: int, patch: dict[str, Any]) -> Project | None:
        fields = {k: v for k, v in patch.items() if k not in ("id", "createdAt")}
        fields["updatedAt"] = utcnow()
        row = await self._db["projects"].find_one_and_update(
            {"id": int(project_id)},
            {"$set": fields},
            projection=_NO_OID,
            return_document=ReturnDocument.AFTER,
        )
        return project_from_doc(row) if row else None

    async def delete_project(self, project_id: int) -> bool:
        pid = int(project_id)
        await self._db["files"].delete_many({"projectId": pid})
        res = await self._db["projects"].delete_one({"id": pid})
        return int(getattr(res, "deleted_count", 0) or 0) > 0

    async def count_projects(self) -> int:
        return int(await self._db["projects"].count_documents({}))

    # --- files ---

    async def list_files(self, project_id: int) -> list[FileEntry | DirectoryEntry]:
        rows = (
            await self._db["files"]
            .find({"projectId": int(project_id)}, _NO_OID)
            .sort("id", 1)
            .to_list(length=10000)
        )
        return [entry_from_doc(row) for row in rows if isinstance(row, dict)]

    async def get_file(self, file_id: int) -> FileEntry | DirectoryEntry | None:
        row = await self._db["files"].find_one({"id": int(file_id)}, _NO_OID)
        return entry_from_doc(row) if row else None

    async def get_file_by_path(self, project_id: int, path: str) -> FileEntry | DirectoryEntry | None:
        row = await self._db["files"].find_one({"projectId": int(project_id), "path": path}, _NO_OID)
        return entry_from_doc(row) if row else None

    async def create_file(self, doc: dict[str, Any]) -> FileEntry | DirectoryEntry:
        now = utcnow()
        row = {**doc, "id": await self._next_id("files"), "createdAt": now, "updatedAt": now}
        await self._db["files"].insert_one(dict(row))
        return entry_from_doc(row)

    async def update_file(self, file_id: int, patch: dict[str, Any]) -> FileEntry | DirectoryEntry | None:
        fields = {k: v for k, v in patch.items() if k not in ("id", "projectId", "createdAt")}
        fields["updatedAt"] = utcnow()
        row = await self._db["files"].find_one_and_update(
            {"id": int(file_id)},
            {"$set": fields},
            projection=_NO_OID,
            return_document=ReturnDocument.AFTER,
        )
        return entry_from_doc(row) if row else None

    async def delete_file(self, file_id: int) -> bool:
        res = await self._db["files"].delete_one({"id": int(file_id)})
        return int(getattr(res, "deleted_count", 0) or 0) > 0

from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter

EntryKind = Literal["file", "directory"]
FILE: EntryKind = "file"
DIRECTORY: EntryKind = "directory"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Project(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    isPublic: bool = False
    createdAt: datetime = Field(default_factory=utcnow)
    updatedAt: datetime = Field(default_factory=utcnow)


class _EntryBase(BaseModel):
    id: int
    projectId: int
    name: str
    path: str
    language: Optional[str] = None
    createdAt: datetime = Field(default_factory=utcnow)
    updatedAt: datetime = Field(default_factory=utcnow)


class FileEntry(_EntryBase):
    kind: Literal["file"] = "file"
    content: str = ""


class DirectoryEntry(_EntryBase):
    """A materialized folder. Carries no content; a folder only displays if one of these exists."""

    kind: Literal["directory"] = "directory"


Entry = Annotated[Union[FileEntry, DirectoryEntry], Field(discriminator="kind")]

_ENTRY_ADAPTER: TypeAdapter[Any] = TypeAdapter(Entry)


def entry_from_doc(doc: dict[str, Any]) -> FileEntry | DirectoryEntry:
    row = {k: v for k, v in dict(doc).items() if k != "_id"}
    if row.get("kind") == DIRECTORY:
        row.pop("content", None)
    return _ENTRY_ADAPTER.validate_python(row)


def project_from_doc(doc: dict[str, Any]) -> Project:
    row = {k: v for k, v in dict(doc).items() if k != "_id"}
    return Project.model_validate(row)


def is_file(entry: Any) -> bool:
    return getattr(entry, "kind", None) == FILE

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .entries import DIRECTORY, EntryKind


def split_path(path: str) -> list[str]:
    return [seg for seg in str(path or "").split("/") if seg]


def check_entry_path(path: str) -> str:
    raw = str(path or "").strip()
    if not raw.startswith("/"):
        raise ValueError("path must be absolute (start with '/')")
    segments = raw.split("/")[1:]
    if not segments or any(seg in ("", ".", "..") for seg in segments):
        raise ValueError("path must not contain empty, '.' or '..' segments")
    return raw


class ProjectCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1)
    description: Optional[str] = None
    isPublic: bool = False

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("name must not be blank")
        return value.strip()


class ProjectUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    isPublic: Optional[bool] = None


class FileCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    projectId: int
    name: str = Field(min_length=1)
    path: str
    content: str = ""
    kind: EntryKind
    language: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _name_is_segment(cls, value: str) -> str:
        if "/" in value or value in (".", ".."):
            raise ValueError("name must be a single path segment")
        return value

    @field_validator("path")
    @classmethod
    def _path_is_absolute(cls, value: str) -> str:
        return check_entry_path(value)

    @model_validator(mode="after")
    def _path_ends_with_name(self) -> "FileCreate":
        if split_path(self.path)[-1] != self.name:
            raise ValueError("the final segment of path must equal name")
        if self.kind == DIRECTORY:
            self.content = ""
            self.language = None
        return self


class FileUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    content: Optional[str] = None
    name: Optional[str] = Field(default=None, min_length=1)
    language: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _name_is_segment(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and ("/" in value or value in (".", "..")):
            raise ValueError("name must be a single path segment")
        return value


class ExecuteRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    command: str
    cwd: Optional[str] = None


class ExecuteResult(BaseModel):
    stdout: str = ""
    stderr: str = ""
    exitCode: int = 0


class CompletionRequest(BaseModel):
    code: str
    language: str
    maxTokens: Optional[int] = Field(default=None, ge=1, le=8192)


class CodeRequest(BaseModel):
    code: str
    language: str


class FixRequest(BaseModel):
    code: str
    error: str
    language: str

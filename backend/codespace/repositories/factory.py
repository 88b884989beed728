from __future__ import annotations

from dataclasses import dataclass

from ..settings import settings
from .interfaces import FileRepository, ProjectRepository
from .memory_store import InMemoryStore
from .mongo_store import MongoStore

STORAGE_ENGINES = ("memory", "mongo")


@dataclass(frozen=True)
class RepositoryFactory:
    engine: str
    projects: ProjectRepository
    files: FileRepository


def repository_factory(engine: str | None = None, db=None) -> RepositoryFactory:
    name = str(engine or settings.APP_STORAGE_ENGINE or "memory").strip().lower()
    if name not in STORAGE_ENGINES:
        raise ValueError(f"Unknown storage engine: {name!r} (expected one of {', '.join(STORAGE_ENGINES)})")
    if name == "mongo":
        store = MongoStore(db)
        return RepositoryFactory(engine=name, projects=store, files=store)
    memory = InMemoryStore()
    return RepositoryFactory(engine=name, projects=memory, files=memory)

from __future__ import annotations

import logging

from motor.motor_asyncio import AsyncIOMotorClient

from .settings import settings

logger = logging.getLogger(__name__)

_client: AsyncIOMotorClient | None = None


def get_client() -> AsyncIOMotorClient:
    global _client
    if _client is None:
        _client = AsyncIOMotorClient(settings.MONGODB_URI)
    return _client


def get_db():
    return get_client()[settings.MONGODB_DB]


async def init_db(db=None) -> None:
    target = db if db is not None else get_db()
    await target["projects"].create_index([("id", 1)], name="projects_id", unique=True)
    await target["files"].create_index([("id", 1)], name="files_id", unique=True)
    await target["files"].create_index(
        [("projectId", 1), ("path", 1)],
        name="files_project_path",
        unique=True,
    )
    logger.info("db.indexes.ready db=%s", settings.MONGODB_DB)


def close_client() -> None:
    global _client
    if _client is not None:
        _client.close()
        _client = None

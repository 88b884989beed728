from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .core.logging import configure_logging
from .db import close_client, get_db, init_db
from .middleware.request_id import RequestIdMiddleware
from .middleware.validation import install_error_handlers
from .repositories.factory import repository_factory
from .routes.assistant import router as assistant_router
from .routes.consoles import router as consoles_router
from .routes.execute import router as execute_router
from .routes.files import router as files_router
from .routes.projects import router as projects_router
from .routes.runtime import router as runtime_router
from .routes.workspace import router as workspace_router
from .services.assistant import TextGenerationService
from .services.process_runner import runner_from_settings
from .services.runtime_state import mark_failed, mark_ready, mark_starting, mark_stopping
from .services.seed import ensure_default_project
from .services.session_registry import SessionRegistry
from .settings import settings

configure_logging()
logger = logging.getLogger(__name__)


def _allowed_origins() -> list[str]:
    raw = [settings.WEB_ORIGIN, "http://localhost:3000"]
    configured = os.getenv("CORS_ALLOW_ORIGINS", "")
    if configured.strip():
        raw.extend(x.strip() for x in configured.split(","))

    out: list[str] = []
    seen: set[str] = set()
    for value in raw:
        origin = str(value or "").strip()
        if not origin or origin in seen:
            continue
        seen.add(origin)
        out.append(origin)
    return out


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("startup.begin engine=%s", settings.APP_STORAGE_ENGINE)
    mark_starting()
    try:
        engine = str(settings.APP_STORAGE_ENGINE or "memory").strip().lower()
        db = None
        if engine == "mongo":
            db = get_db()
            await init_db(db)
        repos = repository_factory(engine, db)
        if settings.SEED_DEFAULT_PROJECT:
            await ensure_default_project(repos)

        runner = runner_from_settings()
        generator = TextGenerationService()
        app.state.repositories = repos
        app.state.runner = runner
        app.state.generator = generator
        app.state.registry = SessionRegistry(repos, runner, generator)
        mark_ready(repos.engine)
        logger.info("startup.ready engine=%s assistant_configured=%s", repos.engine, generator.is_configured())
    except Exception as err:
        mark_failed(str(err))
        raise
    try:
        yield
    finally:
        mark_stopping()
        close_client()
        logger.info("shutdown.done")


app = FastAPI(title="Codespace API", lifespan=lifespan)

app.add_middleware(RequestIdMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=_allowed_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
install_error_handlers(app)

app.include_router(projects_router)
app.include_router(files_router)
app.include_router(execute_router)
app.include_router(assistant_router)
app.include_router(workspace_router)
app.include_router(consoles_router)
app.include_router(runtime_router)

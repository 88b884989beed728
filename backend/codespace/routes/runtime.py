from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request

from ..services.runtime_state import is_ready, iso_utc, snapshot, uptime_seconds
from ..settings import settings

router = APIRouter(tags=["runtime"])


def _session_counts(request: Request) -> dict[str, int]:
    registry = getattr(request.app.state, "registry", None)
    if registry is None:
        return {"workspaces": 0, "consoles": 0}
    return registry.counts()


@router.get("/health/live")
async def health_live() -> dict:
    state = snapshot()
    return {
        "status": "alive",
        "runtime_status": state["status"],
        "uptime_sec": round(uptime_seconds(), 1),
        "updated_at": iso_utc(state["updated_at"]),
    }


@router.get("/health/ready")
async def health_ready() -> dict:
    state = snapshot()
    payload = {
        "status": state["status"],
        "ready": is_ready(),
        "storage_engine": state["storage_engine"],
        "ready_at": iso_utc(state["ready_at"]),
        "last_error": state["last_error"],
    }
    if not is_ready():
        raise HTTPException(status_code=503, detail=payload)
    return payload


@router.get("/runtime/info")
async def runtime_info(request: Request) -> dict:
    state = snapshot()
    generator = getattr(request.app.state, "generator", None)
    return {
        "app_version": settings.APP_VERSION,
        "storage_engine": state["storage_engine"] or settings.APP_STORAGE_ENGINE,
        "runtime_status": state["status"],
        "started_at": iso_utc(state["started_at"]),
        "ready_at": iso_utc(state["ready_at"]),
        "last_error": state["last_error"],
        "assistant_configured": bool(generator is not None and generator.is_configured()),
        "sessions": _session_counts(request),
    }

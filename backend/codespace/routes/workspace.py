from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Literal

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from ..core.request_context import bind_session_id, reset_session_id
from ..deps import get_registry, http_error
from ..errors import WorkspaceError
from ..models.entries import EntryKind
from ..services.assistant_panel import OPERATIONS, Operation
from ..services.path_tree import ROOT
from ..services.session_registry import SessionRegistry, Workbench
from ..services.workspace_session import ContentUpdate, CursorPosition

router = APIRouter(tags=["workspace"])


class FileRefReq(BaseModel):
    fileId: int


class ContentReq(BaseModel):
    fileId: int
    content: str


class CursorReq(BaseModel):
    line: int = Field(ge=1)
    column: int = Field(ge=1)


class ToggleReq(BaseModel):
    path: str


class ResizeReq(BaseModel):
    axis: Literal["side", "bottom"]
    delta: int


class EntryCreateReq(BaseModel):
    name: str
    kind: EntryKind
    parent: str = ROOT


class AssistantErrorReq(BaseModel):
    error: str = ""


@contextmanager
def _bound(session_id: str):
    token = bind_session_id(session_id)
    try:
        yield
    finally:
        reset_session_id(token)


def _bench(registry: SessionRegistry, session_id: str) -> Workbench:
    try:
        return registry.workspace(session_id)
    except WorkspaceError as err:
        raise http_error(err)


def _payload(bench: Workbench) -> dict[str, Any]:
    return {
        **bench.session.snapshot(),
        "layout": bench.layout.snapshot(),
        "assistant": bench.assistant.snapshot(),
        "notices": [
            {"title": n.title, "description": n.description, "variant": n.variant}
            for n in bench.session.drain_notices()
        ],
    }


def _update_payload(update: ContentUpdate) -> dict[str, Any]:
    return {
        "fileId": update.file_id,
        "applied": update.applied,
        "persisted": update.persisted,
        "diverged": update.diverged,
        "error": update.error,
    }


@router.post("/projects/{project_id}/workspace", status_code=201)
async def open_workspace(project_id: int, registry: SessionRegistry = Depends(get_registry)):
    try:
        bench = await registry.open_workspace(project_id)
    except WorkspaceError as err:
        raise http_error(err)
    return _payload(bench)


@router.get("/workspace/{session_id}")
async def get_workspace(session_id: str, registry: SessionRegistry = Depends(get_registry)):
    return _payload(_bench(registry, session_id))


@router.delete("/workspace/{session_id}")
async def close_workspace(session_id: str, registry: SessionRegistry = Depends(get_registry)):
    with _bound(session_id):
        try:
            pending = registry.close_workspace(session_id)
        except WorkspaceError as err:
            raise http_error(err)
    return {"closed": True, "pendingWrites": pending}


@router.post("/workspace/{session_id}/refresh")
async def refresh_workspace(session_id: str, registry: SessionRegistry = Depends(get_registry)):
    bench = _bench(registry, session_id)
    with _bound(session_id):
        await bench.session.refresh()
    return _payload(bench)


@router.post("/workspace/{session_id}/open")
async def open_file(session_id: str, req: FileRefReq, registry: SessionRegistry = Depends(get_registry)):
    bench = _bench(registry, session_id)
    with _bound(session_id):
        if not bench.session.open_file_id(req.fileId):
            raise HTTPException(status_code=404, detail="File not found")
    return _payload(bench)


@router.post("/workspace/{session_id}/close")
async def close_file(session_id: str, req: FileRefReq, registry: SessionRegistry = Depends(get_registry)):
    bench = _bench(registry, session_id)
    with _bound(session_id):
        bench.session.close_file(req.fileId)
    return _payload(bench)


@router.put("/workspace/{session_id}/content")
async def update_content(session_id: str, req: ContentReq, registry: SessionRegistry = Depends(get_registry)):
    bench = _bench(registry, session_id)
    with _bound(session_id):
        update = await bench.session.update_content(req.fileId, req.content)
    return {"update": _update_payload(update), **_payload(bench)}


@router.put("/workspace/{session_id}/cursor")
async def set_cursor(session_id: str, req: CursorReq, registry: SessionRegistry = Depends(get_registry)):
    bench = _bench(registry, session_id)
    bench.session.set_cursor(CursorPosition(req.line, req.column))
    return _payload(bench)


@router.post("/workspace/{session_id}/toggle")
async def toggle_folder(session_id: str, req: ToggleReq, registry: SessionRegistry = Depends(get_registry)):
    bench = _bench(registry, session_id)
    bench.session.toggle_folder(req.path)
    return _payload(bench)


@router.post("/workspace/{session_id}/resize")
async def resize_panel(session_id: str, req: ResizeReq, registry: SessionRegistry = Depends(get_registry)):
    bench = _bench(registry, session_id)
    bench.layout.resize(req.axis, req.delta)
    return _payload(bench)


@router.post("/workspace/{session_id}/entries")
async def create_entry(session_id: str, req: EntryCreateReq, registry: SessionRegistry = Depends(get_registry)):
    bench = _bench(registry, session_id)
    with _bound(session_id):
        entry = await bench.session.create_entry(req.name, req.kind, req.parent)
    return {"created": entry.model_dump(mode="json") if entry else None, **_payload(bench)}


@router.put("/workspace/{session_id}/assistant/error")
async def set_assistant_error(
    session_id: str,
    req: AssistantErrorReq,
    registry: SessionRegistry = Depends(get_registry),
):
    bench = _bench(registry, session_id)
    bench.assistant.error_text = req.error
    return _payload(bench)


@router.post("/workspace/{session_id}/assistant/apply-fix")
async def apply_fix(session_id: str, registry: SessionRegistry = Depends(get_registry)):
    bench = _bench(registry, session_id)
    with _bound(session_id):
        update = await bench.assistant.apply_fix()
    return {"update": _update_payload(update) if update else None, **_payload(bench)}


@router.post("/workspace/{session_id}/assistant/{operation}")
async def run_assistant(
    session_id: str,
    operation: str,
    registry: SessionRegistry = Depends(get_registry),
):
    if operation not in OPERATIONS:
        raise HTTPException(status_code=404, detail=f"Unknown assistant operation: {operation}")
    bench = _bench(registry, session_id)
    with _bound(session_id):
        op: Operation = operation  # type: ignore[assignment]
        await bench.assistant.run(op)
    return _payload(bench)

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ..core.request_context import bind_session_id, reset_session_id
from ..deps import get_registry, http_error
from ..errors import WorkspaceError
from ..services.console_session import ConsoleSession
from ..services.session_registry import SessionRegistry

router = APIRouter(prefix="/consoles", tags=["consoles"])


class ConsoleOpenReq(BaseModel):
    cwd: Optional[str] = None


class ConsoleInputReq(BaseModel):
    text: str


class ConsoleKeyReq(BaseModel):
    key: str


def _console(registry: SessionRegistry, console_id: str) -> ConsoleSession:
    try:
        return registry.console(console_id)
    except WorkspaceError as err:
        raise http_error(err)


@router.post("", status_code=201)
async def open_console(req: ConsoleOpenReq, registry: SessionRegistry = Depends(get_registry)):
    return registry.open_console(req.cwd).snapshot()


@router.get("/{console_id}")
async def get_console(console_id: str, registry: SessionRegistry = Depends(get_registry)):
    return _console(registry, console_id).snapshot()


@router.post("/{console_id}/input")
async def set_input(console_id: str, req: ConsoleInputReq, registry: SessionRegistry = Depends(get_registry)):
    console = _console(registry, console_id)
    accepted = console.set_input(req.text)
    return {"accepted": accepted, **console.snapshot()}


@router.post("/{console_id}/key")
async def press_key(console_id: str, req: ConsoleKeyReq, registry: SessionRegistry = Depends(get_registry)):
    console = _console(registry, console_id)
    token = bind_session_id(console_id)
    try:
        handled = await console.handle_key(req.key)
    finally:
        reset_session_id(token)
    return {"handled": handled, **console.snapshot()}


@router.delete("/{console_id}", status_code=204)
async def close_console(console_id: str, registry: SessionRegistry = Depends(get_registry)):
    try:
        registry.close_console(console_id)
    except WorkspaceError as err:
        raise http_error(err)

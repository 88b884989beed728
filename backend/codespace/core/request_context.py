from __future__ import annotations

from contextvars import ContextVar, Token

_REQUEST_ID_CTX: ContextVar[str] = ContextVar("request_id", default="-")
_SESSION_ID_CTX: ContextVar[str] = ContextVar("session_id", default="-")


def get_request_id() -> str:
    return _REQUEST_ID_CTX.get()


def set_request_id(request_id: str) -> Token[str]:
    return _REQUEST_ID_CTX.set(request_id)


def reset_request_id(token: Token[str]) -> None:
    _REQUEST_ID_CTX.reset(token)


def get_session_id() -> str:
    return _SESSION_ID_CTX.get()


def bind_session_id(session_id: str) -> Token[str]:
    """Tag log lines emitted while a workspace or console session is handling a call."""
    return _SESSION_ID_CTX.set(session_id)


def reset_session_id(token: Token[str]) -> None:
    _SESSION_ID_CTX.reset(token)

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Literal

Phase = Literal["starting", "ready", "failed", "stopping"]


def _now() -> datetime:
    return datetime.now(timezone.utc)


def iso_utc(value: datetime | None) -> str | None:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


@dataclass
class _Lifecycle:
    status: Phase = "starting"
    started_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)
    ready_at: datetime | None = None
    last_error: str | None = None
    storage_engine: str | None = None

    def move(self, status: Phase) -> None:
        self.status = status
        self.updated_at = _now()


_LIFECYCLE = _Lifecycle()


def mark_starting() -> None:
    global _LIFECYCLE
    _LIFECYCLE = _Lifecycle()


def mark_ready(storage_engine: str | None = None) -> None:
    _LIFECYCLE.move("ready")
    _LIFECYCLE.ready_at = _LIFECYCLE.updated_at
    if storage_engine:
        _LIFECYCLE.storage_engine = storage_engine


def mark_failed(error_text: str) -> None:
    _LIFECYCLE.move("failed")
    _LIFECYCLE.last_error = str(error_text or "startup_failed")


def mark_stopping() -> None:
    _LIFECYCLE.move("stopping")


def snapshot() -> dict[str, Any]:
    return asdict(_LIFECYCLE)


def is_ready() -> bool:
    return _LIFECYCLE.status == "ready"


def uptime_seconds() -> float:
    return max(0.0, (_now() - _LIFECYCLE.started_at).total_seconds())

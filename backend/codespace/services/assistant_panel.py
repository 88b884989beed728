from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Literal

from ..errors import GenerationServiceError
from .assistant import TextGenerationService
from .workspace_session import ContentUpdate, Notice, WorkspaceSession

logger = logging.getLogger(__name__)

Operation = Literal["complete", "explain", "fix", "document"]
OPERATIONS: tuple[Operation, ...] = ("complete", "explain", "fix", "document")


@dataclass
class PanelSlot:
    loading: bool = False
    result: str | None = None
    error: str | None = None


class AssistantPanel:
    """Assistant requests for the session's active file; each operation keeps its own result slot."""

    def __init__(self, service: TextGenerationService, session: WorkspaceSession):
        self.service = service
        self.session = session
        self.error_text = ""
        self.slots: dict[str, PanelSlot] = {op: PanelSlot() for op in OPERATIONS}

    def _source(self) -> tuple[str, str]:
        active = self.session.active_entry
        if active is None:
            return "", ""
        return active.content, active.language or ""

    async def run(self, operation: Operation) -> PanelSlot | None:
        if operation not in self.slots:
            raise ValueError(f"Unknown assistant operation: {operation!r}")
        slot = self.slots[operation]
        code, language = self._source()
        if not code or slot.loading:
            return None
        if operation == "fix" and not self.error_text.strip():
            self.session.notices.append(Notice("Error message required", "Please enter an error message", "destructive"))
            return None

        slot.loading = True
        slot.error = None
        try:
            if operation == "complete":
                slot.result = await asyncio.to_thread(self.service.complete, code, language)
            elif operation == "explain":
                slot.result = await asyncio.to_thread(self.service.explain, code, language)
            elif operation == "fix":
                slot.result = await asyncio.to_thread(self.service.fix, code, self.error_text, language)
            else:
                slot.result = await asyncio.to_thread(self.service.document, code, language)
        except GenerationServiceError as err:
            logger.warning("assistant.panel.failed op=%s error=%s", operation, err)
            slot.error = str(err)
        finally:
            slot.loading = False
        return slot

    async def apply_fix(self) -> ContentUpdate | None:
        fixed = self.slots["fix"].result
        active = self.session.active_entry
        if not fixed or active is None:
            return None
        update = await self.session.update_content(active.id, fixed)
        self.session.notices.append(Notice("Code fixed", "The AI fix has been applied to your code."))
        return update

    def snapshot(self) -> dict[str, Any]:
        return {
            "error_text": self.error_text,
            "slots": {
                op: {"loading": slot.loading, "result": slot.result, "error": slot.error}
                for op, slot in self.slots.items()
            },
        }

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Literal
from uuid import uuid4

from .process_runner import ProcessRunner

logger = logging.getLogger(__name__)

LineKind = Literal["command", "output", "error"]

CLEAR_COMMANDS = frozenset({"clear", "cls"})
IDLE_PLACEHOLDER = "Enter command..."
BUSY_PLACEHOLDER = "Executing..."
EMPTY_SCROLLBACK_TEXT = "Terminal ready. Type commands and press Enter to execute."


@dataclass(frozen=True)
class ScrollbackLine:
    kind: LineKind
    text: str


class ConsoleSession:
    """Interactive line console: one input field, a scrollback and a history-recall cursor.

    Only one command runs at a time; submissions made while a command is in
    flight are ignored. ``clear`` empties the scrollback but keeps the command
    history.
    """

    def __init__(self, runner: ProcessRunner, *, cwd: str | None = None, console_id: str | None = None):
        self.console_id = console_id or uuid4().hex
        self.cwd = cwd
        self.scrollback: list[ScrollbackLine] = []
        self.history: list[str] = []
        self.history_cursor = -1
        self.busy = False
        self.scroll_position = 0
        self._runner = runner
        self._input = ""

    @property
    def input_text(self) -> str:
        return self._input

    @property
    def placeholder(self) -> str:
        return BUSY_PLACEHOLDER if self.busy else IDLE_PLACEHOLDER

    def set_input(self, text: str) -> bool:
        if self.busy:
            return False
        self._input = str(text)
        return True

    def _append(self, kind: LineKind, text: str) -> None:
        self.scrollback.append(ScrollbackLine(kind, text))
        self.scroll_position = len(self.scrollback)

    def _record_history(self, text: str) -> None:
        if not self.history or self.history[-1] != text:
            self.history.append(text)

    def clear(self) -> None:
        self.scrollback = []
        self.scroll_position = 0

    async def submit(self) -> bool:
        text = self._input
        if self.busy or not text.strip():
            return False

        self.busy = True
        try:
            self._append("command", text)
            if text.strip() in CLEAR_COMMANDS:
                self.clear()
                return True

            self._record_history(text)
            try:
                result = await self._runner.run(text, self.cwd)
            except Exception as err:
                logger.warning("console.transport_failed console=%s error=%s", self.console_id, err)
                self._append("error", str(err) or "Command execution failed")
                return True

            if result.stdout:
                self._append("output", result.stdout)
            if result.stderr:
                self._append("error", result.stderr)
            if result.exit_code != 0:
                self._append("error", f"Process exited with code {result.exit_code}")
            return True
        finally:
            self._input = ""
            self.history_cursor = -1
            self.busy = False

    def recall_older(self) -> bool:
        if self.busy:
            return False
        if self.history_cursor + 1 >= len(self.history):
            return False
        self.history_cursor += 1
        self._input = self.history[len(self.history) - 1 - self.history_cursor]
        return True

    def recall_newer(self) -> bool:
        if self.busy:
            return False
        if self.history_cursor > 0:
            self.history_cursor -= 1
            self._input = self.history[len(self.history) - 1 - self.history_cursor]
            return True
        if self.history_cursor == 0:
            self.history_cursor = -1
            self._input = ""
            return True
        return False

    async def handle_key(self, key: str) -> bool:
        if key == "Enter":
            return await self.submit()
        if key == "ArrowUp":
            return self.recall_older()
        if key == "ArrowDown":
            return self.recall_newer()
        return False

    def viewport(self, height: int) -> list[ScrollbackLine]:
        """The newest ``height`` lines; the view always follows the tail."""
        if height <= 0:
            return []
        end = self.scroll_position
        return self.scrollback[max(0, end - height):end]

    def snapshot(self) -> dict[str, Any]:
        return {
            "console_id": self.console_id,
            "cwd": self.cwd,
            "input": self._input,
            "placeholder": self.placeholder,
            "busy": self.busy,
            "history_cursor": self.history_cursor,
            "history": list(self.history),
            "scrollback": [{"kind": line.kind, "text": line.text} for line in self.scrollback],
            "empty_text": EMPTY_SCROLLBACK_TEXT if not self.scrollback else None,
        }

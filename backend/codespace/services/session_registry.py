from __future__ import annotations

import logging
from collections import OrderedDict
from dataclasses import dataclass

from ..errors import NotFoundError
from ..repositories.factory import RepositoryFactory
from ..settings import settings
from .assistant import TextGenerationService
from .assistant_panel import AssistantPanel
from .console_session import ConsoleSession
from .layout import LayoutController
from .process_runner import ProcessRunner
from .workspace_session import WorkspaceSession

logger = logging.getLogger(__name__)


@dataclass
class Workbench:
    session: WorkspaceSession
    layout: LayoutController
    assistant: AssistantPanel


class SessionRegistry:
    """Server-held workspace and console sessions, keyed by generated ids.

    Clients are expected to DELETE sessions they are done with. Sessions that are
    abandoned instead are bounded by ``max_workspaces`` / ``max_consoles``: opening
    one past the cap evicts the least recently used session of that kind.
    """

    def __init__(
        self,
        repos: RepositoryFactory,
        runner: ProcessRunner,
        generator: TextGenerationService,
        *,
        max_workspaces: int | None = None,
        max_consoles: int | None = None,
    ):
        self.repos = repos
        self.runner = runner
        self.generator = generator
        self.max_workspaces = max(1, int(max_workspaces or settings.SESSION_MAX_WORKSPACES))
        self.max_consoles = max(1, int(max_consoles or settings.SESSION_MAX_CONSOLES))
        self._workbenches: OrderedDict[str, Workbench] = OrderedDict()
        self._consoles: OrderedDict[str, ConsoleSession] = OrderedDict()

    # --- workspaces ---

    async def open_workspace(self, project_id: int) -> Workbench:
        session = await WorkspaceSession.start(project_id, self.repos.files, self.repos.projects)
        bench = Workbench(
            session=session,
            layout=LayoutController(),
            assistant=AssistantPanel(self.generator, session),
        )
        self._workbenches[session.session_id] = bench
        while len(self._workbenches) > self.max_workspaces:
            evicted_id, evicted = self._workbenches.popitem(last=False)
            pending = evicted.session.teardown()
            logger.info("workspace.evicted session=%s pending_writes=%s", evicted_id, pending)
        return bench

    def workspace(self, session_id: str) -> Workbench:
        bench = self._workbenches.get(session_id)
        if bench is None:
            raise NotFoundError("Workspace session not found")
        self._workbenches.move_to_end(session_id)
        return bench

    def close_workspace(self, session_id: str) -> int:
        bench = self._workbenches.pop(session_id, None)
        if bench is None:
            raise NotFoundError("Workspace session not found")
        return bench.session.teardown()

    # --- consoles ---

    def _evict_console(self) -> None:
        # a console with a command in flight is only dropped when every console is busy
        victim = next((cid for cid, c in self._consoles.items() if not c.busy), None)
        if victim is None:
            victim = next(iter(self._consoles))
        del self._consoles[victim]
        logger.info("console.evicted console=%s", victim)

    def open_console(self, cwd: str | None = None) -> ConsoleSession:
        console = ConsoleSession(self.runner, cwd=cwd)
        self._consoles[console.console_id] = console
        logger.info("console.open console=%s cwd=%s", console.console_id, cwd or "-")
        while len(self._consoles) > self.max_consoles:
            self._evict_console()
        return console

    def console(self, console_id: str) -> ConsoleSession:
        console = self._consoles.get(console_id)
        if console is None:
            raise NotFoundError("Console session not found")
        self._consoles.move_to_end(console_id)
        return console

    def close_console(self, console_id: str) -> None:
        if self._consoles.pop(console_id, None) is None:
            raise NotFoundError("Console session not found")
        logger.info("console.close console=%s", console_id)

    def counts(self) -> dict[str, int]:
        return {"workspaces": len(self._workbenches), "consoles": len(self._consoles)}

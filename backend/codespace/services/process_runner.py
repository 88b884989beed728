from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Protocol

import httpx

from ..errors import ExecutionTransportError
from ..settings import settings

logger = logging.getLogger(__name__)

TIMEOUT_EXIT_CODE = 124


@dataclass(frozen=True)
class ExecutionResult:
    stdout: str = ""
    stderr: str = ""
    exit_code: int = 0

    def to_payload(self) -> dict[str, object]:
        return {"stdout": self.stdout, "stderr": self.stderr, "exitCode": self.exit_code}


class ProcessRunner(Protocol):
    async def run(self, command: str, cwd: str | None = None) -> ExecutionResult: ...


def split_command(command: str) -> tuple[str, list[str]]:
    parts = str(command or "").split()
    if not parts:
        raise ExecutionTransportError("Empty command")
    return parts[0], parts[1:]


def _truncate(text: str, limit: int) -> str:
    if limit <= 0 or len(text) <= limit:
        return text
    return text[:limit] + "\n... (output truncated)\n"


class LocalProcessRunner:
    """Runs a command line through the shell on this host."""

    def __init__(
        self,
        *,
        default_cwd: str | None = None,
        timeout_sec: int | None = None,
        max_output_chars: int | None = None,
    ):
        self.default_cwd = default_cwd or settings.EXECUTE_DEFAULT_CWD
        self.timeout_sec = int(timeout_sec or settings.EXECUTE_TIMEOUT_SEC)
        self.max_output_chars = int(max_output_chars or settings.EXECUTE_MAX_OUTPUT_CHARS)

    async def run(self, command: str, cwd: str | None = None) -> ExecutionResult:
        program, args = split_command(command)
        line = " ".join([program, *args])
        workdir = cwd or self.default_cwd
        logger.info("execute.start program=%s args=%s cwd=%s", program, len(args), workdir)
        try:
            proc = await asyncio.create_subprocess_shell(
                line,
                cwd=workdir,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as err:
            raise ExecutionTransportError(f"Execution failed: {err}") from err

        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=max(1, self.timeout_sec))
        except asyncio.TimeoutError:
            proc.kill()
            await proc.wait()
            logger.warning("execute.timeout program=%s timeout_sec=%s", program, self.timeout_sec)
            return ExecutionResult(
                stderr=f"Command timed out after {self.timeout_sec}s",
                exit_code=TIMEOUT_EXIT_CODE,
            )

        result = ExecutionResult(
            stdout=_truncate((stdout or b"").decode("utf-8", errors="replace"), self.max_output_chars),
            stderr=_truncate((stderr or b"").decode("utf-8", errors="replace"), self.max_output_chars),
            exit_code=int(proc.returncode if proc.returncode is not None else -1),
        )
        logger.info("execute.done program=%s exit=%s", program, result.exit_code)
        return result


class HttpProcessRunner:
    """Sends commands to a remote ``POST /execute`` endpoint."""

    def __init__(self, base_url: str, *, client: httpx.AsyncClient | None = None, timeout_sec: float = 120.0):
        self.base_url = base_url.rstrip("/")
        self._client = client
        self._timeout = timeout_sec

    async def _post(self, payload: dict[str, object]) -> httpx.Response:
        if self._client is not None:
            return await self._client.post(f"{self.base_url}/execute", json=payload)
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            return await client.post(f"{self.base_url}/execute", json=payload)

    async def run(self, command: str, cwd: str | None = None) -> ExecutionResult:
        payload: dict[str, object] = {"command": command}
        if cwd:
            payload["cwd"] = cwd
        try:
            resp = await self._post(payload)
        except httpx.HTTPError as err:
            raise ExecutionTransportError(f"Could not reach execution service: {err}") from err

        try:
            body = resp.json()
        except ValueError:
            body = {}
        if resp.status_code != 200:
            detail = ""
            if isinstance(body, dict):
                detail = str(body.get("message") or body.get("detail") or "")
            raise ExecutionTransportError(detail or f"Execution failed ({resp.status_code})")
        if not isinstance(body, dict):
            raise ExecutionTransportError("Execution service returned a malformed response")

        return ExecutionResult(
            stdout=str(body.get("stdout") or ""),
            stderr=str(body.get("stderr") or ""),
            exit_code=int(body.get("exitCode") or 0),
        )


def runner_from_settings(remote_url: str | None = None) -> ProcessRunner:
    """``EXECUTE_REMOTE_URL`` selects the HTTP runner; otherwise commands run on this host."""
    url = str(remote_url if remote_url is not None else (settings.EXECUTE_REMOTE_URL or "")).strip()
    if url:
        logger.info("execute.runner kind=http base_url=%s", url)
        return HttpProcessRunner(url, timeout_sec=float(settings.EXECUTE_TIMEOUT_SEC) + 5.0)
    logger.info("execute.runner kind=local cwd=%s", settings.EXECUTE_DEFAULT_CWD)
    return LocalProcessRunner()

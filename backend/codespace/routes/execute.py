from __future__ import annotations

from fastapi import APIRouter, Depends

from ..deps import get_runner, http_error
from ..errors import ExecutionTransportError
from ..models.schema import ExecuteRequest, ExecuteResult
from ..services.process_runner import ProcessRunner

router = APIRouter(tags=["execute"])


@router.post("/execute", response_model=ExecuteResult)
async def execute(req: ExecuteRequest, runner: ProcessRunner = Depends(get_runner)):
    try:
        result = await runner.run(req.command, req.cwd)
    except ExecutionTransportError as err:
        raise http_error(err)
    return result.to_payload()

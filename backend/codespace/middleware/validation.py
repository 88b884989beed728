from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


def _location(loc: tuple | list) -> str:
    parts = [str(part) for part in loc]
    if parts and parts[0] in ("body", "path", "query"):
        # leading request source marker, not a field name
        parts = parts[1:]
    return ".".join(parts)


def validation_message(errors: list[dict]) -> str:
    issues: list[str] = []
    for err in errors:
        msg = str(err.get("msg") or "Invalid value")
        where = _location(err.get("loc") or ())
        issues.append(f'{msg} at "{where}"' if where else msg)
    return "Validation error: " + "; ".join(issues or ["invalid request"])


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = validation_message(list(exc.errors()))
    logger.info("http.validation_failed path=%s detail=%s", request.url.path, message)
    return JSONResponse(status_code=400, content={"detail": message})


def install_error_handlers(app: FastAPI) -> None:
    """Schema violations are answered with 400 and a readable message instead of FastAPI's 422."""
    app.add_exception_handler(RequestValidationError, _request_validation_handler)

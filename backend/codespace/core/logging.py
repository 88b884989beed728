from __future__ import annotations

import logging
import os

from .request_context import get_request_id, get_session_id

LOG_FORMAT = "%(asctime)s %(levelname)s [%(request_id)s/%(session_id)s] %(name)s: %(message)s"


class _ContextFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id()
        record.session_id = get_session_id()
        return True


def configure_logging(level: str | None = None) -> None:
    name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(
        level=getattr(logging, name, logging.INFO),
        format=LOG_FORMAT,
        force=True,
    )
    context_filter = _ContextFilter()
    root = logging.getLogger()
    for handler in root.handlers:
        handler.addFilter(context_filter)
    # uvicorn's access log duplicates the http.request line written by RequestIdMiddleware
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

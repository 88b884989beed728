from fastapi import HTTPException, Request

from .errors import WorkspaceError
from .repositories.factory import RepositoryFactory
from .services.assistant import TextGenerationService
from .services.process_runner import ProcessRunner
from .services.session_registry import SessionRegistry


def _state(request: Request, name: str):
    value = getattr(request.app.state, name, None)
    if value is None:
        raise HTTPException(503, f"{name} not initialised")
    return value


def get_repositories(request: Request) -> RepositoryFactory:
    return _state(request, "repositories")


def get_runner(request: Request) -> ProcessRunner:
    return _state(request, "runner")


def get_generator(request: Request) -> TextGenerationService:
    return _state(request, "generator")


def get_registry(request: Request) -> SessionRegistry:
    return _state(request, "registry")


def http_error(err: WorkspaceError) -> HTTPException:
    return HTTPException(status_code=err.status_code, detail=str(err))

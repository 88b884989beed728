from __future__ import annotations


class WorkspaceError(RuntimeError):
    status_code = 400


class ValidationError(WorkspaceError):
    """Malformed request shape. Never retried, no local state change."""

    status_code = 400


class NotFoundError(WorkspaceError):
    status_code = 404


class PersistenceError(WorkspaceError):
    """A store write failed after the optimistic local change was already applied."""

    status_code = 500


class ExecutionTransportError(WorkspaceError):
    """The process runner could not be started or reached."""

    status_code = 500


class GenerationServiceError(WorkspaceError):
    status_code = 502

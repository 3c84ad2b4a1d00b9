"""Typed failures raised by the document workflow engine."""

from __future__ import annotations

# purpose: one error taxonomy shared by the ledger, trackers and HTTP layer
# status: active


class WorkflowError(RuntimeError):
    """Base error for workflow operations."""

    code = "workflow_error"
    status_code = 400
    retryable = False
    default_message = "Workflow operation failed"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def detail(self) -> str:
        return str(self)


class NotFound(WorkflowError):
    """Raised when a document, note, review or revision request is missing."""

    code = "not_found"
    status_code = 404
    default_message = "Resource not found"


class InvalidTransition(WorkflowError):
    """Raised when the requested edge is not part of the status graph."""

    code = "invalid_transition"
    status_code = 422
    default_message = "Transition not allowed"


class Unauthorized(WorkflowError):
    """Raised when the actor lacks the role or relationship for an operation."""

    code = "unauthorized"
    status_code = 403
    default_message = "Not authorized"


class Conflict(WorkflowError):
    """Raised when the caller's expected status no longer matches the document."""

    code = "conflict"
    status_code = 409
    default_message = "this document was just updated, please refresh"


class ValidationError(WorkflowError):
    """Raised for missing input or a failed gate such as unresolved curation notes."""

    code = "validation_error"
    status_code = 400
    default_message = "Invalid request"


class PersistenceError(WorkflowError):
    """Raised when the data store fails; nothing was written."""

    code = "persistence_error"
    status_code = 503
    retryable = True
    default_message = "Storage temporarily unavailable"

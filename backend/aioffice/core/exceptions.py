"""Application error hierarchy.

Errors raised by services before a workflow run has been scheduled.
Each carries an HTTP status code so the API layer can translate it
without inspecting the concrete type.
"""

from __future__ import annotations

from typing import Any

# =============================================================================
# Base
# =============================================================================


class AppError(Exception):
    """Base class for application errors.

    Attributes:
        message: Human-readable error message.
        error_code: Machine-readable error code for API responses.
        status_code: HTTP status code the error maps to.
        details: Additional error context.
    """

    status_code: int = 500
    error_code: str = "APP_ERROR"

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


# =============================================================================
# Run invocation errors
# =============================================================================


class InvalidRunRequestError(AppError):
    """Raised when a run request is missing required fields."""

    status_code = 400
    error_code = "INVALID_RUN_REQUEST"


class WorkflowNotFoundError(AppError):
    """Raised when the requested workflow does not exist.

    Attributes:
        workflow_id: Identifier that was looked up.
    """

    status_code = 404
    error_code = "WORKFLOW_NOT_FOUND"

    def __init__(self, workflow_id: Any) -> None:
        super().__init__(
            "Workflow not found",
            details={"workflow_id": str(workflow_id)},
        )
        self.workflow_id = workflow_id


class EmptyWorkflowError(AppError):
    """Raised when a workflow has no nodes to execute."""

    status_code = 400
    error_code = "EMPTY_WORKFLOW"

    def __init__(self, workflow_id: Any) -> None:
        super().__init__(
            "Workflow has no nodes",
            details={"workflow_id": str(workflow_id)},
        )
        self.workflow_id = workflow_id


class RunCreationError(AppError):
    """Raised when the run row could not be written."""

    status_code = 500
    error_code = "RUN_CREATION_FAILED"

    def __init__(self, reason: str) -> None:
        super().__init__("Failed to create run", details={"reason": reason})


__all__ = [
    "AppError",
    "EmptyWorkflowError",
    "InvalidRunRequestError",
    "RunCreationError",
    "WorkflowNotFoundError",
]

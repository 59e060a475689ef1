"""Pydantic schemas for request and response bodies."""

from aioffice.schemas.base import BaseSchema, ErrorResponse, PaginatedResponse
from aioffice.schemas.run import RunAccepted, RunCreate, WorkflowRunResponse
from aioffice.schemas.workflow import WorkflowCreate, WorkflowResponse

__all__ = [
    "BaseSchema",
    "ErrorResponse",
    "PaginatedResponse",
    "RunAccepted",
    "RunCreate",
    "WorkflowCreate",
    "WorkflowResponse",
    "WorkflowRunResponse",
]

"""SQLAlchemy models.

This package contains all database models.
"""

from aioffice.models.base import GUID, Base, JSONType, TimestampMixin, UUIDMixin
from aioffice.models.enums import NodeKind, RunStatus
from aioffice.models.run import WorkflowRun
from aioffice.models.workflow import Workflow

__all__ = [
    # Base classes
    "Base",
    "GUID",
    "JSONType",
    "UUIDMixin",
    "TimestampMixin",
    # Enums
    "NodeKind",
    "RunStatus",
    # Models
    "Workflow",
    "WorkflowRun",
]

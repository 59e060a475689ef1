"""Domain enum definitions for the workflow engine.

This module defines the enum types shared by models, schemas and the
execution engine.
"""

from enum import Enum


class NodeKind(str, Enum):
    """Workflow node kinds produced by the editor palette.

    The engine executes any kind registered in the executor registry;
    kinds not listed here are still accepted and treated as no-ops.
    """

    START = "start"
    END = "end"
    TASK = "task"
    ASSIGNMENT = "assignment"
    QA = "qa"
    KPI = "kpi"
    REPORT = "report"
    CONDITIONAL = "conditional"
    WEBHOOK = "webhook"
    DELAY = "delay"
    LOOP = "loop"
    EMAIL = "email"
    TRANSFORM = "transform"
    HTTP = "http"
    TWITTER = "twitter"
    LINKEDIN = "linkedin"
    INSTAGRAM = "instagram"
    FACEBOOK = "facebook"

    def __str__(self) -> str:
        """Return the string value for serialization."""
        return self.value


class RunStatus(str, Enum):
    """Workflow run state.

    PAUSED is part of the stored schema but is never produced by the
    engine; it can only be set by external tooling.
    """

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    PAUSED = "paused"

    def __str__(self) -> str:
        """Return the string value for serialization."""
        return self.value


__all__ = [
    "NodeKind",
    "RunStatus",
]

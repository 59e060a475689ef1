"""Core application configuration and utilities.

This package contains core functionality including:
- Configuration management (config.py)
- Logging setup (logging.py)
- Application error hierarchy (exceptions.py)
"""

from aioffice.core.config import settings
from aioffice.core.exceptions import (
    AppError,
    EmptyWorkflowError,
    InvalidRunRequestError,
    RunCreationError,
    WorkflowNotFoundError,
)

__all__ = [
    "AppError",
    "EmptyWorkflowError",
    "InvalidRunRequestError",
    "RunCreationError",
    "WorkflowNotFoundError",
    "settings",
]

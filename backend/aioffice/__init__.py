"""AI Office Backend Application.

Workflow execution engine for AI Office workspaces.
"""

from aioffice import db

__version__ = "0.1.0"

__all__ = [
    "db",
    "__version__",
]

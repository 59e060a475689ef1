"""Service layer.

Business logic between the API routers and the models.
"""

from aioffice.services.run_service import RunService
from aioffice.services.workflow_service import WorkflowService

__all__ = [
    "RunService",
    "WorkflowService",
]

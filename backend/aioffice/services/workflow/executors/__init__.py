"""Node executors.

One executor per node kind, looked up through ``ExecutorRegistry``.
"""

from aioffice.services.workflow.executors.base import NodeExecutor, NodeOutcome
from aioffice.services.workflow.executors.conditional import ConditionalExecutor
from aioffice.services.workflow.executors.delay import DelayExecutor
from aioffice.services.workflow.executors.email_message import EmailExecutor
from aioffice.services.workflow.executors.http_request import HttpRequestExecutor
from aioffice.services.workflow.executors.loop import LoopExecutor
from aioffice.services.workflow.executors.passthrough import (
    StructuralExecutor,
    UnknownKindExecutor,
)
from aioffice.services.workflow.executors.registry import (
    ExecutorRegistry,
    get_registry,
    reset_registry,
)
from aioffice.services.workflow.executors.social import SocialPostExecutor
from aioffice.services.workflow.executors.task import TaskExecutor
from aioffice.services.workflow.executors.transform import TransformExecutor
from aioffice.services.workflow.executors.webhook import WebhookExecutor

__all__ = [
    "ConditionalExecutor",
    "DelayExecutor",
    "EmailExecutor",
    "ExecutorRegistry",
    "HttpRequestExecutor",
    "LoopExecutor",
    "NodeExecutor",
    "NodeOutcome",
    "SocialPostExecutor",
    "StructuralExecutor",
    "TaskExecutor",
    "TransformExecutor",
    "UnknownKindExecutor",
    "WebhookExecutor",
    "get_registry",
    "reset_registry",
]

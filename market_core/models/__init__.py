from .core import (
    Advertisement,
    Agency,
    Application,
    AuditLog,
    Client,
    Employee,
    TimeStampedModel,
)
from .workflow_event import WorkflowEvent

__all__ = [
    "Advertisement",
    "Agency",
    "Application",
    "AuditLog",
    "Client",
    "Employee",
    "TimeStampedModel",
    "WorkflowEvent",
]

"""Workflow State Engine.

Define finite-state workflows, validate them, and run instances through
guarded transitions with an append-only history.
"""

__version__ = "0.1.0"

from workflow_engine.engine.config import EngineSettings
from workflow_engine.engine.workflow import WorkflowDefinition, WorkflowInstance, WorkflowService

__all__ = [
    "__version__",
    "EngineSettings",
    "WorkflowDefinition",
    "WorkflowInstance",
    "WorkflowService",
]

"""Workflow definitions, validation and the transition engine.

- `models`: frozen definition / instance types
- `validation`: structural checks run before a definition is stored
- `transitions`: instance creation and guarded action execution
- `store`: the storage protocol and its backends
- `service`: the operations a calling layer uses
"""

from .clock import Clock, FixedClock, SystemClock
from .models import Action, HistoryEntry, State, WorkflowDefinition, WorkflowInstance
from .results import EngineError, Err, ErrorCategory, ErrorKind, Ok, Result
from .service import WorkflowService
from .store import InMemoryWorkflowStore, JsonFileWorkflowStore, WorkflowStore, build_store
from .transitions import TransitionEngine
from .validation import DefinitionValidator

__all__ = [
    "Action",
    "Clock",
    "DefinitionValidator",
    "EngineError",
    "Err",
    "ErrorCategory",
    "ErrorKind",
    "FixedClock",
    "HistoryEntry",
    "InMemoryWorkflowStore",
    "JsonFileWorkflowStore",
    "Ok",
    "Result",
    "State",
    "SystemClock",
    "TransitionEngine",
    "WorkflowDefinition",
    "WorkflowInstance",
    "WorkflowService",
    "WorkflowStore",
    "build_store",
]

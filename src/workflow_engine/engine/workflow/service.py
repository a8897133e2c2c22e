"""The logical operations exposed to a calling layer (CLI, HTTP).

Thin composition of `DefinitionValidator`, `TransitionEngine` and a
`WorkflowStore`. Transport concerns stay in the callers.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from .clock import Clock
from .models import WorkflowDefinition, WorkflowInstance
from .results import Ok, Result
from .store import InMemoryWorkflowStore, WorkflowStore
from .transitions import TransitionEngine
from .validation import DefinitionValidator

logger = logging.getLogger(__name__)


class WorkflowService:
    def __init__(
        self,
        store: WorkflowStore | None = None,
        *,
        clock: Clock | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self.store: WorkflowStore = store if store is not None else InMemoryWorkflowStore()
        self.validator = DefinitionValidator()
        self.engine = TransitionEngine(self.store, clock=clock, id_factory=id_factory)

    def submit_definition(self, definition: WorkflowDefinition) -> Result[WorkflowDefinition]:
        """Validate `definition` and, if accepted, store it (replacing any same-id definition)."""

        result = self.validator.validate(definition)
        if isinstance(result, Ok):
            self.store.put_definition(definition)
            logger.info(
                "Workflow definition stored",
                extra={
                    "definition_id": definition.id,
                    "states": len(definition.states),
                    "actions": len(definition.actions),
                },
            )
        return result

    def get_definition(self, definition_id: str) -> WorkflowDefinition | None:
        return self.store.get_definition(definition_id)

    def list_definitions(self) -> list[WorkflowDefinition]:
        return self.store.list_definitions()

    def start_instance(self, definition_id: str) -> Result[WorkflowInstance]:
        return self.engine.start(definition_id)

    def get_instance(self, instance_id: str) -> WorkflowInstance | None:
        return self.store.get_instance(instance_id)

    def list_instances(self) -> list[WorkflowInstance]:
        return self.store.list_instances()

    def execute_action(self, instance_id: str, action_id: str) -> Result[WorkflowInstance]:
        """Fire `action_id` on the instance; the `Ok` value is the updated instance."""

        return self.engine.execute(instance_id, action_id)

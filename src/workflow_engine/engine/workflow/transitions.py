"""Instance creation and guarded action execution.

`TransitionEngine.execute` evaluates its preconditions in a fixed order and
either commits a single transition or leaves the store untouched. Calls on the
same instance are serialised by the store's per-instance lock; calls on
different instances run in parallel.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable

from .clock import Clock, SystemClock
from .models import HistoryEntry, WorkflowInstance
from .results import ErrorKind, Ok, Result, err
from .store import WorkflowStore

logger = logging.getLogger(__name__)


def _new_instance_id() -> str:
    return str(uuid.uuid4())


class TransitionEngine:
    def __init__(
        self,
        store: WorkflowStore,
        *,
        clock: Clock | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self._store = store
        self._clock = clock or SystemClock()
        self._id_factory = id_factory or _new_instance_id

    def start(self, definition_id: str) -> Result[WorkflowInstance]:
        definition = self._store.get_definition(definition_id)
        if definition is None:
            return err(ErrorKind.DEFINITION_NOT_FOUND, f"Definition {definition_id!r} not found.")

        initial = definition.initial_state()
        if initial is None or not initial.enabled:
            return err(
                ErrorKind.NO_ENABLED_INITIAL_STATE,
                f"Definition {definition_id!r} has no enabled initial state.",
            )

        instance = WorkflowInstance(
            id=self._id_factory(),
            definition_id=definition.id,
            current_state_id=initial.id,
        )
        self._store.put_instance(instance)
        logger.info(
            "Workflow instance started",
            extra={
                "instance_id": instance.id,
                "definition_id": definition.id,
                "state_id": initial.id,
            },
        )
        return Ok(instance)

    def execute(self, instance_id: str, action_id: str) -> Result[WorkflowInstance]:
        result: Result[WorkflowInstance]
        # Instances are never deleted, so only ids that exist ever get a lock.
        if self._store.get_instance(instance_id) is None:
            result = err(ErrorKind.INSTANCE_NOT_FOUND, f"Instance {instance_id!r} not found.")
        else:
            with self._store.instance_lock(instance_id):
                result = self._execute_locked(instance_id, action_id)

        if isinstance(result, Ok):
            entry = result.value.history[-1]
            logger.info(
                "Workflow action executed",
                extra={
                    "instance_id": instance_id,
                    "action_id": action_id,
                    "from_state_id": entry.from_state_id,
                    "to_state_id": entry.to_state_id,
                },
            )
        else:
            logger.info(
                "Workflow action rejected",
                extra={
                    "instance_id": instance_id,
                    "action_id": action_id,
                    "kind": result.error.kind.value,
                },
            )
        return result

    def _execute_locked(self, instance_id: str, action_id: str) -> Result[WorkflowInstance]:
        instance = self._store.get_instance(instance_id)
        if instance is None:
            return err(ErrorKind.INSTANCE_NOT_FOUND, f"Instance {instance_id!r} not found.")

        definition = self._store.get_definition(instance.definition_id)
        if definition is None:
            return err(
                ErrorKind.DEFINITION_NOT_FOUND,
                f"Definition {instance.definition_id!r} not found.",
            )

        # The definition may have been replaced since the instance started.
        current = definition.find_state(instance.current_state_id)
        if current is None:
            return err(
                ErrorKind.CURRENT_STATE_NOT_FOUND,
                f"Current state {instance.current_state_id!r} not found in definition.",
            )
        if current.is_final:
            return err(
                ErrorKind.TERMINAL_STATE,
                f"Cannot execute actions on final state {current.id!r}.",
            )

        action = definition.find_action(action_id)
        if action is None:
            return err(ErrorKind.ACTION_NOT_FOUND, f"Action {action_id!r} not found in definition.")
        if not action.enabled:
            return err(ErrorKind.ACTION_DISABLED, f"Action {action_id!r} is disabled.")
        if current.id not in action.from_states:
            return err(
                ErrorKind.ACTION_NOT_VALID_FROM_CURRENT_STATE,
                f"Action {action_id!r} is not valid from state {current.id!r}.",
            )

        target = definition.find_state(action.to_state)
        if target is None or not target.enabled:
            return err(
                ErrorKind.TARGET_STATE_UNKNOWN_OR_DISABLED,
                f"Target state {action.to_state!r} is unknown or disabled.",
            )

        timestamp = self._clock.now()
        if instance.history and timestamp < instance.history[-1].timestamp:
            timestamp = instance.history[-1].timestamp

        entry = HistoryEntry(
            action_id=action.id,
            timestamp=timestamp,
            from_state_id=current.id,
            to_state_id=target.id,
        )
        updated = instance.advance(entry)
        self._store.put_instance(updated)
        return Ok(updated)

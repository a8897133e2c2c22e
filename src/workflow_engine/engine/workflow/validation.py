"""Structural validation of workflow definitions.

A definition is only stored once it passes every check here. Checks run in a
fixed order and the first failure is reported.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Callable, Iterable

from .models import WorkflowDefinition
from .results import Err, ErrorKind, Ok, Result, err

logger = logging.getLogger(__name__)


def _duplicates(ids: Iterable[str]) -> list[str]:
    return [value for value, count in Counter(ids).items() if count > 1]


def _is_blank(value: str) -> bool:
    return not value.strip()


class DefinitionValidator:
    """Accepts or rejects a candidate definition. Has no side effects."""

    def validate(self, definition: WorkflowDefinition) -> Result[WorkflowDefinition]:
        for check in self._checks():
            failure = check(definition)
            if failure is not None:
                logger.info(
                    "Workflow definition rejected",
                    extra={
                        "definition_id": definition.id,
                        "kind": failure.error.kind.value,
                        "reason": failure.error.message,
                    },
                )
                return failure
        return Ok(definition)

    def _checks(self) -> list[Callable[[WorkflowDefinition], Err | None]]:
        return [
            _check_unique_state_ids,
            _check_unique_action_ids,
            _check_single_initial_state,
            _check_state_ids_present,
            _check_action_ids_present,
            _check_to_states_resolve,
            _check_from_states_resolve,
        ]


def _check_unique_state_ids(definition: WorkflowDefinition) -> Err | None:
    dupes = _duplicates(s.id for s in definition.states)
    if dupes:
        return err(ErrorKind.DUPLICATE_STATE_ID, f"Duplicate state IDs: {', '.join(dupes)}.")
    return None


def _check_unique_action_ids(definition: WorkflowDefinition) -> Err | None:
    dupes = _duplicates(a.id for a in definition.actions)
    if dupes:
        return err(ErrorKind.DUPLICATE_ACTION_ID, f"Duplicate action IDs: {', '.join(dupes)}.")
    return None


def _check_single_initial_state(definition: WorkflowDefinition) -> Err | None:
    count = sum(1 for s in definition.states if s.is_initial)
    if count != 1:
        return err(
            ErrorKind.INVALID_INITIAL_STATE_COUNT,
            f"There must be exactly one initial state (found {count}).",
        )
    return None


def _check_state_ids_present(definition: WorkflowDefinition) -> Err | None:
    if any(_is_blank(s.id) for s in definition.states):
        return err(ErrorKind.EMPTY_STATE_ID, "State IDs cannot be empty.")
    return None


def _check_action_ids_present(definition: WorkflowDefinition) -> Err | None:
    if any(_is_blank(a.id) for a in definition.actions):
        return err(ErrorKind.EMPTY_ACTION_ID, "Action IDs cannot be empty.")
    return None


def _check_to_states_resolve(definition: WorkflowDefinition) -> Err | None:
    known = {s.id for s in definition.states}
    for action in definition.actions:
        if action.to_state not in known:
            return err(
                ErrorKind.UNKNOWN_TO_STATE,
                f"Action {action.id!r} points to unknown toState {action.to_state!r}.",
            )
    return None


def _check_from_states_resolve(definition: WorkflowDefinition) -> Err | None:
    known = {s.id for s in definition.states}
    for action in definition.actions:
        # An empty from_states is legal: the action simply never fires.
        unknown = [s for s in action.from_states if s not in known]
        if unknown:
            return err(
                ErrorKind.UNKNOWN_FROM_STATE,
                f"Action {action.id!r} has unknown fromState {unknown[0]!r}.",
            )
    return None

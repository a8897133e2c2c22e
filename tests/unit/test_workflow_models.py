"""Unit tests for the workflow data model."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from workflow_engine.engine.workflow.models import (
    HistoryEntry,
    State,
    WorkflowDefinition,
    WorkflowInstance,
)


def test_definition_accepts_camel_case_json_with_defaults() -> None:
    definition = WorkflowDefinition.model_validate(
        {
            "id": "wf1",
            "name": "Leave Request",
            "states": [
                {"id": "s1", "name": "Start", "isInitial": True},
                {"id": "s2", "name": "End", "isFinal": True, "description": "done"},
            ],
            "actions": [{"id": "a1", "name": "Finish", "fromStates": ["s1"], "toState": "s2"}],
        }
    )

    start, end = definition.states
    assert start.is_initial is True
    assert start.enabled is True
    assert end.is_final is True
    assert end.description == "done"
    assert definition.actions[0].from_states == ("s1",)
    assert definition.actions[0].enabled is True


def test_dump_uses_camel_case_aliases() -> None:
    dumped = State(id="s1", is_initial=True).model_dump(by_alias=True)
    assert dumped["isInitial"] is True
    assert dumped["isFinal"] is False
    assert "is_initial" not in dumped


def test_blank_ids_are_not_rejected_at_parse_time() -> None:
    # Reported by the validator with a reason instead.
    definition = WorkflowDefinition.model_validate({"id": "wf", "states": [{"id": "  "}]})
    assert definition.states[0].id == "  "


def test_models_are_frozen() -> None:
    state = State(id="s1")
    with pytest.raises(ValidationError):
        state.enabled = False  # type: ignore[misc]


def test_lookups(approval_definition: WorkflowDefinition) -> None:
    assert approval_definition.find_state("s2") is not None
    assert approval_definition.find_state("missing") is None
    assert approval_definition.find_action("a2") is not None
    assert approval_definition.find_action("missing") is None
    initial = approval_definition.initial_state()
    assert initial is not None and initial.id == "s1"


def test_advance_returns_new_instance_and_leaves_original_untouched() -> None:
    instance = WorkflowInstance(id="i1", definition_id="wf1", current_state_id="s1")
    entry = HistoryEntry(
        action_id="a1",
        timestamp=datetime(2025, 1, 1, tzinfo=UTC),
        from_state_id="s1",
        to_state_id="s2",
    )

    moved = instance.advance(entry)

    assert moved.current_state_id == "s2"
    assert moved.history == (entry,)
    assert instance.current_state_id == "s1"
    assert instance.history == ()

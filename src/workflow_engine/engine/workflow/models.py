"""Workflow definitions and live instances.

All models are frozen. Stored objects are replaced wholesale, never edited in
place, so a reader holding a reference always sees a consistent snapshot.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _Model(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class State(_Model):
    id: str
    name: str = ""
    is_initial: bool = False
    is_final: bool = False
    # A disabled state can never be entered.
    enabled: bool = True
    description: str | None = None


class Action(_Model):
    """A transition rule: fires from any of `from_states` and lands on `to_state`."""

    id: str
    name: str = ""
    enabled: bool = True
    from_states: tuple[str, ...] = Field(default_factory=tuple)
    to_state: str = ""


class WorkflowDefinition(_Model):
    id: str
    name: str = ""
    states: tuple[State, ...] = Field(default_factory=tuple)
    actions: tuple[Action, ...] = Field(default_factory=tuple)

    def find_state(self, state_id: str) -> State | None:
        for state in self.states:
            if state.id == state_id:
                return state
        return None

    def find_action(self, action_id: str) -> Action | None:
        for action in self.actions:
            if action.id == action_id:
                return action
        return None

    def initial_state(self) -> State | None:
        """Return the first state flagged initial.

        Accepted definitions have exactly one.
        """

        for state in self.states:
            if state.is_initial:
                return state
        return None


class HistoryEntry(_Model):
    action_id: str
    timestamp: datetime
    from_state_id: str
    to_state_id: str


class WorkflowInstance(_Model):
    id: str
    definition_id: str
    current_state_id: str
    history: tuple[HistoryEntry, ...] = Field(default_factory=tuple)

    def advance(self, entry: HistoryEntry) -> WorkflowInstance:
        """Return a copy moved to `entry.to_state_id` with `entry` appended."""

        return self.model_copy(
            update={
                "current_state_id": entry.to_state_id,
                "history": (*self.history, entry),
            }
        )

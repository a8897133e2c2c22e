"""Test configuration and fixtures."""

from __future__ import annotations

import itertools
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import pytest

from workflow_engine.engine.workflow.clock import FixedClock
from workflow_engine.engine.workflow.models import Action, State, WorkflowDefinition
from workflow_engine.engine.workflow.service import WorkflowService
from workflow_engine.engine.workflow.store import InMemoryWorkflowStore


@pytest.fixture
def clock() -> FixedClock:
    """A clock that ticks one second per read."""
    return FixedClock(current=datetime(2025, 1, 1, tzinfo=UTC), step=timedelta(seconds=1))


@pytest.fixture
def id_factory() -> Callable[[], str]:
    """Sequential instance ids: inst-1, inst-2, ..."""
    counter = itertools.count(1)
    return lambda: f"inst-{next(counter)}"


@pytest.fixture
def store() -> InMemoryWorkflowStore:
    return InMemoryWorkflowStore()


@pytest.fixture
def service(
    store: InMemoryWorkflowStore, clock: FixedClock, id_factory: Callable[[], str]
) -> WorkflowService:
    return WorkflowService(store, clock=clock, id_factory=id_factory)


@pytest.fixture
def approval_definition() -> WorkflowDefinition:
    """s1 (initial) -a1-> s2 -a2-> s3 (final)."""
    return WorkflowDefinition(
        id="wf1",
        name="Approval",
        states=(
            State(id="s1", name="Draft", is_initial=True),
            State(id="s2", name="Review"),
            State(id="s3", name="Done", is_final=True),
        ),
        actions=(
            Action(id="a1", name="Submit", from_states=("s1",), to_state="s2"),
            Action(id="a2", name="Approve", from_states=("s2",), to_state="s3"),
        ),
    )

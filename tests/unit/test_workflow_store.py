"""Unit tests for the workflow store backends."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path

import pytest

from workflow_engine.engine.workflow.models import (
    HistoryEntry,
    WorkflowDefinition,
    WorkflowInstance,
)
from workflow_engine.engine.workflow.store import (
    InMemoryWorkflowStore,
    JsonFileWorkflowStore,
    build_store,
)


def _instance() -> WorkflowInstance:
    return WorkflowInstance(
        id="i1",
        definition_id="wf1",
        current_state_id="s2",
        history=(
            HistoryEntry(
                action_id="a1",
                timestamp=datetime(2025, 1, 1, 12, 30, tzinfo=UTC),
                from_state_id="s1",
                to_state_id="s2",
            ),
        ),
    )


def test_in_memory_store_put_replaces_by_id(approval_definition: WorkflowDefinition) -> None:
    store = InMemoryWorkflowStore()
    assert store.get_definition("wf1") is None

    store.put_definition(approval_definition)
    renamed = approval_definition.model_copy(update={"name": "Renamed"})
    store.put_definition(renamed)

    assert store.get_definition("wf1") == renamed
    assert store.list_definitions() == [renamed]


def test_json_store_roundtrip(tmp_path: Path, approval_definition: WorkflowDefinition) -> None:
    path = tmp_path / "state" / "store.json"
    store = JsonFileWorkflowStore(path)
    assert store.list_definitions() == []
    assert store.list_instances() == []

    store.put_definition(approval_definition)
    store.put_instance(_instance())

    reopened = JsonFileWorkflowStore(path)
    assert reopened.get_definition("wf1") == approval_definition
    assert reopened.get_instance("i1") == _instance()
    assert reopened.get_instance("missing") is None


def test_json_store_writes_camel_case(
    tmp_path: Path, approval_definition: WorkflowDefinition
) -> None:
    path = tmp_path / "store.json"
    store = JsonFileWorkflowStore(path)
    store.put_definition(approval_definition)
    store.put_instance(_instance())

    raw = json.loads(path.read_text(encoding="utf-8"))
    assert raw["definitions"][0]["states"][0]["isInitial"] is True
    assert raw["instances"][0]["currentStateId"] == "s2"
    assert raw["instances"][0]["history"][0]["fromStateId"] == "s1"
    assert not (tmp_path / "store.json.tmp").exists()


@pytest.mark.parametrize("content", ["{not json", "[1, 2, 3]"])
def test_json_store_treats_unreadable_file_as_empty(tmp_path: Path, content: str) -> None:
    path = tmp_path / "store.json"
    path.write_text(content, encoding="utf-8")

    store = JsonFileWorkflowStore(path)

    assert store.list_definitions() == []
    assert store.list_instances() == []


def test_build_store_selects_backend(tmp_path: Path) -> None:
    assert isinstance(build_store("memory", tmp_path / "x.json"), InMemoryWorkflowStore)
    json_store = build_store("json", tmp_path / "x.json")
    assert isinstance(json_store, JsonFileWorkflowStore)
    assert json_store.path == tmp_path / "x.json"
    with pytest.raises(ValueError):
        build_store("redis", tmp_path / "x.json")

from __future__ import annotations

from collections.abc import Callable

import pytest
from fastapi.testclient import TestClient

from workflow_engine.engine.workflow.clock import FixedClock
from workflow_engine.engine.workflow.service import WorkflowService
from workflow_engine.server.app import create_app

DEFINITION = {
    "id": "wf1",
    "name": "Leave Request",
    "states": [
        {"id": "s1", "name": "Requested", "isInitial": True},
        {"id": "s2", "name": "Approved"},
        {"id": "s3", "name": "Closed", "isFinal": True},
    ],
    "actions": [
        {"id": "a1", "name": "Approve", "fromStates": ["s1"], "toState": "s2"},
        {"id": "a2", "name": "Close", "fromStates": ["s2"], "toState": "s3"},
    ],
}


@pytest.fixture
def client(
    monkeypatch: pytest.MonkeyPatch, clock: FixedClock, id_factory: Callable[[], str]
) -> TestClient:
    monkeypatch.delenv("WORKFLOW_CORS_ORIGINS", raising=False)
    service = WorkflowService(clock=clock, id_factory=id_factory)
    return TestClient(create_app(service=service))


def test_health(client: TestClient) -> None:
    body = client.get("/health").json()
    assert body["status"] == "ok"
    assert "version" in body


def test_submit_and_fetch_definition(client: TestClient) -> None:
    resp = client.post("/workflows", json=DEFINITION)
    assert resp.status_code == 200
    assert resp.json()["states"][0]["isInitial"] is True

    fetched = client.get("/workflows/wf1")
    assert fetched.status_code == 200
    assert fetched.json() == resp.json()

    listed = client.get("/workflows").json()
    assert [d["id"] for d in listed] == ["wf1"]


def test_invalid_definition_is_rejected_with_reason(client: TestClient) -> None:
    bad = {**DEFINITION, "states": [{**s, "isInitial": False} for s in DEFINITION["states"]]}

    resp = client.post("/workflows", json=bad)

    assert resp.status_code == 400
    detail = resp.json()["detail"]
    assert detail["kind"] == "invalid_initial_state_count"
    assert detail["category"] == "validation"
    assert detail["message"]
    assert client.get("/workflows/wf1").status_code == 404


def test_unknown_ids_are_404(client: TestClient) -> None:
    assert client.get("/workflows/nope").status_code == 404
    assert client.get("/instances/nope").status_code == 404
    resp = client.post("/instances/nope/actions/a1")
    assert resp.status_code == 404
    assert resp.json()["detail"]["kind"] == "instance_not_found"


def test_instance_lifecycle(client: TestClient) -> None:
    client.post("/workflows", json=DEFINITION)

    started = client.post("/instances", params={"definitionId": "wf1"})
    assert started.status_code == 200
    instance = started.json()
    assert instance == {
        "id": "inst-1",
        "definitionId": "wf1",
        "currentStateId": "s1",
        "history": [],
    }

    moved = client.post("/instances/inst-1/actions/a1")
    assert moved.status_code == 200
    assert moved.json()["currentStateId"] == "s2"
    entry = moved.json()["history"][0]
    assert entry["actionId"] == "a1"
    assert entry["fromStateId"] == "s1"
    assert entry["toStateId"] == "s2"

    wrong = client.post("/instances/inst-1/actions/a1")
    assert wrong.status_code == 409
    assert wrong.json()["detail"]["kind"] == "action_not_valid_from_current_state"

    assert client.post("/instances/inst-1/actions/a2").status_code == 200
    terminal = client.post("/instances/inst-1/actions/a2")
    assert terminal.status_code == 409
    assert terminal.json()["detail"]["kind"] == "terminal_state"

    fetched = client.get("/instances/inst-1").json()
    assert fetched["currentStateId"] == "s3"
    assert [h["actionId"] for h in fetched["history"]] == ["a1", "a2"]
    assert [i["id"] for i in client.get("/instances").json()] == ["inst-1"]


def test_start_accepts_json_body(client: TestClient) -> None:
    client.post("/workflows", json=DEFINITION)

    resp = client.post("/instances", json={"definitionId": "wf1"})

    assert resp.status_code == 200
    assert resp.json()["currentStateId"] == "s1"


def test_start_requires_definition_id(client: TestClient) -> None:
    assert client.post("/instances").status_code == 400


def test_start_unknown_definition(client: TestClient) -> None:
    resp = client.post("/instances", params={"definitionId": "missing"})
    assert resp.status_code == 404
    assert resp.json()["detail"]["kind"] == "definition_not_found"

"""Storage for workflow definitions and instances.

The engine talks to the `WorkflowStore` protocol only. Both backends guard
their state with a lock and store whole frozen models, so a put is atomic with
respect to concurrent readers. Each store also owns the per-instance locks that
serialise action execution, so every engine over one store shares them.
"""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Any, Protocol

from .models import WorkflowDefinition, WorkflowInstance

logger = logging.getLogger(__name__)


class WorkflowStore(Protocol):
    def put_definition(self, definition: WorkflowDefinition) -> None:
        """Insert or overwrite by `definition.id` (last write wins)."""

    def get_definition(self, definition_id: str) -> WorkflowDefinition | None: ...

    def list_definitions(self) -> list[WorkflowDefinition]: ...

    def put_instance(self, instance: WorkflowInstance) -> None: ...

    def get_instance(self, instance_id: str) -> WorkflowInstance | None: ...

    def list_instances(self) -> list[WorkflowInstance]: ...

    def instance_lock(self, instance_id: str) -> threading.Lock:
        """Lock serialising transitions of one instance.

        Only call this for an instance known to exist.
        """


class InstanceLocks:
    """Lazily created per-instance locks, one per instance id."""

    def __init__(self) -> None:
        self._registry_lock = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}

    def __len__(self) -> int:
        with self._registry_lock:
            return len(self._locks)

    def get(self, instance_id: str) -> threading.Lock:
        with self._registry_lock:
            lock = self._locks.get(instance_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[instance_id] = lock
            return lock


class InMemoryWorkflowStore:
    """Keep definitions and instances in process memory.

    Useful for tests and single-process deployments. Nothing survives a restart.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._definitions: dict[str, WorkflowDefinition] = {}
        self._instances: dict[str, WorkflowInstance] = {}
        self.instance_locks = InstanceLocks()

    def instance_lock(self, instance_id: str) -> threading.Lock:
        return self.instance_locks.get(instance_id)

    def put_definition(self, definition: WorkflowDefinition) -> None:
        with self._lock:
            self._definitions[definition.id] = definition

    def get_definition(self, definition_id: str) -> WorkflowDefinition | None:
        with self._lock:
            return self._definitions.get(definition_id)

    def list_definitions(self) -> list[WorkflowDefinition]:
        with self._lock:
            return list(self._definitions.values())

    def put_instance(self, instance: WorkflowInstance) -> None:
        with self._lock:
            self._instances[instance.id] = instance

    def get_instance(self, instance_id: str) -> WorkflowInstance | None:
        with self._lock:
            return self._instances.get(instance_id)

    def list_instances(self) -> list[WorkflowInstance]:
        with self._lock:
            return list(self._instances.values())


class JsonFileWorkflowStore:
    """Persist definitions and instances to a single JSON file.

    The file is re-read on every access so several CLI invocations can share it.
    A missing file is an empty store.
    """

    def __init__(self, path: Path) -> None:
        self._path = path
        self._lock = threading.RLock()
        self.instance_locks = InstanceLocks()

    @property
    def path(self) -> Path:
        return self._path

    def instance_lock(self, instance_id: str) -> threading.Lock:
        return self.instance_locks.get(instance_id)

    def _load_unlocked(self) -> tuple[dict[str, WorkflowDefinition], dict[str, WorkflowInstance]]:
        if not self._path.exists():
            return {}, {}
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            logger.warning(
                "Workflow store file is not valid JSON; treating as empty",
                extra={"path": str(self._path)},
            )
            return {}, {}
        if not isinstance(raw, dict):
            logger.warning(
                "Workflow store file has unexpected shape; treating as empty",
                extra={"path": str(self._path)},
            )
            return {}, {}

        definitions: dict[str, WorkflowDefinition] = {}
        for item in _as_list(raw.get("definitions")):
            definition = WorkflowDefinition.model_validate(item)
            definitions[definition.id] = definition
        instances: dict[str, WorkflowInstance] = {}
        for item in _as_list(raw.get("instances")):
            instance = WorkflowInstance.model_validate(item)
            instances[instance.id] = instance
        return definitions, instances

    def _save_unlocked(
        self,
        definitions: dict[str, WorkflowDefinition],
        instances: dict[str, WorkflowInstance],
    ) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        payload = {
            "definitions": [d.model_dump(mode="json", by_alias=True) for d in definitions.values()],
            "instances": [i.model_dump(mode="json", by_alias=True) for i in instances.values()],
        }
        # Readers never see a half-written file.
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp.write_text(json.dumps(payload, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
        tmp.replace(self._path)

    def put_definition(self, definition: WorkflowDefinition) -> None:
        with self._lock:
            definitions, instances = self._load_unlocked()
            definitions[definition.id] = definition
            self._save_unlocked(definitions, instances)

    def get_definition(self, definition_id: str) -> WorkflowDefinition | None:
        with self._lock:
            definitions, _ = self._load_unlocked()
            return definitions.get(definition_id)

    def list_definitions(self) -> list[WorkflowDefinition]:
        with self._lock:
            definitions, _ = self._load_unlocked()
            return list(definitions.values())

    def put_instance(self, instance: WorkflowInstance) -> None:
        with self._lock:
            definitions, instances = self._load_unlocked()
            instances[instance.id] = instance
            self._save_unlocked(definitions, instances)

    def get_instance(self, instance_id: str) -> WorkflowInstance | None:
        with self._lock:
            _, instances = self._load_unlocked()
            return instances.get(instance_id)

    def list_instances(self) -> list[WorkflowInstance]:
        with self._lock:
            _, instances = self._load_unlocked()
            return list(instances.values())


def _as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def build_store(backend: str, path: Path) -> WorkflowStore:
    if backend == "json":
        return JsonFileWorkflowStore(path)
    if backend == "memory":
        return InMemoryWorkflowStore()
    raise ValueError(f"Unknown workflow store backend: {backend!r}")

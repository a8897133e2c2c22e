#!/usr/bin/env python3
"""Programmatic usage example.

Submits a workflow definition from a JSON file, starts an instance and fires
the given actions in order, printing where the instance ends up.

    python examples/basic_usage.py --file leave.json --action approve --action close
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Sequence

from workflow_engine.engine.config import EngineSettings
from workflow_engine.engine.logging import configure_logging
from workflow_engine.engine.workflow import Err, WorkflowDefinition, WorkflowService


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run a workflow instance (programmatic example).")
    parser.add_argument("--file", type=Path, required=True, help="Workflow definition JSON file")
    parser.add_argument(
        "--action",
        dest="actions",
        action="append",
        default=[],
        help="Action id to execute; repeat for several",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    settings = EngineSettings()
    configure_logging(settings.log_level)

    service = WorkflowService(settings.build_store())
    definition = WorkflowDefinition.model_validate_json(args.file.read_text(encoding="utf-8"))

    submitted = service.submit_definition(definition)
    if isinstance(submitted, Err):
        print(f"Definition rejected: {submitted.error}")
        return 3

    started = service.start_instance(definition.id)
    if isinstance(started, Err):
        print(f"Could not start instance: {started.error}")
        return 3
    instance = started.value
    print(f"Started instance {instance.id} at {instance.current_state_id}")

    for action_id in args.actions:
        result = service.execute_action(instance.id, action_id)
        if isinstance(result, Err):
            print(f"{action_id}: rejected ({result.error.kind.value}) {result.error}")
            return 3
        instance = result.value
        print(f"{action_id}: now at {instance.current_state_id}")

    print(f"History: {[h.action_id for h in instance.history]}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

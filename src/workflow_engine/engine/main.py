"""CLI entrypoint for the workflow engine.

Every command works against the configured store. With the `json` backend
(`WORKFLOW_STORE_BACKEND=json`) state carries over between invocations.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

from pydantic import BaseModel, TypeAdapter, ValidationError

from workflow_engine import __version__
from workflow_engine.engine.config import EngineSettings
from workflow_engine.engine.logging import configure_logging
from workflow_engine.engine.workflow.models import WorkflowDefinition, WorkflowInstance
from workflow_engine.engine.workflow.results import Err, ErrorCategory
from workflow_engine.engine.workflow.service import WorkflowService
from workflow_engine.engine.workflow.validation import DefinitionValidator

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_REJECTED = 3
EXIT_NOT_FOUND = 4

_DEFINITION_LIST = TypeAdapter(list[WorkflowDefinition])
_INSTANCE_LIST = TypeAdapter(list[WorkflowInstance])


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="workflow-engine",
        description="Define finite-state workflows and run instances through them",
    )
    parser.add_argument(
        "--version", action="version", version=f"workflow-state-engine {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    validate = subparsers.add_parser(
        "validate", help="Check a workflow definition file without storing it"
    )
    validate.add_argument("--file", type=Path, required=True, help="Definition JSON file")

    submit = subparsers.add_parser(
        "submit", help="Validate a workflow definition file and store it (replaces same id)"
    )
    submit.add_argument("--file", type=Path, required=True, help="Definition JSON file")

    subparsers.add_parser("list-definitions", help="Print all stored definitions")

    show_definition = subparsers.add_parser("show-definition", help="Print one definition")
    show_definition.add_argument("--id", dest="definition_id", required=True)

    start = subparsers.add_parser("start", help="Start a new instance of a definition")
    start.add_argument("--definition-id", required=True)

    execute = subparsers.add_parser("execute", help="Execute an action on an instance")
    execute.add_argument("--instance-id", required=True)
    execute.add_argument("--action-id", required=True)

    subparsers.add_parser("list-instances", help="Print all instances")

    show_instance = subparsers.add_parser(
        "show-instance", help="Print one instance with its history"
    )
    show_instance.add_argument("--id", dest="instance_id", required=True)

    serve = subparsers.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default=None, help="Bind address (default from settings)")
    serve.add_argument("--port", type=int, default=None, help="Port (default from settings)")

    return parser


def _print_model(model: BaseModel) -> None:
    print(model.model_dump_json(by_alias=True, indent=2))


def _print_list(adapter: TypeAdapter[Any], items: list[Any]) -> None:
    print(adapter.dump_json(items, by_alias=True, indent=2).decode("utf-8"))


class DefinitionFileError(Exception):
    pass


def _load_definition(path: Path) -> WorkflowDefinition:
    try:
        return WorkflowDefinition.model_validate_json(path.read_text(encoding="utf-8"))
    except (OSError, ValidationError) as e:
        raise DefinitionFileError(f"{path}: {e}") from e


def _report_rejection(failure: Err) -> int:
    error = failure.error
    print(f"Rejected ({error.kind.value}): {error.message}", file=sys.stderr)
    if error.category is ErrorCategory.NOT_FOUND:
        return EXIT_NOT_FOUND
    return EXIT_REJECTED


def _serve(args: argparse.Namespace, service: WorkflowService) -> int:
    import uvicorn

    from workflow_engine.server.app import create_app
    from workflow_engine.server.config import ServerSettings

    server_settings = ServerSettings()
    host = args.host or server_settings.host
    port = args.port or server_settings.port
    logger.info("Starting workflow API", extra={"host": host, "port": port})
    uvicorn.run(create_app(service=service), host=host, port=port, log_config=None)
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = EngineSettings()
    except ValidationError as e:
        # Logging isn't configured yet.
        print("Configuration error (check your .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return EXIT_USAGE

    configure_logging(settings.log_level)

    try:
        if args.command == "validate":
            definition = _load_definition(args.file)
            result = DefinitionValidator().validate(definition)
            if isinstance(result, Err):
                return _report_rejection(result)
            print(f"Definition {definition.id!r} is valid")
            return EXIT_OK

        service = WorkflowService(settings.build_store())

        if args.command == "submit":
            result = service.submit_definition(_load_definition(args.file))
            if isinstance(result, Err):
                return _report_rejection(result)
            _print_model(result.value)
            return EXIT_OK

        if args.command == "list-definitions":
            _print_list(_DEFINITION_LIST, service.list_definitions())
            return EXIT_OK

        if args.command == "show-definition":
            definition = service.get_definition(args.definition_id)
            if definition is None:
                print(f"Definition {args.definition_id!r} not found", file=sys.stderr)
                return EXIT_NOT_FOUND
            _print_model(definition)
            return EXIT_OK

        if args.command == "start":
            started = service.start_instance(args.definition_id)
            if isinstance(started, Err):
                return _report_rejection(started)
            _print_model(started.value)
            return EXIT_OK

        if args.command == "execute":
            executed = service.execute_action(args.instance_id, args.action_id)
            if isinstance(executed, Err):
                return _report_rejection(executed)
            _print_model(executed.value)
            return EXIT_OK

        if args.command == "list-instances":
            _print_list(_INSTANCE_LIST, service.list_instances())
            return EXIT_OK

        if args.command == "show-instance":
            instance = service.get_instance(args.instance_id)
            if instance is None:
                print(f"Instance {args.instance_id!r} not found", file=sys.stderr)
                return EXIT_NOT_FOUND
            _print_model(instance)
            return EXIT_OK

        if args.command == "serve":
            return _serve(args, service)

        logger.error("Unknown command", extra={"command": args.command})
        return EXIT_USAGE

    except DefinitionFileError as e:
        print(f"Invalid definition file {e}", file=sys.stderr)
        return EXIT_USAGE

    except Exception:
        logger.exception("Command failed")
        return EXIT_FAILURE


if __name__ == "__main__":
    raise SystemExit(main())

"""FastAPI app factory.

Endpoints are thin wrappers over `WorkflowService`. Rejections are mapped to
status codes by error category: validation -> 400, not found -> 404,
precondition -> 409.
"""

from __future__ import annotations

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware

from workflow_engine import __version__
from workflow_engine.engine.config import EngineSettings
from workflow_engine.engine.workflow.models import WorkflowDefinition, WorkflowInstance
from workflow_engine.engine.workflow.results import EngineError, Err, ErrorCategory
from workflow_engine.engine.workflow.service import WorkflowService
from workflow_engine.server.config import ServerSettings
from workflow_engine.server.models import ErrorDetail, Health, StartInstanceRequest

_STATUS_BY_CATEGORY: dict[ErrorCategory, int] = {
    ErrorCategory.VALIDATION: 400,
    ErrorCategory.NOT_FOUND: 404,
    ErrorCategory.PRECONDITION: 409,
}


def _rejection(error: EngineError) -> HTTPException:
    return HTTPException(
        status_code=_STATUS_BY_CATEGORY[error.category],
        detail=ErrorDetail.from_error(error).model_dump(),
    )


def create_app(service: WorkflowService | None = None) -> FastAPI:
    settings = ServerSettings()
    if service is None:
        service = WorkflowService(EngineSettings().build_store())

    app = FastAPI(
        title="Workflow State Engine",
        version=__version__,
        description="Define finite-state workflows and execute actions on their instances.",
    )

    app.state.settings = settings
    app.state.service = service

    origins = settings.parsed_cors_origins()
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.get("/health", response_model=Health)
    def health() -> Health:
        return Health(version=__version__)

    # --- Workflow definitions ---

    @app.post("/workflows", response_model=WorkflowDefinition)
    def submit_definition(definition: WorkflowDefinition) -> WorkflowDefinition:
        result = service.submit_definition(definition)
        if isinstance(result, Err):
            raise _rejection(result.error)
        return result.value

    @app.get("/workflows", response_model=list[WorkflowDefinition])
    def list_definitions() -> list[WorkflowDefinition]:
        return service.list_definitions()

    @app.get("/workflows/{definition_id}", response_model=WorkflowDefinition)
    def get_definition(definition_id: str) -> WorkflowDefinition:
        definition = service.get_definition(definition_id)
        if definition is None:
            raise HTTPException(status_code=404, detail="Definition not found")
        return definition

    # --- Workflow instances ---

    @app.post("/instances", response_model=WorkflowInstance)
    def start_instance(
        definition_id: str | None = Query(default=None, alias="definitionId"),
        req: StartInstanceRequest | None = None,
    ) -> WorkflowInstance:
        target = definition_id or (req.definition_id if req is not None else None)
        if not target:
            raise HTTPException(status_code=400, detail="definitionId is required")
        result = service.start_instance(target)
        if isinstance(result, Err):
            raise _rejection(result.error)
        return result.value

    @app.get("/instances", response_model=list[WorkflowInstance])
    def list_instances() -> list[WorkflowInstance]:
        return service.list_instances()

    @app.get("/instances/{instance_id}", response_model=WorkflowInstance)
    def get_instance(instance_id: str) -> WorkflowInstance:
        instance = service.get_instance(instance_id)
        if instance is None:
            raise HTTPException(status_code=404, detail="Instance not found")
        return instance

    @app.post("/instances/{instance_id}/actions/{action_id}", response_model=WorkflowInstance)
    def execute_action(instance_id: str, action_id: str) -> WorkflowInstance:
        result = service.execute_action(instance_id, action_id)
        if isinstance(result, Err):
            raise _rejection(result.error)
        return result.value

    return app

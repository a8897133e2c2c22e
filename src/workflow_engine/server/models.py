"""Pydantic models for the REST server.

Workflow definitions and instances are served as-is from
`workflow_engine.engine.workflow.models`; these cover the rest.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from workflow_engine.engine.workflow.results import EngineError


class StartInstanceRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    definition_id: str = Field(alias="definitionId")


class ErrorDetail(BaseModel):
    kind: str
    category: str
    message: str

    @classmethod
    def from_error(cls, error: EngineError) -> ErrorDetail:
        return cls(kind=error.kind.value, category=error.category.value, message=error.message)


class Health(BaseModel):
    status: str = "ok"
    version: str

"""Configuration for the workflow engine.

Configuration is loaded from:
- environment variables
- and a local `.env` file (if present)
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .workflow.store import WorkflowStore, build_store


class EngineSettings(BaseSettings):
    """Settings for the engine and its store.

    Environment variables:
    - LOG_LEVEL               (optional)
    - WORKFLOW_STORE_BACKEND  (optional, `memory` or `json`)
    - WORKFLOW_STATE_PATH     (optional)

    Notes:
        Tests can point at a different env file via `EngineSettings(_env_file=path)`.
    """

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )

    store_backend: Literal["memory", "json"] = Field(
        default="memory",
        validation_alias="WORKFLOW_STORE_BACKEND",
        description="Where definitions and instances are kept",
    )

    state_path: Path = Field(
        default=Path("workflow_state/store.json"),
        validation_alias="WORKFLOW_STATE_PATH",
        description="JSON file used by the `json` store backend",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
    )

    def build_store(self) -> WorkflowStore:
        return build_store(self.store_backend, self.state_path)

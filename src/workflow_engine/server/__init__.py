"""FastAPI adapter for the workflow engine.

Routing and HTTP status mapping live here; every decision is made by
`workflow_engine.engine.workflow.service.WorkflowService`.
"""

from __future__ import annotations

__all__ = ["create_app"]

from workflow_engine.server.app import create_app

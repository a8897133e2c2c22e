"""Core engine: configuration, logging, CLI and the workflow package."""

from workflow_engine.engine.config import EngineSettings

__all__ = ["EngineSettings"]

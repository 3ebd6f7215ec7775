"""Logging configuration model."""

from __future__ import annotations

from pydantic import BaseModel, Field


class LoggingSettings(BaseModel):
    """Logging configuration.

    Console output goes through Rich; ``file`` (when set) receives JSON lines.
    """

    level: str = Field(default="INFO", description="Logging level")
    file: str | None = Field(default=None, description="Log file path (JSON lines)")
    console_output: bool = Field(default=True, description="Enable Rich console logging")

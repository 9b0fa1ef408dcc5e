"""Custom exceptions raised by conduit."""

from __future__ import annotations

from typing import Any


class ConduitError(RuntimeError):
    """Base error for all pipeline related exceptions."""


class ConfigurationError(ConduitError):
    """Raised when configuration values are invalid or missing."""


class InvalidPipeError(ConfigurationError):
    """Raised when a pipe is neither callable nor exposes the configured method."""

    def __init__(self, message: str, *, pipe: Any, method: str, position: int | None = None) -> None:
        super().__init__(message)
        self.pipe = pipe
        self.method = method
        self.position = position

"""Configuration models for conduit pipelines."""
from __future__ import annotations

import os
from typing import Any, Dict, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import ConfigurationError

_TRUTHY = {"1", "true", "yes", "y", "on"}


class PipelineSettings(BaseModel):
    """Settings that control how pipes are dispatched."""

    model_config = ConfigDict(frozen=True)

    method: str = Field(
        default="handle",
        min_length=1,
        description="Name of the method invoked on object pipes",
    )
    trace: bool = Field(
        default=False,
        description="If True every dispatch is logged at INFO instead of DEBUG.",
    )


def build_settings_from_dict(raw: Mapping[str, Any]) -> PipelineSettings:
    """Utility helper to build :class:`PipelineSettings` from a plain mapping."""

    try:
        return PipelineSettings.model_validate(dict(raw))
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid pipeline settings: {exc}") from exc


def settings_from_env(environ: Mapping[str, str] | None = None) -> PipelineSettings:
    """Build settings from ``CONDUIT_PIPE_METHOD`` and ``CONDUIT_TRACE``."""

    env = os.environ if environ is None else environ
    raw: Dict[str, Any] = {}
    if "CONDUIT_PIPE_METHOD" in env:
        raw["method"] = env["CONDUIT_PIPE_METHOD"]
    trace = str(env.get("CONDUIT_TRACE", "")).strip().lower()
    if trace:
        raw["trace"] = trace in _TRUTHY
    return build_settings_from_dict(raw)


__all__ = [
    "PipelineSettings",
    "build_settings_from_dict",
    "settings_from_env",
]

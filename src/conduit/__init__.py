"""conduit: compose payload handlers into a single sequential pipeline."""

from .config import PipelineSettings, build_settings_from_dict, settings_from_env
from .exceptions import ConduitError, ConfigurationError, InvalidPipeError
from .handlers import (
    Continuation,
    FunctionHandler,
    MethodHandler,
    SupportsHandle,
    normalize_pipes,
    resolve_handler,
)
from .pipeline import Pipeline, compose
from .telemetry import MetricsCollector

__all__ = [
    "ConduitError",
    "ConfigurationError",
    "Continuation",
    "FunctionHandler",
    "InvalidPipeError",
    "MethodHandler",
    "MetricsCollector",
    "Pipeline",
    "PipelineSettings",
    "SupportsHandle",
    "build_settings_from_dict",
    "compose",
    "normalize_pipes",
    "resolve_handler",
    "settings_from_env",
]

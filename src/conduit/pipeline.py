"""Pipeline orchestration primitives.

A :class:`Pipeline` is an immutable builder holding a payload, an ordered
tuple of pipes and the method name used for object pipes. Running it folds the
pipes right to left into nested continuations and invokes the outermost one
with the payload::

    async def trim(text, next):
        return await next(text.strip())

    def shout(text, next):
        return next(text.upper())

    result = await Pipeline.send("  hi  ").run([trim, shout])  # "HI"

Every pipe receives ``(payload, next)`` and either returns ``next(value)``,
returns its own value to short-circuit, or raises.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from contextlib import nullcontext
from dataclasses import dataclass, field, replace
from typing import Any, Tuple

from .config import PipelineSettings, build_settings_from_dict
from .exceptions import ConfigurationError, InvalidPipeError
from .handlers import Continuation, Handler, normalize_pipes, resolve_handlers
from .logging import get_logger, log_event
from .telemetry import MetricsCollector

LOGGER = get_logger("pipeline")


class _Unset:
    def __repr__(self) -> str:
        return "<unset>"


_UNSET: Any = _Unset()


async def _terminal(payload: Any) -> Any:
    return payload


async def _settle(result: Any) -> Any:
    """Await ``result`` until it is a plain value."""

    while inspect.isawaitable(result):
        result = await result
    return result


@dataclass(frozen=True, slots=True)
class Pipeline:
    """Immutable description of a payload travelling through ordered pipes."""

    payload: Any = _UNSET
    pipes: Tuple[Any, ...] = ()
    method: str = "handle"
    trace: bool = False
    metrics: MetricsCollector | None = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "pipes", normalize_pipes(self.pipes))
        settings = build_settings_from_dict({"method": self.method, "trace": self.trace})
        object.__setattr__(self, "method", settings.method)
        object.__setattr__(self, "trace", settings.trace)

    @classmethod
    def send(cls, payload: Any, **options: Any) -> "Pipeline":
        return cls(payload=payload, **options)

    @classmethod
    def from_settings(cls, settings: PipelineSettings, **options: Any) -> "Pipeline":
        return cls(method=settings.method, trace=settings.trace, **options)

    @property
    def settings(self) -> PipelineSettings:
        return PipelineSettings(method=self.method, trace=self.trace)

    def with_payload(self, payload: Any) -> "Pipeline":
        return replace(self, payload=payload)

    def with_method(self, method: str) -> "Pipeline":
        return replace(self, method=method)

    def with_pipes(self, pipes: Any) -> "Pipeline":
        return replace(self, pipes=pipes)

    def with_metrics(self, metrics: MetricsCollector | None) -> "Pipeline":
        return replace(self, metrics=metrics)

    def build(self) -> Continuation:
        """Fold the pipes into a single continuation, last pipe innermost."""

        try:
            handlers = resolve_handlers(self.pipes, self.method)
        except InvalidPipeError as exc:
            log_event(
                LOGGER,
                "pipe_rejected",
                {"position": exc.position, "pipe_type": type(exc.pipe).__name__, "method": exc.method},
                level=logging.WARNING,
            )
            raise

        chain: Continuation = _terminal
        for position in range(len(handlers) - 1, -1, -1):
            chain = self._carry(handlers[position], chain, position)

        LOGGER.debug("Built chain of %d pipe(s) via %s", len(handlers), self.method)
        return chain

    async def run(self, pipes: Any = _UNSET) -> Any:
        """Send the payload through ``pipes`` (or the installed pipes)."""

        pipeline = self if pipes is _UNSET else self.with_pipes(pipes)
        if pipeline.payload is _UNSET:
            raise ConfigurationError("A payload must be supplied before running the pipeline")

        chain = pipeline.build()
        pipeline._increment("runs_started")
        timer = pipeline.metrics.time("pipeline.run") if pipeline.metrics is not None else nullcontext()
        try:
            with timer:
                result = await chain(pipeline.payload)
        except BaseException as exc:
            pipeline._increment("runs_failed")
            log_event(
                LOGGER,
                "pipeline_failed",
                {"pipes": len(pipeline.pipes), "error": type(exc).__name__},
                level=pipeline._level,
            )
            raise

        pipeline._increment("runs_succeeded")
        log_event(
            LOGGER,
            "pipeline_settled",
            {"pipes": len(pipeline.pipes), "result_type": type(result).__name__},
            level=pipeline._level,
        )
        return result

    def run_sync(self, pipes: Any = _UNSET) -> Any:
        """Blocking variant of :meth:`run` for callers without an event loop."""

        return asyncio.run(self.run(pipes))

    # ---- internals ----
    @property
    def _level(self) -> int:
        return logging.INFO if self.trace else logging.DEBUG

    def _increment(self, name: str) -> None:
        if self.metrics is not None:
            self.metrics.increment(name)

    def _carry(self, handler: Handler, next: Continuation, position: int) -> Continuation:
        async def continuation(payload: Any) -> Any:
            self._increment("pipes_dispatched")
            LOGGER.log(
                self._level,
                "Dispatching pipe",
                extra={"pipe": handler.describe(), "position": position, "method": self.method},
            )
            return await _settle(handler(payload, next))

        return continuation


def compose(pipes: Any, method: str = "handle") -> Continuation:
    """Return the outermost continuation for ``pipes`` without running it."""

    return Pipeline(pipes=pipes, method=method).build()


__all__ = ["Pipeline", "compose"]

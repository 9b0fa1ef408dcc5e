"""Handler abstractions resolved from user supplied pipes.

A pipe is either callable, or an object exposing a callable member under the
configured method name. Pipes are resolved into one of two handler variants
once, when a chain is built, so dispatch never re-inspects the pipe.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Protocol, Tuple, Union, runtime_checkable

from .exceptions import InvalidPipeError

Continuation = Callable[[Any], Awaitable[Any]]
PipeCallable = Callable[[Any, Continuation], Any]

_PRIMITIVES = (bool, int, float, complex, str, bytes, bytearray)


@runtime_checkable
class SupportsHandle(Protocol):
    """Object pipe using the default ``handle`` method name."""

    def handle(self, payload: Any, next: Continuation) -> Any:  # pragma: no cover - Protocol
        ...


@dataclass(frozen=True, slots=True)
class FunctionHandler:
    """Handler wrapping a callable pipe."""

    function: PipeCallable

    def __call__(self, payload: Any, next: Continuation) -> Any:
        return self.function(payload, next)

    def describe(self) -> str:
        return getattr(self.function, "__qualname__", None) or type(self.function).__name__


@dataclass(frozen=True, slots=True)
class MethodHandler:
    """Handler dispatching to a named method of an object pipe."""

    target: Any
    method: str
    bound: PipeCallable

    def __call__(self, payload: Any, next: Continuation) -> Any:
        return self.bound(payload, next)

    def describe(self) -> str:
        return f"{type(self.target).__name__}.{self.method}"


Handler = Union[FunctionHandler, MethodHandler]


def normalize_pipes(pipes: Any) -> Tuple[Any, ...]:
    """Return ``pipes`` as a tuple, wrapping a single pipe."""

    if isinstance(pipes, (str, bytes, bytearray)):
        return (pipes,)
    if isinstance(pipes, (Sequence, Iterator)):
        return tuple(pipes)
    return (pipes,)


def resolve_handler(pipe: Any, method: str = "handle", position: int | None = None) -> Handler:
    """Resolve ``pipe`` into a :class:`FunctionHandler` or :class:`MethodHandler`."""

    if callable(pipe):
        return FunctionHandler(pipe)

    if pipe is None or isinstance(pipe, _PRIMITIVES):
        raise InvalidPipeError(
            f"[Pipeline] the {pipe!r} pipe should be either callable or an object "
            f'with a callable "{method}" method.',
            pipe=pipe,
            method=method,
            position=position,
        )

    bound = getattr(pipe, method, None)
    if not callable(bound):
        raise InvalidPipeError(
            f'[Pipeline] the "{type(pipe).__name__}" pipe is missing callable "{method}" method.',
            pipe=pipe,
            method=method,
            position=position,
        )
    return MethodHandler(pipe, method, bound)


def resolve_handlers(pipes: Sequence[Any], method: str = "handle") -> Tuple[Handler, ...]:
    """Resolve every pipe in order, failing on the first invalid one."""

    return tuple(resolve_handler(pipe, method, position) for position, pipe in enumerate(pipes))


__all__ = [
    "Continuation",
    "FunctionHandler",
    "Handler",
    "MethodHandler",
    "PipeCallable",
    "SupportsHandle",
    "normalize_pipes",
    "resolve_handler",
    "resolve_handlers",
]

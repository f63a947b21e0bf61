"""Process-wide logging context.

Every rendered record reads the service name, time source, default level,
global tags, debug flag and output sink from a :class:`LogContext`. There is
one process context, set up at startup with :func:`configure`, and an
optional scoped context installed with :func:`scoped_context` that is only
visible to the current thread or task.

The process context is replaced wholesale, never mutated, but no lock guards
the replacement: configure logging before concurrent logging begins.
"""

import os
import time
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Iterable

from .fields import FieldList
from .sinks import Sink, StreamSink


def unix_seconds() -> int:
    """The default time source: whole seconds since the epoch."""
    return int(time.time())


@dataclass(frozen=True)
class LogContext:
    """Immutable bundle of the settings shared by all log call sites."""

    service: str = ""
    time_fn: Callable[[], Any] = unix_seconds
    default_level: str = "info"
    tags: FieldList = field(default_factory=FieldList)
    debug: bool = False
    sink: Sink = field(default_factory=StreamSink)

    @classmethod
    def from_env(cls, environ=None) -> "LogContext":
        """Build the startup context. The service name comes from ``SVC``."""
        environ = os.environ if environ is None else environ
        return cls(service=environ.get("SVC", ""))

    def child(self, **overrides) -> "LogContext":
        """Derive a context, inheriting values for unspecified fields."""
        if "tags" in overrides:
            overrides["tags"] = _as_fields(overrides["tags"])
        if "sink" in overrides:
            overrides["sink"] = as_sink(overrides["sink"])
        return replace(self, **overrides)


def _as_fields(tags: Iterable | None) -> FieldList:
    if tags is None:
        return FieldList()
    if isinstance(tags, FieldList):
        return tags
    return FieldList(tags)


def as_sink(output) -> Sink:
    """Wrap file-like objects in a :class:`StreamSink`."""
    if isinstance(output, Sink):
        return output
    if output is None:
        return StreamSink()
    if not hasattr(output, "write"):
        raise TypeError(f"output must have a write() method, got {type(output).__name__}")
    return StreamSink(output)


_process_context = LogContext.from_env()
_scoped_context: ContextVar[LogContext | None] = ContextVar(
    "linelog_context", default=None
)


def get_context() -> LogContext:
    """Return the active context: the scoped one if set, else the process one."""
    scoped = _scoped_context.get()
    return scoped if scoped is not None else _process_context


def _install(ctx: LogContext) -> None:
    global _process_context

    if _scoped_context.get() is not None:
        _scoped_context.set(ctx)
    else:
        _process_context = ctx


def configure(**overrides) -> LogContext:
    """
    Replace the active context with one derived from it.

    Args:
        **overrides: ``LogContext`` field overrides. ``tags`` may be a flat
            key/value sequence; ``sink`` may be any object with ``write()``.

    Returns:
        The newly installed context.

    Example:
        >>> configure(service="billing", tags=("region", "eu-west-1"), debug=True)
    """
    ctx = get_context().child(**overrides)
    _install(ctx)
    return ctx


def set_output(output) -> Sink:
    """Set the active sink and return the previous one."""
    old = get_context().sink
    configure(sink=output)
    return old


@contextmanager
def scoped_context(**overrides):
    """
    Install a derived context for the current thread or task only.

    The previous context is restored on exit, including when the body raises.
    """
    ctx = get_context().child(**overrides)
    token = _scoped_context.set(ctx)
    try:
        yield ctx
    finally:
        _scoped_context.reset(token)

"""Ready-made hooks for :meth:`Line.with_hook`.

A hook is evaluated at render time, so it can record where and in which
trace a line was written without the call site doing any work:

    >>> log = ERROR.with_hook(chain(caller, trace_context))
    >>> log.printf("upstream timeout")
"""

import inspect
import os
from functools import reduce

from opentelemetry import trace

from .line import Hook, Line

_PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))


def _outside_package(filename: str) -> bool:
    return os.path.dirname(os.path.abspath(filename)) != _PACKAGE_DIR


def caller(line: Line) -> Line:
    """Add ``caller`` as ``<file>:<lineno>`` of the code that wrote the line."""
    frame = inspect.currentframe()
    try:
        while frame is not None and not _outside_package(frame.f_code.co_filename):
            frame = frame.f_back
        if frame is None:
            return line
        location = f"{os.path.basename(frame.f_code.co_filename)}:{frame.f_lineno}"
    finally:
        # break the reference cycle through the frame
        del frame
    return line.add("caller", location)


def trace_context(line: Line) -> Line:
    """
    Add ``trace_id`` and ``span_id`` of the current OpenTelemetry span.

    The ids are written as lowercase hex (32 and 16 digits). Without a valid
    current span the line is returned unchanged.
    """
    span_context = trace.get_current_span().get_span_context()
    if not span_context.is_valid:
        return line
    return line.add(
        "trace_id", f"{span_context.trace_id:032x}",
        "span_id", f"{span_context.span_id:016x}",
    )


def chain(*hooks: Hook) -> Hook:
    """Compose hooks left to right. A hook returning None is skipped over."""

    def _chained(line: Line) -> Line:
        return reduce(lambda ln, hook: hook(ln) or ln, hooks, line)

    return _chained

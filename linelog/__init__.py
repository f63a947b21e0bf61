"""Convenience exports for the :mod:`linelog` package."""

from .context import (  # noqa: F401
    LogContext,
    configure,
    get_context,
    scoped_context,
    set_output,
    unix_seconds,
)
from .fields import FieldList, is_zero, quote  # noqa: F401
from .hooks import caller, chain, trace_context  # noqa: F401
from .line import (  # noqa: F401
    DEBUG,
    DEBUG_LEVEL,
    ERROR,
    ERROR_LEVEL,
    FATAL,
    FATAL_LEVEL,
    INFO,
    INFO_LEVEL,
    WARN,
    WARN_LEVEL,
    Hook,
    Line,
    fatalf,
    format_message,
    new,
    printf,
)
from .mechanism import FatalSignal, trap  # noqa: F401
from .sinks import OTelSink, RxSink, Sink, StreamSink, parse_records, record_filter  # noqa: F401

__all__ = [
    "FieldList",
    "is_zero",
    "quote",

    "Line",
    "Hook",
    "INFO",
    "WARN",
    "ERROR",
    "FATAL",
    "DEBUG",
    "INFO_LEVEL",
    "WARN_LEVEL",
    "ERROR_LEVEL",
    "FATAL_LEVEL",
    "DEBUG_LEVEL",
    "new",
    "printf",
    "fatalf",
    "format_message",

    # context
    "LogContext",
    "get_context",
    "configure",
    "set_output",
    "scoped_context",
    "unix_seconds",

    # fatal escalation
    "FatalSignal",
    "trap",

    # sinks
    "Sink",
    "StreamSink",
    "RxSink",
    "OTelSink",
    "parse_records",
    "record_filter",

    # hooks
    "caller",
    "trace_context",
    "chain",
]

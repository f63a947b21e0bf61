"""Output sinks for rendered log records.

A sink receives one finished record per call, terminated by a newline.

- :class:`StreamSink` writes to a text stream (``sys.stderr`` by default).
- :class:`RxSink` is a reactivex ``Subject`` emitting each record.
- :class:`OTelSink` forwards records to an OpenTelemetry ``Logger``.
"""

import json
import sys
import time
from abc import ABC, abstractmethod
from typing import Any, Iterable, TextIO

from opentelemetry._logs import LogRecord, SeverityNumber
from reactivex import Observable, Subject
from reactivex import operators as ops


class Sink(ABC):
    """
    The abstract output collaborator.

    ``write`` must be safe to call from several threads at once; it is the
    only shared resource every log call writes to.
    """

    @abstractmethod
    def write(self, text: str) -> bool:
        """Write one record. Returns False if the write failed."""

    def flush(self) -> None:
        pass


# =============================================================================
# Stream Sink
# =============================================================================


class StreamSink(Sink):
    """Write records to a text stream.

    Args:
        stream: Any object with a ``write(str)`` method. ``None`` means the
            current ``sys.stderr``, looked up at every write so that stream
            redirection (``contextlib.redirect_stderr``, pytest capture)
            is honoured.
    """

    def __init__(self, stream: TextIO | None = None):
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stderr

    def write(self, text: str) -> bool:
        try:
            self.stream.write(text)
            return True
        except (OSError, ValueError):
            # closed or broken stream
            return False

    def flush(self) -> None:
        flush = getattr(self.stream, "flush", None)
        if flush is not None:
            flush()

    def __repr__(self) -> str:
        return f"StreamSink({self._stream!r})"


# =============================================================================
# Rx Sink
# =============================================================================


class RxSink(Subject, Sink):
    """
    A Subject that emits every written record to its subscribers.

    Records are emitted as strings without the trailing newline. The sink
    never completes: ``on_completed`` is a no-op, so one subscriber finishing
    does not silence the others.

    Example:
        >>> sink = RxSink()
        >>> sink.pipe(parse_records(), record_filter({"error"})).subscribe(print)
        >>> set_output(sink)
    """

    def write(self, text: str) -> bool:
        self.on_next(text.rstrip("\n"))
        return True

    def on_completed(self) -> None:
        pass


def _parse_record(text: str) -> dict | None:
    try:
        record = json.loads(text)
    except ValueError:
        return None
    return record if isinstance(record, dict) else None


def parse_records():
    """
    The operator to decode rendered records into dicts. Items that are not a
    JSON object are dropped.
    """

    def _parse_records(source: Observable) -> Observable:
        return source.pipe(
            ops.map(_parse_record),
            ops.filter(lambda record: record is not None),
        )

    return _parse_records


def record_filter(levels: Iterable[str]):
    """
    The operator to keep only parsed records whose level is in ``levels``.
    """
    wanted = set(levels)
    return ops.filter(
        lambda record: isinstance(record, dict) and record.get("level") in wanted
    )


# =============================================================================
# OpenTelemetry Sink
# =============================================================================


_SEVERITY: dict[str, SeverityNumber] = {
    "debug": SeverityNumber.DEBUG,
    "info": SeverityNumber.INFO,
    "warn": SeverityNumber.WARN,
    "error": SeverityNumber.ERROR,
    "fatal": SeverityNumber.FATAL,
}

# Fields consumed by the record itself rather than copied into attributes.
_RESERVED = ("svc", "ts", "level", "msg")


def _attribute_value(value: Any) -> str | bool | int | float:
    if isinstance(value, (str, bool, int, float)):
        return value
    return json.dumps(value, default=str, ensure_ascii=False)


class OTelSink(Sink):
    """Forward records to an OpenTelemetry Logger.

    Each record is decoded and emitted as an OTel ``LogRecord``:

    - ``msg`` becomes the body
    - ``level`` becomes the severity (unknown levels keep their text with
      ``SeverityNumber.UNSPECIFIED``)
    - ``svc`` becomes the ``service.name`` attribute
    - every other field becomes an attribute; values that are not
      str/bool/int/float are JSON-encoded

    A record that cannot be decoded is emitted whole as the body.

    Example:
        >>> logger_provider = LoggerProvider()
        >>> logger_provider.add_log_record_processor(BatchLogRecordProcessor(exporter))
        >>> set_output(OTelSink.from_provider(logger_provider, "my-app"))
    """

    def __init__(self, logger):
        self._logger = logger

    @classmethod
    def from_provider(cls, logger_provider, name: str = "linelog") -> "OTelSink":
        return cls(logger_provider.get_logger(name))

    def to_log_record(self, text: str) -> LogRecord:
        text = text.rstrip("\n")
        record = _parse_record(text)
        if record is None:
            return LogRecord(
                timestamp=time.time_ns(),
                body=text,
                severity_number=SeverityNumber.UNSPECIFIED,
            )

        level = str(record.get("level", ""))
        attrs: dict[str, str | bool | int | float] = {}
        if record.get("svc"):
            attrs["service.name"] = str(record["svc"])
        for key, value in record.items():
            if key in _RESERVED or value is None:
                continue
            attrs[key] = _attribute_value(value)

        return LogRecord(
            timestamp=time.time_ns(),
            body=record.get("msg", ""),
            severity_text=level.upper() if level else None,
            severity_number=_SEVERITY.get(level, SeverityNumber.UNSPECIFIED),
            attributes=attrs,
        )

    def write(self, text: str) -> bool:
        try:
            self._logger.emit(self.to_log_record(text))
            return True
        except Exception:
            return False

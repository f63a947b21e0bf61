"""The immutable log line builder.

A :class:`Line` is one potential log record: a level tag, instance fields, a
message and an optional hook. Every method that changes something returns a
new Line, so a partially configured Line can be stored at module level and
reused from any number of threads:

    >>> db = ERROR.add("component", "db")
    >>> db.add("table", "users").printf("insert failed: %s", err)
    >>> db.printf("connection lost")

Rendered records have a fixed shape:

    {"svc":"<service>", "ts":<time>, "level":"<level>", <tags>, <fields>, "msg":"<message>"}
"""

from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Optional

from .context import LogContext, get_context
from .fields import FieldList, quote, quote_key, safe_str
from .mechanism import FatalSignal

Hook = Callable[["Line"], Optional["Line"]]

INFO_LEVEL = "info"
WARN_LEVEL = "warn"
ERROR_LEVEL = "error"
FATAL_LEVEL = "fatal"
DEBUG_LEVEL = "debug"


# Hooks currently executing in this thread or task. A render that finds its
# own hook here skips it instead of recursing.
_firing: ContextVar[frozenset[int]] = ContextVar("linelog_firing", default=frozenset())


@contextmanager
def _firing_hook(hook: Hook):
    token = _firing.set(_firing.get() | {id(hook)})
    try:
        yield
    finally:
        _firing.reset(token)


def format_message(fmt: str, *args: Any) -> str:
    """
    Apply printf-style formatting without ever raising.

    With no arguments the template is returned verbatim. If the arguments do
    not fit the template, the template and the arguments are joined with
    spaces instead.
    """
    if not args:
        return safe_str(fmt)
    try:
        return fmt % args
    except Exception:
        # mismatched verbs, or an argument whose __str__ raises
        return " ".join([safe_str(fmt), *(safe_str(a) for a in args)])


@dataclass(frozen=True)
class Line:
    """
    One log record, before and during rendering.

    Attributes:
        level: Level tag such as ``"info"``. Empty means the context's
            default level.
        fields: Instance fields, rendered after the global tags.
        message: The formatted message, set by :meth:`msg`.
        hook: Called once per render to compute extra fields lazily.
    """

    level: str = ""
    fields: FieldList = field(default_factory=FieldList)
    message: str = ""
    hook: Hook | None = field(default=None, compare=False)

    # ------------------------------------------------------------------
    # copy-returning mutators
    # ------------------------------------------------------------------

    def add(self, *pairs: Any) -> "Line":
        """
        Return a copy with extra fields. Fields come in key/value pairs; a
        trailing unpaired key is ignored.

            INFO.add("railway", "east", "stop", 5).printf("train stopped")
        """
        return replace(self, fields=self.fields.add(*pairs))

    def as_level(self, level: str) -> "Line":
        return replace(self, level=level)

    def info(self) -> "Line":
        return self.as_level(INFO_LEVEL)

    def warn(self) -> "Line":
        return self.as_level(WARN_LEVEL)

    def error(self) -> "Line":
        return self.as_level(ERROR_LEVEL)

    def fatal(self) -> "Line":
        return self.as_level(FATAL_LEVEL)

    def debug(self) -> "Line":
        return self.as_level(DEBUG_LEVEL)

    def with_hook(self, hook: Hook | None) -> "Line":
        """
        Return a copy with ``hook`` attached; ``None`` clears it.

        The hook runs exactly once per :meth:`render` (and so once per
        :meth:`printf`). It receives a copy of the line with no hook attached
        and returns the line to render. Rendering that copy from inside the
        hook is fine. Rendering the line the hook is attached to does not
        recurse: the nested render skips the hook.
        """
        return replace(self, hook=hook)

    def msg(self, fmt: str, *args: Any) -> "Line":
        """Return a copy with the message set. Nothing is written."""
        return replace(self, message=format_message(fmt, *args))

    # ------------------------------------------------------------------
    # rendering
    # ------------------------------------------------------------------

    def effective_level(self, context: LogContext | None = None) -> str:
        ctx = get_context() if context is None else context
        return self.level or ctx.default_level

    def _run_hook(self) -> "Line":
        hook = self.hook
        if hook is None or id(hook) in _firing.get():
            return self

        # armed -> firing
        with _firing_hook(hook):
            result = hook(replace(self, hook=None))
        working = result if isinstance(result, Line) else self
        # firing -> armed
        return replace(working, hook=hook)

    def render(self, context: LogContext | None = None) -> str:
        """
        Serialize the line.

        Runs the hook, then emits the fixed header (service, timestamp,
        level), the global tags, the instance fields and finally the message.
        Zero-valued pairs are skipped, except the message, which is always
        present. The time source is called on every render.
        """
        ctx = get_context() if context is None else context
        line = self._run_hook()

        pairs = FieldList(
            ("svc", ctx.service, "ts", ctx.time_fn(), "level", line.effective_level(ctx))
        )
        pairs = pairs.add(*ctx.tags).add(*line.fields)
        entries = pairs.entries()
        entries.append(f"{quote_key('msg')}:{quote(line.message)}")
        return "{" + ", ".join(entries) + "}"

    def __str__(self) -> str:
        return self.render()

    def printf(self, fmt: str = "", *args: Any) -> None:
        """
        Set the message, render the line and write it to the active sink.

        Debug lines are dropped before anything is evaluated unless debug
        output is enabled. A fatal line raises :class:`FatalSignal` after the
        write is attempted, even if the sink reported a failure: the process
        must stop whether or not the record could be written.
        """
        ctx = get_context()
        level = self.effective_level(ctx)
        if level == DEBUG_LEVEL and not ctx.debug:
            return

        line = self.msg(fmt, *args)
        ctx.sink.write(line.render(ctx) + "\n")
        if level == FATAL_LEVEL:
            raise FatalSignal(line.message)

    def export(self, context: LogContext | None = None) -> list[tuple[str, str]]:
        """Return the global tags and instance fields as plain string pairs."""
        ctx = get_context() if context is None else context
        return ctx.tags.add(*self.fields).export()


INFO = Line(INFO_LEVEL)
WARN = Line(WARN_LEVEL)
ERROR = Line(ERROR_LEVEL)
FATAL = Line(FATAL_LEVEL)

# Only written when the context has debug enabled.
DEBUG = Line(DEBUG_LEVEL)


def new(*pairs: Any) -> Line:
    """Return a default-level line carrying ``pairs``."""
    return Line().add(*pairs)


def printf(fmt: str, *args: Any) -> None:
    """Write a message at the default level."""
    Line().printf(fmt, *args)


def fatalf(fmt: str, *args: Any) -> None:
    """Write a fatal message, then raise :class:`FatalSignal`."""
    FATAL.printf(fmt, *args)

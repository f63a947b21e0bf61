"""Fatal escalation for :mod:`linelog`."""

import sys
from contextlib import contextmanager


class FatalSignal(BaseException):
    """Raised after a fatal-level record has been written.

    Derives from ``BaseException`` so that ordinary ``except Exception``
    handlers let it pass, the same way they let ``SystemExit`` pass.
    ``finally`` blocks and context managers on the way up still run.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self):
        return f"fatal: {self.message}"


@contextmanager
def trap(exit_code: int = 1):
    """
    Turn a :class:`FatalSignal` into a process exit.

    Use it once, at the outermost scope, either as a context manager or as a
    decorator. Any other exception propagates unchanged.

    Example:
        >>> @trap()
        ... def main():
        ...     FATAL.printf("config missing: %s", path)
    """
    try:
        yield
    except FatalSignal:
        sys.exit(exit_code)

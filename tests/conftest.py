"""Shared test fixtures for linelog tests."""

import io

import pytest

from linelog import StreamSink, scoped_context


@pytest.fixture
def output():
    """Scope the logging context to service ``ex`` with a fixed clock.

    Returns the StringIO that receives every written record.
    """
    buf = io.StringIO()
    with scoped_context(
        service="ex",
        time_fn=lambda: 1000,
        tags=(),
        debug=False,
        default_level="info",
        sink=StreamSink(buf),
    ):
        yield buf


@pytest.fixture
def lines(output):
    """Return a callable listing the records written so far."""
    return lambda: output.getvalue().splitlines()

"""Shared fixtures."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from optimalcontrol.events import ErrorEvent, add_error_sink, remove_error_sink


@pytest.fixture
def reported_errors() -> Iterator[list[ErrorEvent]]:
    """Collect every event reported while the test runs."""
    events: list[ErrorEvent] = []
    sink_id = add_error_sink(events.append)
    yield events
    remove_error_sink(sink_id)

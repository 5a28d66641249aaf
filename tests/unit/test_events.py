"""Tests for error reporting."""

from __future__ import annotations

import pytest
from loguru import logger

from optimalcontrol.events import (
    ErrorEvent,
    FailureSeverity,
    add_error_sink,
    remove_error_sink,
    report_error,
    report_warning,
)


@pytest.mark.unit
class TestErrorReporting:
    def test_event_string_representation(self) -> None:
        event = ErrorEvent(component="L2NormCost", operation="setStateWeight", message="not square")

        assert str(event) == "[ERROR] L2NormCost::setStateWeight: not square"

    def test_report_reaches_sinks(self, reported_errors: list[ErrorEvent]) -> None:
        returned = report_error("Component", "operation", "message")

        assert reported_errors == [returned]
        assert returned.severity == FailureSeverity.ERROR

    def test_warning_severity(self, reported_errors: list[ErrorEvent]) -> None:
        report_warning("Component", "operation", "careful")

        assert reported_errors[0].severity == FailureSeverity.WARNING

    def test_removed_sink_not_called(self) -> None:
        events: list[ErrorEvent] = []
        sink_id = add_error_sink(events.append)
        remove_error_sink(sink_id)

        report_error("Component", "operation", "message")
        assert events == []

    def test_remove_unknown_sink(self) -> None:
        with pytest.raises(ValueError):
            remove_error_sink(-1)

    def test_reports_are_logged(self) -> None:
        messages: list[str] = []
        handler_id = logger.add(messages.append, level="WARNING", format="{level} {message}")
        try:
            report_error("Component", "operation", "boom")
        finally:
            logger.remove(handler_id)

        assert len(messages) == 1
        assert messages[0].startswith("ERROR")
        assert "Component::operation: boom" in messages[0]

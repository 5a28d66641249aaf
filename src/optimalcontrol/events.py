"""Structured error reporting for optimal-control components.

Every failure that a component detects is turned into an :class:`ErrorEvent`,
logged through loguru and delivered to any sinks registered with
:func:`add_error_sink`. The failing operation still returns ``False`` (or an
invalid flag); the events are diagnostics, never control flow.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum, auto

from loguru import logger


class FailureSeverity(Enum):
    """Severity levels for reported events."""

    WARNING = auto()  # Operation succeeded with a caveat
    ERROR = auto()  # Operation refused, prior state kept


@dataclass(frozen=True)
class ErrorEvent:
    """A diagnostic raised by a component.

    Attributes:
        component: Reporting component (e.g. "L2NormCost")
        operation: Operation that failed (e.g. "setStateWeight")
        message: Human-readable description
        severity: How severe the event is
    """

    component: str
    operation: str
    message: str
    severity: FailureSeverity = FailureSeverity.ERROR

    def __str__(self) -> str:
        """Format event as string for logging."""
        return f"[{self.severity.name}] {self.component}::{self.operation}: {self.message}"


ErrorSink = Callable[[ErrorEvent], None]

_sinks: dict[int, ErrorSink] = {}
_next_sink_id = 0


def add_error_sink(sink: ErrorSink) -> int:
    """Register a callable receiving every reported event.

    Returns:
        Identifier to pass to :func:`remove_error_sink`
    """
    global _next_sink_id
    sink_id = _next_sink_id
    _next_sink_id += 1
    _sinks[sink_id] = sink
    return sink_id


def remove_error_sink(sink_id: int) -> None:
    """Unregister a sink previously added with :func:`add_error_sink`."""
    try:
        del _sinks[sink_id]
    except KeyError:
        raise ValueError(f"There is no error sink with id {sink_id}") from None


def _dispatch(event: ErrorEvent) -> None:
    for sink in list(_sinks.values()):
        sink(event)


def report_error(component: str, operation: str, message: str) -> ErrorEvent:
    """Report a refused operation."""
    event = ErrorEvent(component=component, operation=operation, message=message)
    logger.opt(depth=1).error("{}", event)
    _dispatch(event)
    return event


def report_warning(component: str, operation: str, message: str) -> ErrorEvent:
    """Report a suspicious but accepted input."""
    event = ErrorEvent(
        component=component,
        operation=operation,
        message=message,
        severity=FailureSeverity.WARNING,
    )
    logger.opt(depth=1).warning("{}", event)
    _dispatch(event)
    return event

"""Structured log payload assembly.

This module defines the severity and event taxonomies and builds the
field mapping that represents one structured log entry.

Reserved keys are owned by the facade and consumed by Google Cloud Logging;
they always take precedence over caller-supplied fields.
"""

import logging
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union

from applog.logging.source import SourceLocation, locate
from applog.tracing.context import TraceContextReader

MESSAGE_KEY = "message"
SEVERITY_KEY = "severity"
EVENT_KEY = "event"
SOURCE_LOCATION_KEY = "logging.googleapis.com/sourceLocation"
TRACE_KEY = "logging.googleapis.com/trace"
SPAN_ID_KEY = "logging.googleapis.com/spanId"

RESERVED_KEYS = frozenset(
    {MESSAGE_KEY, SEVERITY_KEY, EVENT_KEY, SOURCE_LOCATION_KEY, TRACE_KEY, SPAN_ID_KEY}
)


class LogSeverity(str, Enum):
    """Severity of a log entry, as understood by the cloud log backend."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"

    @property
    def level(self) -> int:
        """Equivalent :mod:`logging` level."""
        return _LEVELS[self]


_LEVELS = {
    LogSeverity.DEBUG: logging.DEBUG,
    LogSeverity.INFO: logging.INFO,
    LogSeverity.WARNING: logging.WARNING,
    LogSeverity.ERROR: logging.ERROR,
}


class LogEvent(str, Enum):
    """Named categories of structured log events.

    Application code may pass any plain string as well; the kind is carried
    in the ``event`` field and never interpreted.
    """

    REQUEST_LOG = "REQUEST_LOG"
    """HTTP request handled."""

    EXCEPTION_LOG = "EXCEPTION_LOG"
    """Unexpected exception caught at the request boundary."""

    EMAIL_SENT = "EMAIL_SENT"
    """Email dispatched to a user."""

    FEEDBACK_SESSION_AUDIT = "FEEDBACK_SESSION_AUDIT"
    """Student access to a feedback session."""


EventKind = Union[LogEvent, str]


def trace_resource(app_id: str, trace_id: str) -> str:
    """Build the trace resource path Cloud Logging uses for correlation."""
    return f"projects/{app_id}/traces/{trace_id}"


class PayloadBuilder:
    """Assemble the payload of a structured log entry.

    Example:
        >>> builder = PayloadBuilder("my-app", RequestTracer())
        >>> builder.build("Course created", LogSeverity.INFO, {"courseId": "CS101"})
        {'courseId': 'CS101', 'message': 'Course created', 'severity': 'INFO', ...}
    """

    def __init__(self, app_id: str, trace_reader: TraceContextReader) -> None:
        self.app_id = app_id
        self.trace_reader = trace_reader

    def build(
        self,
        message: str,
        severity: LogSeverity,
        extra: Optional[Mapping[str, Any]] = None,
        location: Optional[SourceLocation] = None,
        event: Optional[EventKind] = None,
    ) -> Dict[str, Any]:
        """Build a payload.

        Args:
            message: Log message.
            severity: Severity of the entry.
            extra: Caller-supplied fields. Not modified.
            location: Caller location; looked up from the stack if omitted.
            event: Event kind, for structured events.

        Returns:
            New payload dictionary with reserved keys written last.
        """
        payload: Dict[str, Any] = dict(extra or {})
        for key in RESERVED_KEYS:
            payload.pop(key, None)

        payload[MESSAGE_KEY] = message
        payload[SEVERITY_KEY] = LogSeverity(severity).value

        if location is None:
            location = locate()
        if location.present:
            payload[SOURCE_LOCATION_KEY] = {
                "file": location.type_name,
                "line": location.line_number,
                "function": location.method_name,
            }

        trace_id = self.trace_reader.current_trace_id()
        if trace_id:
            payload[TRACE_KEY] = trace_resource(self.app_id, trace_id)

        span_id = self.trace_reader.current_span_id()
        if span_id:
            payload[SPAN_ID_KEY] = span_id

        if event is not None:
            payload[EVENT_KEY] = event.value if isinstance(event, LogEvent) else str(event)

        return payload

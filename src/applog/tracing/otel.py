"""Trace context reader for OpenTelemetry.

This module exposes the active OpenTelemetry span as the ambient trace
context, for applications instrumented with OpenTelemetry instead of the
request tracer.
"""

import time
from typing import Optional

from opentelemetry import trace
from opentelemetry.trace import INVALID_SPAN_ID, INVALID_TRACE_ID

from applog.tracing.context import TraceContext


class OpenTelemetryTraceReader:
    """Read trace and span ids from the current OpenTelemetry span.

    Example:
        >>> reader = OpenTelemetryTraceReader()
        >>> with tracer.start_as_current_span("handle_request"):
        ...     reader.current_trace_id()
        '4bf92f3577b34da6a3ce929d0e0e4736'
    """

    def _span_context(self):
        span = trace.get_current_span()
        ctx = span.get_span_context()
        if ctx.trace_id == INVALID_TRACE_ID or ctx.span_id == INVALID_SPAN_ID:
            return None
        return ctx

    def current_trace_id(self) -> Optional[str]:
        ctx = self._span_context()
        if ctx is None:
            return None
        return format(ctx.trace_id, "032x")

    def current_span_id(self) -> Optional[str]:
        ctx = self._span_context()
        if ctx is None:
            return None
        return format(ctx.span_id, "016x")

    def elapsed_millis(self) -> Optional[int]:
        """Milliseconds since the current span started.

        Only SDK spans record a start time; API-only spans yield ``None``.
        """
        if self._span_context() is None:
            return None
        start_time = getattr(trace.get_current_span(), "start_time", None)
        if not isinstance(start_time, int):
            return None
        return max(0, (time.time_ns() - start_time) // 1_000_000)

    def snapshot(self) -> TraceContext:
        return TraceContext(
            trace_id=self.current_trace_id(),
            span_id=self.current_span_id(),
            elapsed_millis=self.elapsed_millis(),
        )

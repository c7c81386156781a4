"""Trace context module for log correlation.

This module provides request-scoped trace context readers.
"""

from applog.tracing.context import (
    RequestTracer,
    TraceContext,
    TraceContextReader,
    parse_trace_headers,
)
from applog.tracing.otel import OpenTelemetryTraceReader

__all__ = [
    "OpenTelemetryTraceReader",
    "RequestTracer",
    "TraceContext",
    "TraceContextReader",
    "parse_trace_headers",
]

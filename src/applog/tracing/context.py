"""Request-scoped trace context.

This module provides the read-only trace context consumed by the logging
facade, and a ContextVar-backed tracer that web request handling uses to
start and stop a trace for each inbound request.
"""

import re
import time
import uuid
from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass
from typing import Iterator, Mapping, Optional, Protocol, Tuple

CLOUD_TRACE_HEADER = "x-cloud-trace-context"
TRACEPARENT_HEADER = "traceparent"

# TRACE_ID[/SPAN_ID][;o=OPTIONS]
_CLOUD_TRACE_PATTERN = re.compile(r"^([0-9a-fA-F]{32})(?:/([0-9]+))?(?:;o=\d+)?$")
# version-traceid-parentid-flags
_TRACEPARENT_PATTERN = re.compile(
    r"^[0-9a-f]{2}-([0-9a-f]{32})-([0-9a-f]{16})-[0-9a-f]{2}$"
)


@dataclass(frozen=True)
class TraceContext:
    """Trace correlation values of the current unit of work."""

    trace_id: Optional[str] = None
    span_id: Optional[str] = None
    elapsed_millis: Optional[int] = None


class TraceContextReader(Protocol):
    """Read-only accessor for the ambient trace context.

    Every method returns ``None`` when no request is active.
    """

    def current_trace_id(self) -> Optional[str]: ...

    def current_span_id(self) -> Optional[str]: ...

    def elapsed_millis(self) -> Optional[int]: ...

    def snapshot(self) -> TraceContext: ...


@dataclass(frozen=True)
class _ActiveTrace:
    trace_id: str
    span_id: Optional[str]
    started_at: float


_ACTIVE_TRACE: ContextVar[Optional[_ActiveTrace]] = ContextVar(
    "applog_active_trace", default=None
)


class RequestTracer:
    """Trace context reader backed by a ``ContextVar``.

    Each thread and each asyncio task sees its own trace, so concurrent
    requests never observe each other's identifiers.

    Example:
        >>> tracer = RequestTracer()
        >>> with tracer.trace("0123456789abcdef0123456789abcdef", "42"):
        ...     tracer.current_trace_id()
        '0123456789abcdef0123456789abcdef'
        >>> tracer.current_trace_id() is None
        True
    """

    def start(
        self, trace_id: Optional[str] = None, span_id: Optional[str] = None
    ) -> Token:
        """Start a trace for the current context.

        Args:
            trace_id: Trace identifier. A random one is generated if omitted.
            span_id: Optional span identifier.

        Returns:
            Token to pass to :meth:`stop`.
        """
        active = _ActiveTrace(
            trace_id=trace_id or uuid.uuid4().hex,
            span_id=span_id,
            started_at=time.monotonic(),
        )
        return _ACTIVE_TRACE.set(active)

    def stop(self, token: Token) -> None:
        """Restore the trace context that was active before :meth:`start`.

        The token may come from another context, as when a server closes a
        response in a worker thread; the previous value is then set directly.
        """
        try:
            _ACTIVE_TRACE.reset(token)
        except ValueError:
            previous = token.old_value
            _ACTIVE_TRACE.set(None if previous is Token.MISSING else previous)

    @contextmanager
    def trace(
        self, trace_id: Optional[str] = None, span_id: Optional[str] = None
    ) -> Iterator[TraceContext]:
        """Run a block within a trace.

        Yields:
            Snapshot of the trace context at the start of the block.
        """
        token = self.start(trace_id, span_id)
        try:
            yield self.snapshot()
        finally:
            self.stop(token)

    def start_from_headers(self, headers: Mapping[str, str]) -> Token:
        """Start a trace continuing the one described by request headers.

        ``X-Cloud-Trace-Context`` takes priority over W3C ``traceparent``.
        Header names are matched case-insensitively; malformed values are
        treated as absent.
        """
        trace_id, span_id = parse_trace_headers(headers)
        return self.start(trace_id, span_id)

    @contextmanager
    def from_headers(self, headers: Mapping[str, str]) -> Iterator[TraceContext]:
        """Context manager form of :meth:`start_from_headers`."""
        token = self.start_from_headers(headers)
        try:
            yield self.snapshot()
        finally:
            self.stop(token)

    def current_trace_id(self) -> Optional[str]:
        active = _ACTIVE_TRACE.get()
        return active.trace_id if active else None

    def current_span_id(self) -> Optional[str]:
        active = _ACTIVE_TRACE.get()
        return active.span_id if active else None

    def elapsed_millis(self) -> Optional[int]:
        active = _ACTIVE_TRACE.get()
        if active is None:
            return None
        return int((time.monotonic() - active.started_at) * 1000)

    def snapshot(self) -> TraceContext:
        return TraceContext(
            trace_id=self.current_trace_id(),
            span_id=self.current_span_id(),
            elapsed_millis=self.elapsed_millis(),
        )


def parse_trace_headers(
    headers: Mapping[str, str],
) -> Tuple[Optional[str], Optional[str]]:
    """Extract ``(trace_id, span_id)`` from request headers.

    Args:
        headers: Request headers with any capitalisation.

    Returns:
        Trace id and span id, each ``None`` when not available.
    """
    norm = {k.lower(): v for k, v in headers.items()}

    cloud = (norm.get(CLOUD_TRACE_HEADER) or "").strip()
    match = _CLOUD_TRACE_PATTERN.match(cloud)
    if match:
        return match.group(1).lower(), match.group(2)

    traceparent = (norm.get(TRACEPARENT_HEADER) or "").strip().lower()
    match = _TRACEPARENT_PATTERN.match(traceparent)
    if match and set(match.group(1)) != {"0"}:
        return match.group(1), match.group(2)

    return None, None

"""Pytest fixtures for logging facade testing.

This module provides configurations, trace readers and recording channels
so facade output can be inspected without touching real sinks.
"""

import logging
import uuid
from typing import Callable, Generator, List, Optional

import pytest

from applog.config import AppConfig, Config, LoggingConfig, StaticEnvironment
from applog.logging.channels import Channels
from applog.logging.logger import Logger
from applog.manager import reset_manager
from applog.tracing.context import RequestTracer, TraceContext


# =============================================================================
# Recording Sinks
# =============================================================================


class RecordingHandler(logging.Handler):
    """Handler keeping every record it receives."""

    def __init__(self) -> None:
        super().__init__(logging.DEBUG)
        self.records: List[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)

    @property
    def messages(self) -> List[str]:
        return [record.getMessage() for record in self.records]


class RecordingChannels:
    """Standard and error channels with a recording handler each."""

    def __init__(self) -> None:
        name = f"test-{uuid.uuid4().hex}"
        self.standard_handler = RecordingHandler()
        self.error_handler = RecordingHandler()

        standard = logging.getLogger(f"{name}-out")
        standard.setLevel(logging.DEBUG)
        standard.propagate = False
        standard.addHandler(self.standard_handler)

        error = logging.getLogger(f"{name}-err")
        error.setLevel(logging.DEBUG)
        error.propagate = False
        error.addHandler(self.error_handler)

        self.channels = Channels(standard=standard, error=error)

    @property
    def standard(self) -> List[str]:
        return self.standard_handler.messages

    @property
    def error(self) -> List[str]:
        return self.error_handler.messages


class FixedTraceReader:
    """Trace reader returning fixed values."""

    def __init__(
        self,
        trace_id: Optional[str] = None,
        span_id: Optional[str] = None,
        elapsed: Optional[int] = None,
    ) -> None:
        self.trace_id = trace_id
        self.span_id = span_id
        self.elapsed = elapsed

    def current_trace_id(self) -> Optional[str]:
        return self.trace_id

    def current_span_id(self) -> Optional[str]:
        return self.span_id

    def elapsed_millis(self) -> Optional[int]:
        return self.elapsed

    def snapshot(self) -> TraceContext:
        return TraceContext(self.trace_id, self.span_id, self.elapsed)


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def clean_manager() -> Generator[None, None, None]:
    """Ensure a fresh process-wide logging manager for each test."""
    reset_manager()
    yield
    reset_manager()


@pytest.fixture
def config() -> Config:
    """Create a test configuration in dev mode.

    Returns:
        Config with DEBUG level and a fixed application id.
    """
    return Config(
        logging=LoggingConfig(level="DEBUG", trace_source="request"),
        app=AppConfig(app_id="test-app", environment="dev", regkey_param="key"),
    )


@pytest.fixture
def tracer() -> RequestTracer:
    """Create a request tracer."""
    return RequestTracer()


@pytest.fixture
def recording() -> RecordingChannels:
    """Create channels that record emitted messages."""
    return RecordingChannels()


@pytest.fixture
def make_logger(
    config: Config, tracer: RequestTracer, recording: RecordingChannels
) -> Callable[..., Logger]:
    """Factory for loggers writing to the recording channels.

    Args:
        local: Render in dev mode when True, cloud mode otherwise.
        trace_reader: Trace reader to use instead of the request tracer.
    """

    def _make(local: bool = True, trace_reader=None) -> Logger:
        return Logger(
            config=config,
            trace_reader=trace_reader or tracer,
            environment=StaticEnvironment(local),
            channels=recording.channels,
        )

    return _make

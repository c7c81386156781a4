"""Process-wide logging facade state.

This module provides a singleton manager holding the configuration, trace
context reader and environment mode shared by facade instances that are not
given explicit collaborators.
"""

import logging
import threading
from typing import Optional

from applog.config import Config, ConfigEnvironment, Environment
from applog.tracing.context import RequestTracer, TraceContextReader

# Singleton instance
_logging_manager: Optional["LoggingManager"] = None
_lock = threading.Lock()

logger = logging.getLogger(__name__)


def create_trace_reader(config: Config) -> TraceContextReader:
    """Create the trace context reader selected by configuration."""
    if config.logging.trace_source == "otel":
        from applog.tracing.otel import OpenTelemetryTraceReader

        return OpenTelemetryTraceReader()
    return RequestTracer()


class LoggingManager:
    """Singleton holder of the facade's shared collaborators.

    Accessing a collaborator before :meth:`initialize` initializes the
    manager from environment variables, so logging never fails for lack of
    setup.

    Example:
        >>> manager = get_manager()
        >>> manager.initialize(Config(app=AppConfig(app_id="my-app")))
        >>> manager.trace_reader.current_trace_id() is None
        True
    """

    def __init__(self) -> None:
        """Initialize logging manager (private constructor)."""
        self._config: Optional[Config] = None
        self._trace_reader: Optional[TraceContextReader] = None
        self._environment: Optional[Environment] = None
        self._initialized = False
        self._init_lock = threading.RLock()

    def initialize(self, config: Optional[Config] = None) -> None:
        """Initialize shared collaborators.

        Args:
            config: Facade configuration. If None, loads from environment.

        Raises:
            ValueError: If configuration is invalid.
        """
        with self._init_lock:
            if self._initialized:
                logger.warning("LoggingManager already initialized")
                return

            config = config or Config.from_env()
            config.validate()

            self._config = config
            self._trace_reader = create_trace_reader(config)
            self._environment = ConfigEnvironment(config.app)
            self._initialized = True

        logger.info(
            f"Logging initialized for app {config.app.app_id} "
            f"in {config.app.environment} mode, trace source {config.logging.trace_source}"
        )

    def shutdown(self) -> None:
        """Drop the shared collaborators."""
        with self._init_lock:
            if not self._initialized:
                return
            self._config = None
            self._trace_reader = None
            self._environment = None
            self._initialized = False

    def _ensure_initialized(self) -> None:
        if self._initialized:
            return
        with self._init_lock:
            if not self._initialized:
                self.initialize()

    @property
    def config(self) -> Config:
        """Get current configuration."""
        self._ensure_initialized()
        return self._config

    @property
    def trace_reader(self) -> TraceContextReader:
        """Get the shared trace context reader."""
        self._ensure_initialized()
        return self._trace_reader

    @property
    def environment(self) -> Environment:
        """Get the environment mode signal."""
        self._ensure_initialized()
        return self._environment

    @property
    def is_initialized(self) -> bool:
        """Check if manager is initialized."""
        return self._initialized


def get_manager() -> LoggingManager:
    """Get the singleton LoggingManager instance.

    Returns:
        Singleton LoggingManager instance.
    """
    global _logging_manager

    if _logging_manager is None:
        with _lock:
            if _logging_manager is None:
                _logging_manager = LoggingManager()

    return _logging_manager


def reset_manager() -> None:
    """Reset the singleton instance (mainly for testing).

    Warning:
        This should only be used in tests.
    """
    global _logging_manager

    with _lock:
        if _logging_manager is not None:
            _logging_manager.shutdown()
        _logging_manager = None

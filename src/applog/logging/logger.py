"""Logging facade for application code.

This module provides the Logger class application code uses to log
messages, structured events and HTTP requests. Output is human-readable on
the dev server and JSON shaped for Cloud Logging when deployed.
"""

from typing import Any, Dict, Mapping, MutableMapping, Optional

from applog.config import Config, ConfigEnvironment, Environment
from applog.http import RequestContext
from applog.logging.channels import Channels, open_channels
from applog.logging.formatter import get_formatter
from applog.logging.payload import EventKind, LogEvent, LogSeverity, PayloadBuilder
from applog.logging.source import locate
from applog.manager import create_trace_reader, get_manager
from applog.tracing.context import TraceContextReader

REGKEY = "regkey"


class Logger:
    """Facade over a standard and an error log channel.

    Each instance is bound to the type that created it, found by walking
    the call stack. Instances hold no mutable state and may be created per
    call site.

    Example:
        >>> log = Logger()
        >>> log.info("Course created")
        courses.service.CourseService:create:42: Course created
        >>> log.event(LogEvent.EMAIL_SENT, "Reminder sent", {"recipient": "a@b.com"})
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        trace_reader: Optional[TraceContextReader] = None,
        environment: Optional[Environment] = None,
        channels: Optional[Channels] = None,
    ) -> None:
        """Initialize the logger.

        Args:
            config: Configuration. Defaults to the process-wide one.
            trace_reader: Trace context source. Defaults to the reader
                selected by ``config``, or the process-wide one.
            environment: Dev/cloud mode signal. Defaults to the mode of
                ``config``, or the process-wide one.
            channels: Output channels. Defaults to channels named after the
                originating type.
        """
        if config is None:
            manager = get_manager()
            config = manager.config
            trace_reader = trace_reader or manager.trace_reader
            environment = environment or manager.environment
        self.config = config
        self.trace_reader = trace_reader or create_trace_reader(config)
        self.environment = environment or ConfigEnvironment(config.app)

        requester = locate()
        self.type_name = requester.type_name if requester.present else "null"
        self.channels = channels or open_channels(self.type_name, self.config.logging)
        self._builder = PayloadBuilder(self.config.app.app_id, self.trace_reader)

    @property
    def standard(self):
        return self.channels.standard

    @property
    def error(self):
        return self.channels.error

    def fine(self, message: str) -> None:
        """Log a message at DEBUG level."""
        self.standard.debug(self._format(message, LogSeverity.DEBUG))

    def info(self, message: str) -> None:
        """Log a message at INFO level."""
        self.standard.info(self._format(message, LogSeverity.INFO))

    def warning(self, message: str) -> None:
        """Log a message at WARNING level."""
        self.standard.warning(self._format(message, LogSeverity.WARNING))

    def severe(self, message: str) -> None:
        """Log a message at ERROR level on the error channel."""
        self.error.error(self._format(message, LogSeverity.ERROR))

    def event(
        self,
        event: EventKind,
        message: str,
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        """Log a structured event at INFO level.

        Args:
            event: Kind of event.
            message: Human-readable description.
            details: Event fields. Reserved payload keys in it are ignored.
        """
        details = details or {}
        payload = self._builder.build(message, LogSeverity.INFO, details, event=event)
        formatter = get_formatter(self.environment.is_local())
        self.standard.info(formatter.render_event(payload, details))

    def request(
        self,
        request: RequestContext,
        status_code: int,
        message: str,
        user_info: Optional[MutableMapping[str, Any]] = None,
        extra_info: Optional[Mapping[str, Any]] = None,
    ) -> None:
        """Log a handled HTTP request as a REQUEST_LOG event.

        If the request carries a registration key and ``user_info`` has no
        ``regkey`` entry, the key is added to ``user_info``.

        Args:
            request: The inbound request.
            status_code: Response status code.
            message: Outcome description.
            user_info: Information about the requesting user.
            extra_info: Additional fields, merged over the request details.
        """
        if user_info is None:
            user_info = {}
        elapsed = self.trace_reader.elapsed_millis() or 0
        method = request.method()
        url = request.uri()

        details: Dict[str, Any] = {
            "responseStatus": status_code,
            "responseTime": elapsed,
            "requestMethod": method,
            "requestUrl": url,
            "userAgent": request.header("User-Agent"),
            "requestParams": request.all_parameters(),
            "requestHeaders": request.all_headers(),
        }

        regkey = request.parameter(self.config.app.regkey_param)
        if regkey is not None:
            user_info.setdefault(REGKEY, regkey)
        details["userInfo"] = user_info
        details.update(extra_info or {})

        summary = f"[{status_code}] [{elapsed}ms] [{method} {url}] {message}"
        self.event(LogEvent.REQUEST_LOG, summary, details)

    def _format(self, message: str, severity: LogSeverity) -> str:
        payload = self._builder.build(message, severity)
        return get_formatter(self.environment.is_local()).render(payload)


def get_logger(**kwargs: Any) -> Logger:
    """Create a logger bound to the calling type."""
    return Logger(**kwargs)

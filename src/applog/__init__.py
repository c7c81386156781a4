"""Structured logging facade for web applications.

This package turns log calls from application code into human-readable
console lines on the dev server and into Cloud Logging JSON records when
deployed, correlated with the trace of the request being handled.

Example:
    >>> from applog import LogEvent, get_logger
    >>>
    >>> log = get_logger()
    >>> log.info("Course created")
    >>> log.event(LogEvent.EMAIL_SENT, "Reminder sent", {"recipient": "a@b.com"})
    >>>
    >>> # In request handling
    >>> log.request(request, 200, "Request completed", user_info, {})
"""

from applog.config import AppConfig, Config, LoggingConfig
from applog.logging import LogEvent, LogSeverity, Logger, get_logger
from applog.manager import get_manager
from applog.tracing import RequestTracer

__all__ = [
    "AppConfig",
    "Config",
    "LogEvent",
    "LogSeverity",
    "Logger",
    "LoggingConfig",
    "RequestTracer",
    "get_logger",
    "get_manager",
]

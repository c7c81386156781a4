"""Structured logging facade.

This module provides the Logger facade along with the caller lookup,
payload assembly and rendering it is built from.
"""

from applog.logging.channels import Channels, StdOutHandler, open_channels
from applog.logging.formatter import (
    CloudLoggingFormatter,
    HumanReadableFormatter,
    get_formatter,
    render,
    to_compact_json,
)
from applog.logging.logger import Logger, get_logger
from applog.logging.payload import LogEvent, LogSeverity, PayloadBuilder
from applog.logging.source import SourceLocation, locate

__all__ = [
    "Channels",
    "CloudLoggingFormatter",
    "HumanReadableFormatter",
    "LogEvent",
    "LogSeverity",
    "Logger",
    "PayloadBuilder",
    "SourceLocation",
    "StdOutHandler",
    "get_formatter",
    "get_logger",
    "locate",
    "open_channels",
    "render",
    "to_compact_json",
]

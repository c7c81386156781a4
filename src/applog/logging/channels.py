"""Output channels of the logging facade.

Every facade instance writes to two stdlib loggers: a standard channel for
DEBUG to WARNING output and an error channel for errors. Handlers attached to
these loggers are the sink.
"""

import logging
import sys
import threading
from dataclasses import dataclass

from applog.config import LoggingConfig

_setup_lock = threading.Lock()


class StdOutHandler(logging.StreamHandler):
    """Stream handler that always writes to the current ``sys.stdout``.

    The stream is looked up on every emit, so redirections of ``sys.stdout``
    made after the handler is created are honoured.
    """

    def __init__(self, level: int = logging.NOTSET) -> None:
        logging.Handler.__init__(self, level)
        self.setFormatter(logging.Formatter("%(message)s"))

    @property
    def stream(self):
        return sys.stdout


@dataclass(frozen=True)
class Channels:
    """The two output channels bound to a facade instance."""

    standard: logging.Logger
    error: logging.Logger


def open_channels(name: str, config: LoggingConfig) -> Channels:
    """Get the standard and error channels for a logger name.

    The standard channel ``<name>-out`` writes to stdout and does not
    propagate. The error channel ``<name>-err`` propagates to the root
    logger, whose handlers are the error sink.

    Args:
        name: Originating type name the channels belong to.
        config: Logging configuration providing the channel level.

    Returns:
        Channels for the name. Repeated calls return the same loggers, never
        stack additional handlers and keep the level set by the first call.
    """
    standard = logging.getLogger(f"{name}-out")
    error = logging.getLogger(f"{name}-err")

    with _setup_lock:
        if not any(isinstance(h, StdOutHandler) for h in standard.handlers):
            standard.addHandler(StdOutHandler())
            standard.propagate = False
            standard.setLevel(_parse_level(config.level))

    return Channels(standard=standard, error=error)


def _parse_level(level: str) -> int:
    """Parse log level string to integer."""
    return getattr(logging, level.upper(), logging.INFO)

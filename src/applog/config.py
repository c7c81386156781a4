"""Configuration module for the logging facade.

This module provides the configuration dataclasses and the environment
mode signal used to choose between dev and cloud log formatting.
"""

import os
from dataclasses import dataclass, field
from typing import Protocol

VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
VALID_TRACE_SOURCES = ("request", "otel")
VALID_ENVIRONMENTS = ("dev", "production")


@dataclass
class LoggingConfig:
    """Configuration for log channels and trace correlation."""

    level: str = "INFO"
    trace_source: str = "request"  # or "otel"

    @classmethod
    def from_env(cls) -> "LoggingConfig":
        """Create configuration from environment variables."""
        return cls(
            level=os.getenv("APPLOG_LOG_LEVEL", "INFO").upper(),
            trace_source=os.getenv("APPLOG_TRACE_SOURCE", "request").lower(),
        )


@dataclass
class AppConfig:
    """Configuration describing the hosting application."""

    app_id: str = "applog-local"
    environment: str = "production"  # or "dev"
    regkey_param: str = "key"

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Create configuration from environment variables."""
        return cls(
            app_id=os.getenv("APPLOG_APP_ID", "applog-local"),
            environment=os.getenv("APPLOG_ENVIRONMENT", "production").lower(),
            regkey_param=os.getenv("APPLOG_REGKEY_PARAM", "key"),
        )

    @property
    def is_dev_server(self) -> bool:
        """Check if the application runs on a local development server."""
        return self.environment == "dev"


@dataclass
class Config:
    """Complete logging facade configuration.

    Example:
        >>> # Create from environment variables
        >>> config = Config.from_env()
        >>>
        >>> # Create programmatically
        >>> config = Config(
        ...     logging=LoggingConfig(level="DEBUG"),
        ...     app=AppConfig(app_id="my-app", environment="dev"),
        ... )
        >>> config.validate()
    """

    logging: LoggingConfig = field(default_factory=LoggingConfig)
    app: AppConfig = field(default_factory=AppConfig)

    @classmethod
    def from_env(cls) -> "Config":
        """Create complete configuration from environment variables.

        Environment Variables:
            Logging:
                APPLOG_LOG_LEVEL: Channel log level - DEBUG, INFO, WARNING, ERROR (default: INFO)
                APPLOG_TRACE_SOURCE: Trace context source - request or otel (default: request)

            Application:
                APPLOG_APP_ID: Application identifier used in trace resource paths
                    (default: applog-local)
                APPLOG_ENVIRONMENT: dev or production (default: production)
                APPLOG_REGKEY_PARAM: Request parameter carrying the registration key
                    (default: key)

        Returns:
            Complete Config with all sub-configurations.
        """
        return cls(
            logging=LoggingConfig.from_env(),
            app=AppConfig.from_env(),
        )

    def validate(self) -> None:
        """Validate configuration values.

        Raises:
            ValueError: If any configuration value is invalid.
        """
        if self.logging.level not in VALID_LEVELS:
            raise ValueError(
                f"Invalid log level: {self.logging.level}. Must be one of {VALID_LEVELS}"
            )
        if self.logging.trace_source not in VALID_TRACE_SOURCES:
            raise ValueError(
                f"Invalid trace source: {self.logging.trace_source}. "
                f"Must be one of {VALID_TRACE_SOURCES}"
            )

        if not self.app.app_id:
            raise ValueError("Application id must not be empty")
        if self.app.environment not in VALID_ENVIRONMENTS:
            raise ValueError(
                f"Invalid environment: {self.app.environment}. "
                f"Must be one of {VALID_ENVIRONMENTS}"
            )


class Environment(Protocol):
    """Signal telling whether the process runs locally or deployed."""

    def is_local(self) -> bool: ...


class ConfigEnvironment:
    """Environment backed by an :class:`AppConfig`, read on every call."""

    def __init__(self, app: AppConfig) -> None:
        self.app = app

    def is_local(self) -> bool:
        return self.app.is_dev_server


class StaticEnvironment:
    """Environment fixed once at construction."""

    def __init__(self, local: bool) -> None:
        self._local = local

    def is_local(self) -> bool:
        return self._local

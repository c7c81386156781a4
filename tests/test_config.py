"""Unit tests for facade configuration.

Tests defaults, environment variable loading, validation and the
environment mode signal.
"""

import pytest

from applog.config import (
    AppConfig,
    Config,
    ConfigEnvironment,
    LoggingConfig,
    StaticEnvironment,
)

ENV_KEYS = [
    "APPLOG_LOG_LEVEL",
    "APPLOG_TRACE_SOURCE",
    "APPLOG_APP_ID",
    "APPLOG_ENVIRONMENT",
    "APPLOG_REGKEY_PARAM",
]


@pytest.fixture
def clean_env(monkeypatch):
    """Remove all facade environment variables."""
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


class TestLoggingConfig:
    """Tests for LoggingConfig."""

    def test_default_values(self):
        """Test default configuration values."""
        config = LoggingConfig()
        assert config.level == "INFO"
        assert config.trace_source == "request"

    def test_from_env_defaults(self, clean_env):
        """Test loading defaults when no environment variables are set."""
        config = LoggingConfig.from_env()
        assert config.level == "INFO"
        assert config.trace_source == "request"

    def test_from_env_custom(self, monkeypatch):
        """Test loading from environment, normalising case."""
        monkeypatch.setenv("APPLOG_LOG_LEVEL", "debug")
        monkeypatch.setenv("APPLOG_TRACE_SOURCE", "OTEL")

        config = LoggingConfig.from_env()
        assert config.level == "DEBUG"
        assert config.trace_source == "otel"


class TestAppConfig:
    """Tests for AppConfig."""

    def test_default_values(self):
        """Test default configuration values."""
        config = AppConfig()
        assert config.app_id == "applog-local"
        assert config.environment == "production"
        assert config.regkey_param == "key"
        assert config.is_dev_server is False

    def test_from_env_custom(self, monkeypatch):
        """Test loading from environment."""
        monkeypatch.setenv("APPLOG_APP_ID", "teaching-app")
        monkeypatch.setenv("APPLOG_ENVIRONMENT", "DEV")
        monkeypatch.setenv("APPLOG_REGKEY_PARAM", "regkey")

        config = AppConfig.from_env()
        assert config.app_id == "teaching-app"
        assert config.environment == "dev"
        assert config.regkey_param == "regkey"
        assert config.is_dev_server is True


class TestConfig:
    """Tests for Config."""

    def test_from_env(self, clean_env, monkeypatch):
        """Test complete configuration from environment."""
        monkeypatch.setenv("APPLOG_APP_ID", "teaching-app")

        config = Config.from_env()
        assert config.app.app_id == "teaching-app"
        assert config.logging.level == "INFO"

    def test_valid_default_config(self):
        """Test default configuration validates."""
        Config().validate()

    def test_invalid_level(self):
        """Test an unknown log level is rejected."""
        config = Config(logging=LoggingConfig(level="VERBOSE"))
        with pytest.raises(ValueError, match="Invalid log level"):
            config.validate()

    def test_invalid_trace_source(self):
        """Test an unknown trace source is rejected."""
        config = Config(logging=LoggingConfig(trace_source="zipkin"))
        with pytest.raises(ValueError, match="Invalid trace source"):
            config.validate()

    def test_empty_app_id(self):
        """Test an empty application id is rejected."""
        config = Config(app=AppConfig(app_id=""))
        with pytest.raises(ValueError, match="Application id"):
            config.validate()

    def test_invalid_environment(self):
        """Test an unknown environment is rejected."""
        config = Config(app=AppConfig(environment="staging"))
        with pytest.raises(ValueError, match="Invalid environment"):
            config.validate()


class TestEnvironment:
    """Tests for environment mode signals."""

    def test_config_environment_follows_config(self):
        """Test the config-backed signal is re-read on every call."""
        app = AppConfig(environment="dev")
        environment = ConfigEnvironment(app)

        assert environment.is_local() is True
        app.environment = "production"
        assert environment.is_local() is False

    def test_static_environment(self):
        """Test the fixed signal."""
        assert StaticEnvironment(True).is_local() is True
        assert StaticEnvironment(False).is_local() is False

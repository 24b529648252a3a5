"""
Unit tests for configuration, errors and retry helpers.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from zenmanage.config import DEFAULT_API_ENDPOINT, DEFAULT_CACHE_TTL, ZenmanageSettings, get_config
from zenmanage.errors import ConfigurationError, FetchRulesError, ZenmanageError
from zenmanage.retry import RetryConfig, RetryError, _calculate_delay, retry_async

ENV_VARS = (
    "ZENMANAGE_ENVIRONMENT_TOKEN",
    "ZENMANAGE_CACHE_TTL",
    "ZENMANAGE_CACHE_BACKEND",
    "ZENMANAGE_CACHE_DIRECTORY",
    "ZENMANAGE_ENABLE_USAGE_REPORTING",
    "ZENMANAGE_API_ENDPOINT",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch, tmp_path):
    """Isolate settings from the developer's environment and .env file."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


def fast_retry(max_attempts=3):
    return RetryConfig(max_attempts=max_attempts, base_delay=0, jitter=False)


class TestConfig:
    """Test cases for settings."""

    def test_defaults(self):
        """Test default values."""
        config = get_config(environment_token="tok_abc")

        assert config.environment_token == "tok_abc"
        assert config.cache_ttl == DEFAULT_CACHE_TTL
        assert config.cache_backend == "memory"
        assert config.cache_directory is None
        assert config.enable_usage_reporting is True
        assert config.api_endpoint == DEFAULT_API_ENDPOINT

    def test_missing_token(self):
        """Test a token is required."""
        with pytest.raises(ConfigurationError, match="Environment token is required"):
            get_config()

    def test_empty_token(self):
        """Test an empty token is rejected."""
        with pytest.raises(ConfigurationError):
            get_config(environment_token="")

    def test_invalid_backend(self):
        """Test unknown cache backends are rejected."""
        with pytest.raises(ConfigurationError) as exc_info:
            get_config(environment_token="tok_abc", cache_backend="redis")

        assert exc_info.value.message == "Invalid cache backend: redis"
        assert exc_info.value.code == "CONFIGURATION_ERROR"

    def test_filesystem_requires_directory(self):
        """Test the filesystem backend needs a directory."""
        with pytest.raises(ConfigurationError, match="Cache directory is required"):
            get_config(environment_token="tok_abc", cache_backend="filesystem")

    def test_negative_ttl(self):
        """Test validation errors are reported as configuration errors."""
        with pytest.raises(ConfigurationError) as exc_info:
            get_config(environment_token="tok_abc", cache_ttl=-1)

        assert exc_info.value.details["errors"]

    def test_environment_variables(self, monkeypatch, tmp_path):
        """Test settings are read from ZENMANAGE_* variables."""
        monkeypatch.setenv("ZENMANAGE_ENVIRONMENT_TOKEN", "tok_env")
        monkeypatch.setenv("ZENMANAGE_CACHE_TTL", "120")
        monkeypatch.setenv("ZENMANAGE_CACHE_BACKEND", "filesystem")
        monkeypatch.setenv("ZENMANAGE_CACHE_DIRECTORY", str(tmp_path))
        monkeypatch.setenv("ZENMANAGE_ENABLE_USAGE_REPORTING", "false")
        monkeypatch.setenv("ZENMANAGE_API_ENDPOINT", "https://flags.example.com")

        config = get_config()

        assert config.environment_token == "tok_env"
        assert config.cache_ttl == 120
        assert config.cache_backend == "filesystem"
        assert config.cache_directory == str(tmp_path)
        assert config.enable_usage_reporting is False
        assert config.api_endpoint == "https://flags.example.com"

    def test_overrides_win_over_environment(self, monkeypatch):
        """Test explicit values take precedence."""
        monkeypatch.setenv("ZENMANAGE_ENVIRONMENT_TOKEN", "tok_env")

        assert get_config(environment_token="tok_arg").environment_token == "tok_arg"

    def test_ensure_valid_returns_settings(self):
        """Test a valid configuration passes through."""
        config = ZenmanageSettings(environment_token="tok_abc")

        assert config.ensure_valid() is config


class TestErrors:
    """Test cases for error types."""

    def test_to_dict(self):
        """Test error rendering."""
        error = ConfigurationError("Bad setup", details={"field": "cache_backend"})

        assert isinstance(error, ZenmanageError)
        assert str(error) == "Bad setup"
        assert error.to_dict() == {
            "code": "CONFIGURATION_ERROR",
            "message": "Bad setup",
            "details": {"field": "cache_backend"}
        }

    def test_fetch_rules_error_status_code(self):
        """Test the HTTP status is kept on the error and in its details."""
        error = FetchRulesError("CDN request failed", status_code=503)

        assert error.status_code == 503
        assert error.details == {"status_code": 503}
        assert FetchRulesError().status_code is None


class TestRetry:
    """Test cases for retry helpers."""

    @pytest.mark.asyncio
    async def test_success_first_attempt(self):
        """Test no retry on success."""
        func = AsyncMock(return_value="ok")

        assert await retry_async(func, config=fast_retry()) == "ok"
        assert func.await_count == 1

    @pytest.mark.asyncio
    async def test_retries_until_success(self):
        """Test transient failures are retried."""
        func = AsyncMock(side_effect=[ValueError("boom"), ValueError("boom"), "ok"])
        logger = MagicMock()

        result = await retry_async(func, exceptions=(ValueError,), config=fast_retry(), logger=logger)

        assert result == "ok"
        assert func.await_count == 3
        assert logger.warning.call_count == 2
        logger.info.assert_called_once()

    @pytest.mark.asyncio
    async def test_exhausted(self):
        """Test RetryError carries the last failure."""
        last = ValueError("third")
        func = AsyncMock(side_effect=[ValueError("first"), ValueError("second"), last])

        with pytest.raises(RetryError) as exc_info:
            await retry_async(func, exceptions=(ValueError,), config=fast_retry())

        assert exc_info.value.last_exception is last
        assert exc_info.value.attempts == 3

    @pytest.mark.asyncio
    async def test_other_exceptions_propagate(self):
        """Test exceptions outside the retry set are not retried."""
        func = AsyncMock(side_effect=KeyError("missing"))

        with pytest.raises(KeyError):
            await retry_async(func, exceptions=(ValueError,), config=fast_retry())

        assert func.await_count == 1

    @pytest.mark.parametrize("attempt,expected", [
        (1, 0.1),
        (2, 0.2),
        (3, 0.4),
    ])
    def test_calculate_delay(self, attempt, expected):
        """Test exponential backoff without jitter."""
        config = RetryConfig(base_delay=0.1, jitter=False)

        assert _calculate_delay(attempt, config) == pytest.approx(expected)

    def test_calculate_delay_capped(self):
        """Test delays never exceed max_delay."""
        config = RetryConfig(base_delay=1, max_delay=2, jitter=False)

        assert _calculate_delay(10, config) == 2

    def test_calculate_delay_jitter(self):
        """Test jitter stays within ten percent."""
        config = RetryConfig(base_delay=1, jitter=True)

        for _ in range(20):
            assert 0.9 <= _calculate_delay(1, config) <= 1.1

"""
Configuration management for the zenmanage client.

Settings are read from keyword arguments first and from ``ZENMANAGE_*``
environment variables (or a ``.env`` file) second.
"""

from typing import Optional

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigurationError

DEFAULT_API_ENDPOINT = "https://api.zenmanage.com"
DEFAULT_CACHE_TTL = 3600
CACHE_BACKENDS = ("memory", "filesystem", "null")


class ZenmanageSettings(BaseSettings):
    """Client configuration."""

    model_config = SettingsConfigDict(
        env_prefix="ZENMANAGE_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    environment_token: Optional[str] = Field(default=None, description="Environment token")
    cache_ttl: float = Field(default=DEFAULT_CACHE_TTL, ge=0, description="Rule cache TTL in seconds")
    cache_backend: str = Field(default="memory", description="memory, filesystem or null")
    cache_directory: Optional[str] = Field(default=None, description="Directory for the filesystem cache")
    enable_usage_reporting: bool = Field(default=True, description="Report flag usage to the API")
    api_endpoint: str = Field(default=DEFAULT_API_ENDPOINT, description="API base URL")
    request_timeout: float = Field(default=10.0, gt=0, description="HTTP timeout in seconds")

    def ensure_valid(self) -> "ZenmanageSettings":
        """Raise ``ConfigurationError`` unless the settings can build a client."""
        if not self.environment_token:
            raise ConfigurationError("Environment token is required")

        if self.cache_backend not in CACHE_BACKENDS:
            raise ConfigurationError(
                f"Invalid cache backend: {self.cache_backend}",
                details={"allowed": list(CACHE_BACKENDS)}
            )

        if self.cache_backend == "filesystem" and not self.cache_directory:
            raise ConfigurationError("Cache directory is required for filesystem cache")

        return self


def get_config(**overrides) -> ZenmanageSettings:
    """Build validated settings from overrides and the environment."""
    try:
        settings = ZenmanageSettings(**overrides)
    except ValidationError as e:
        raise ConfigurationError(
            "Invalid configuration",
            details={"errors": [error["msg"] for error in e.errors()]}
        ) from e

    return settings.ensure_valid()

"""Configuration for the API engine."""

from dataclasses import dataclass
from typing import Literal, Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from .auth import ApiKeyAuth, AuthStrategy, BearerAuth, HeaderAuth
from .exceptions import ConfigurationError

DEFAULT_USER_AGENT = "api-engine/1.0"


@dataclass(frozen=True)
class RetryPolicy:
    """Fixed-delay retry budget applied to rate-limited calls."""

    max_attempts: int = 3
    delay: float = 2.0  # seconds between attempts

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ConfigurationError("max_attempts must be at least 1")
        if self.delay < 0:
            raise ConfigurationError("delay must not be negative")


class ClientSettings(BaseSettings):
    """API client configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="API_ENGINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    base_url: Optional[str] = None

    # Credentials
    api_key: Optional[SecretStr] = None
    bearer_token: Optional[SecretStr] = None
    auth_header_name: Optional[str] = None
    auth_header_value: Optional[SecretStr] = None

    # Retry settings
    max_attempts: int = Field(default=3, ge=1)
    retry_delay: float = Field(default=2.0, ge=0)

    # Transport settings
    timeout: float = Field(default=30.0, gt=0)  # seconds
    user_agent: str = DEFAULT_USER_AGENT

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_json: bool = False

    @property
    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(max_attempts=self.max_attempts, delay=self.retry_delay)

    def build_auth(self) -> Optional[AuthStrategy]:
        """Build the configured auth strategy.

        A bearer token wins over an API key, which wins over a custom header.
        """
        if self.bearer_token is not None:
            return BearerAuth(self.bearer_token.get_secret_value())
        if self.api_key is not None:
            return ApiKeyAuth(self.api_key.get_secret_value())
        if self.auth_header_name:
            if self.auth_header_value is None:
                raise ConfigurationError(
                    f"auth_header_name '{self.auth_header_name}' is set without auth_header_value"
                )
            return HeaderAuth(self.auth_header_name, self.auth_header_value.get_secret_value())
        return None


_settings: Optional[ClientSettings] = None


def get_settings() -> ClientSettings:
    """Get the process-wide settings instance, loading it on first use."""
    global _settings
    if _settings is None:
        _settings = ClientSettings()
    return _settings

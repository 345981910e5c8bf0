from typing import TYPE_CHECKING, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

if TYPE_CHECKING:
    from appnexus.api.rate_limit.models import RateLimits


DEFAULT_API_BASE = "https://api.appnexus.com"


class ClientSettings(BaseSettings):
    """Client settings loaded from environment variables.

    All settings can be configured via APPNEXUS_* environment variables
    or a .env file.

    The module-level ``settings`` instance is built at import time and
    reads ``.env`` from the current working directory of the importing
    process. Pass ``_env_file=None`` to build settings from the
    environment alone.
    """

    # API location
    api_base: str = DEFAULT_API_BASE
    proxy: Optional[str] = None

    # Credentials stored by Client.from_settings for automatic authorization
    username: Optional[str] = None
    password: Optional[str] = Field(default=None, repr=False)

    # Rate limits: permits per window, per category
    auth_limit: int = 10
    read_limit: int = 100
    write_limit: int = 60

    # Rate limit windows in seconds
    auth_period_seconds: float = 300.0
    read_period_seconds: float = 60.0
    write_period_seconds: float = 60.0

    # HTTP client settings
    httpx_connect_timeout: float = 10.0  # Time to establish connection
    httpx_read_timeout: float = 60.0  # Time to read response data
    httpx_write_timeout: float = 10.0  # Time to send request data
    httpx_pool_timeout: float = 5.0  # Time to acquire connection from pool
    httpx_keepalive_expiry: float = 30.0
    httpx_max_connections: int = 20
    httpx_max_keepalive_connections: int = 10

    # Logging settings
    log_level: str = "INFO"
    log_format: str = "text"  # text | structured | json

    @property
    def rate_limits(self) -> "RateLimits":
        """Permit counts per category as a RateLimits value."""
        from appnexus.api.rate_limit.models import RateLimits

        return RateLimits(
            auth=self.auth_limit,
            read=self.read_limit,
            write=self.write_limit,
        )

    @field_validator("auth_limit", "read_limit", "write_limit")
    @classmethod
    def validate_limit_positive(cls, v: int) -> int:
        """Validate rate limit values are positive."""
        if v < 1:
            raise ValueError("Rate limit values must be at least 1")
        return v

    @field_validator(
        "auth_period_seconds",
        "read_period_seconds",
        "write_period_seconds",
        "httpx_connect_timeout",
        "httpx_read_timeout",
        "httpx_write_timeout",
        "httpx_pool_timeout",
    )
    @classmethod
    def validate_duration_positive(cls, v: float) -> float:
        """Validate window and timeout values are positive."""
        if v <= 0:
            raise ValueError("Window and timeout values must be positive")
        return v

    @field_validator("api_base")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    model_config = SettingsConfigDict(
        env_prefix="APPNEXUS_",
        env_file=".env",
        extra="ignore",
    )


# Global settings instance
settings = ClientSettings()

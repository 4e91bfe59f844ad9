from functools import lru_cache
from urllib.parse import urlparse

from pydantic import ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App
    app_name: str = "Taskboard"
    app_env: str = "development"  # development, testing, production
    debug: bool = False

    # Security
    log_user_emails: bool = False  # Set to False in production for GDPR compliance

    # Remote data gateway (PostgREST-compatible)
    gateway_url: str
    gateway_api_key: str
    functions_url: str | None = None  # Defaults to {gateway_url}/functions/v1
    gateway_connect_timeout_seconds: float = 5.0
    gateway_read_timeout_seconds: float = 15.0

    # Realtime (Redis pub/sub, optional - store works without live notifications)
    redis_url: str | None = None  # e.g., "redis://localhost:6379/0"
    redis_pool_size: int = 10
    realtime_channel_prefix: str = "notifications"
    realtime_poll_interval_seconds: float = 1.0

    # Payload validation
    min_password_length: int = 8
    max_attachment_size_bytes: int = 50 * 1024 * 1024

    @field_validator("gateway_url")
    @classmethod
    def validate_gateway_url(cls, v: str) -> str:
        parsed = urlparse(v)
        if parsed.scheme not in ("http", "https") or not parsed.hostname:
            raise ValueError(f"GATEWAY_URL must be an http(s) URL, got '{v}'")
        return v.rstrip("/")

    @field_validator("gateway_api_key")
    @classmethod
    def validate_gateway_api_key(cls, v: str) -> str:
        if len(v) < 16:
            raise ValueError("GATEWAY_API_KEY must be at least 16 characters")
        return v

    @field_validator("functions_url")
    @classmethod
    def validate_functions_url(cls, v: str | None, info: ValidationInfo) -> str | None:
        """Fall back to the conventional functions path under the gateway host."""
        if v:
            return v.rstrip("/")
        gateway_url = info.data.get("gateway_url")
        return f"{gateway_url}/functions/v1" if gateway_url else None


@lru_cache
def get_settings() -> Settings:
    return Settings()

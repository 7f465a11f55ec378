"""
Service settings using Pydantic Settings.

Loads configuration from environment variables and .env file. Each service
receives its settings object explicitly through its app factory.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ServiceSettings(BaseSettings):
    """Settings shared by both edge services."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Server
    host: str = Field(default="0.0.0.0", description="Server bind address")
    port: int = Field(default=3000, ge=1, le=65535, description="Server port")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_file: str = Field(default="", description="Optional log file path")
    log_json: bool = Field(default=True, description="Emit JSON log lines")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid:
            raise ValueError(f"log_level must be one of {valid}")
        return upper


class PublicProxySettings(ServiceSettings):
    """Settings for the public resource proxy."""

    upstream_url: str = Field(
        default="https://elm-lang.org/assets/public-opinion.txt",
        description="External resource served on GET /proxy",
    )
    upstream_timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Upstream fetch timeout in seconds (unset for no timeout)",
    )

    @field_validator("upstream_url")
    @classmethod
    def validate_upstream_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("upstream_url must be an http(s) URL")
        return v

    @property
    def cors_headers(self) -> dict[str, str]:
        return {"Access-Control-Allow-Origin": "*"}


class GatewaySettings(ServiceSettings):
    """Settings for the static file / bot-service gateway."""

    static_root: Path = Field(
        default=Path("./public"), description="Directory served as static files"
    )

    # Bot service
    bot_service_url: str = Field(
        default="http://localhost:4081", description="Internal bot service base URL"
    )
    bot_service_prefix: str = Field(
        default="/bot-service", description="Path prefix forwarded to the bot service"
    )

    # CORS
    cors_allow_origin: str = Field(default="*", description="Allowed origin")
    cors_allow_methods: list[str] = Field(
        default=["OPTIONS", "GET", "PUT", "POST", "DELETE"],
        description="Advertised allowed methods",
    )
    cors_allow_headers: list[str] = Field(
        default=[
            "Access-Control-Allow-Headers",
            "Access-Control-Allow-Method",
            "Access-Control-Allow-Origin",
            "hedvig.token",
        ],
        description="Advertised allowed request headers",
    )

    @field_validator("bot_service_url")
    @classmethod
    def validate_bot_service_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("bot_service_url must be an http(s) URL")
        return v.rstrip("/")

    @field_validator("bot_service_prefix")
    @classmethod
    def validate_bot_service_prefix(cls, v: str) -> str:
        """Ensure the prefix is an absolute path without a trailing slash."""
        if not v.startswith("/"):
            raise ValueError("bot_service_prefix must start with '/'")
        stripped = v.rstrip("/")
        if not stripped:
            raise ValueError("bot_service_prefix must not be '/'")
        return stripped

    @property
    def cors_headers(self) -> dict[str, str]:
        return {
            "Access-Control-Allow-Origin": self.cors_allow_origin,
            "Access-Control-Allow-Methods": ", ".join(self.cors_allow_methods),
            "Access-Control-Allow-Headers": ", ".join(self.cors_allow_headers),
        }


@lru_cache
def get_public_proxy_settings() -> PublicProxySettings:
    """Get cached public proxy settings instance."""
    return PublicProxySettings()


@lru_cache
def get_gateway_settings() -> GatewaySettings:
    """Get cached gateway settings instance."""
    return GatewaySettings()

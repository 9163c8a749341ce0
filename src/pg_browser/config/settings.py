"""Configuration management for the PostgreSQL browser service.

This module defines all configuration settings using Pydantic for validation
and type safety. Configuration is loaded from environment variables (and an
optional ``.env`` file) with sensible defaults.
"""

from typing import Literal

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ServerConfig(BaseSettings):
    """HTTP server configuration."""

    model_config = SettingsConfigDict(
        env_prefix="SERVER_", env_file=".env", extra="ignore", populate_by_name=True
    )

    host: str = Field(default="0.0.0.0", description="Interface to bind")
    port: int = Field(
        default=5000,
        ge=1,
        le=65535,
        validation_alias=AliasChoices("PORT", "SERVER_PORT"),
        description="Listening port",
    )
    cors_origins: list[str] = Field(
        default_factory=lambda: ["*"], description="Origins allowed by CORS"
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_comma_separated_list(cls, v: str | list[str]) -> list[str]:
        """Parse comma-separated string or list."""
        if isinstance(v, str):
            return [o.strip() for o in v.split(",") if o.strip()]
        return v


class PoolConfig(BaseSettings):
    """Connection pool settings applied to every registered connection."""

    model_config = SettingsConfigDict(env_prefix="POOL_")

    min_size: int = Field(default=0, ge=0, le=100, description="Minimum pool size")
    max_size: int = Field(default=20, ge=1, le=100, description="Maximum pool size")
    idle_timeout: float = Field(
        default=30.0, ge=0.0, le=3600.0, description="Idle connection lifetime in seconds"
    )
    connect_timeout: float = Field(
        default=10.0, ge=1.0, le=300.0, description="Connection establishment timeout in seconds"
    )
    default_port: int = Field(default=5432, ge=1, le=65535, description="Default database port")
    ssl_mode: Literal["require", "prefer", "disable"] = Field(
        default="require",
        description="TLS posture; certificates are never verified",
    )
    close_timeout: float = Field(
        default=10.0, ge=0.1, le=300.0, description="Graceful pool close timeout in seconds"
    )


class SecurityConfig(BaseSettings):
    """Error exposure policy."""

    model_config = SettingsConfigDict(env_prefix="SECURITY_")

    expose_error_details: bool = Field(
        default=True, description="Include driver error messages in API responses"
    )


class ObservabilityConfig(BaseSettings):
    """Observability and monitoring configuration."""

    model_config = SettingsConfigDict(env_prefix="OBSERVABILITY_")

    metrics_enabled: bool = Field(default=True, description="Enable Prometheus metrics")
    metrics_port: int = Field(
        default=9090, ge=1024, le=65535, description="Metrics HTTP server port"
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )
    log_format: Literal["json", "text"] = Field(default="text", description="Log format")


class Settings(BaseSettings):
    """Main application settings aggregating all config sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Nested configurations
    server: ServerConfig = Field(default_factory=ServerConfig)
    pool: PoolConfig = Field(default_factory=PoolConfig)
    security: SecurityConfig = Field(default_factory=SecurityConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create global settings instance.

    Returns:
        Settings: The global settings instance.
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset global settings instance. Useful for testing."""
    global _settings
    _settings = None

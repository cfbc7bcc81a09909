"""
Shared configuration management for the Storefront services.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_prefix="STOREFRONT_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")

    # Local store
    db_file: Optional[str] = Field(default=None, description="Path of this replica's record store")
    seed_file: Optional[str] = Field(default=None, description="Seed used when the store does not exist")

    # Replication
    peer_url: Optional[str] = Field(default=None, description="Base URL of the peer replica")
    gateway_url: Optional[str] = Field(default=None, description="Gateway base URL for cache invalidation")

    # Replica sets (comma-separated base URLs) and their single fallbacks
    catalog_url: str = Field(default="http://localhost:4000")
    catalog_replicas: Optional[str] = Field(default=None)
    order_url: str = Field(default="http://localhost:5000")
    order_replicas: Optional[str] = Field(default=None)

    # Gateway cache
    cache_enabled: bool = Field(default=True)
    cache_max: int = Field(default=30, ge=0)

    # Outbound HTTP; None waits until the transport resolves or errors
    outbound_timeout: Optional[float] = Field(default=None)

    # Observability
    enable_tracing: bool = Field(default=False)
    otel_exporter: str = Field(default="http://localhost:4317")
    enable_console_tracing: bool = Field(default=False)


class ServiceConfig(BaseConfig):
    """Service-specific configuration."""

    service_name: str
    port: Optional[int] = None
    host: str = "0.0.0.0"


def get_config(service_name: str, default_port: int, **overrides) -> ServiceConfig:
    """Get configuration for a specific service.

    ``STOREFRONT_PORT`` wins over the service default so that two replicas of
    one service can run side by side.
    """
    config = ServiceConfig(service_name=service_name, **overrides)
    if config.port is None:
        config.port = default_port
    return config

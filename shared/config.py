"""
Shared configuration management for the privilege decision engine.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_prefix="PRIVILEGES_",
        env_file=".env",
        case_sensitive=False,
        extra="allow"
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")
    service_name: str = Field(default="privileges")

    # Decision engine
    log_decisions: bool = Field(default=True)

    # Relation registry: freeze after the first resolution so late
    # registrations cannot race with decision traffic.
    freeze_registry_on_first_resolve: bool = Field(default=False)


def get_config(**overrides) -> BaseConfig:
    """Get configuration, with optional explicit overrides."""
    return BaseConfig(**overrides)

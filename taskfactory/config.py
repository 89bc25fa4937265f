"""Configuration for the task factory."""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RegistrySettings(BaseSettings):
    """Registry settings, read from TASKFACTORY_* environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="TASKFACTORY_",
        extra="ignore",
    )

    allow_duplicate_types: bool = Field(default=True)


class Settings(RegistrySettings):
    """Full task factory settings, logging included."""

    log_level: str = Field(default="INFO")
    log_format: Literal["json", "console"] = Field(default="console")


def get_registry_settings() -> RegistrySettings:
    """Get only the settings registry construction depends on."""
    return RegistrySettings()


def get_settings() -> Settings:
    """Get a settings instance from the current environment."""
    return Settings()

"""Settings configuration with clear separation of concerns.

This module provides:
- EnvironmentVariables: Simple primitive values from .env files
- load_config: Complete configuration (config.yaml plus environment overrides)
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from loguru import logger
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from merchcore.runtime.config.config_data import ConfigData
from merchcore.runtime.config.config_template import load_templated_yaml


class EnvironmentVariables(BaseSettings):
    """Simple primitive values loaded from environment variables and .env files."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
    )

    environment: Literal["development", "production", "test"] = Field(
        default="development", validation_alias="APP_ENVIRONMENT"
    )
    log_level: str | None = Field(default=None, validation_alias="LOG_LEVEL")
    config_file: Path = Field(
        default=Path("config.yaml"), validation_alias="MERCHCORE_CONFIG_FILE"
    )
    database_url: str | None = Field(default=None, validation_alias="DATABASE_URL")


def load_config(env_vars: EnvironmentVariables | None = None) -> ConfigData:
    """Build the configuration for this process.

    The YAML file is optional; without it the model defaults apply. Values
    from the environment take precedence over the file.
    """
    env_vars = env_vars or EnvironmentVariables()

    if env_vars.config_file.exists():
        config = load_templated_yaml(env_vars.config_file)
    else:
        logger.info("No configuration file at {}; using defaults", env_vars.config_file)
        config = ConfigData()

    updates: dict[str, object] = {"app": config.app.model_copy(update={"environment": env_vars.environment})}
    if env_vars.log_level:
        updates["logging"] = config.logging.model_copy(update={"level": env_vars.log_level.upper()})
    if env_vars.database_url:
        updates["database"] = config.database.model_copy(update={"url": env_vars.database_url})

    return config.model_copy(update=updates)

"""Application configuration settings."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from colmapper.core.convention import SetterNaming, get_setter_naming


class Settings(BaseSettings):
    """Application settings with environment variable support.

    All settings can be overridden via environment variables prefixed with COLMAPPER_.
    For example, COLMAPPER_SETTER_NAMING=java_bean.
    """

    model_config = SettingsConfigDict(
        env_prefix="COLMAPPER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Naming
    setter_naming: Literal["suffix_assign", "java_bean", "fluent", "plain"] = Field(
        default="suffix_assign",
        description="How setter names are derived from property names",
    )
    synthetic_marker: str = Field(
        default="$",
        description="Properties whose name contains this marker are never mapped",
    )

    # Default mapping file with overrides and aliases
    mapping_file: Path | None = Field(
        default=None,
        description="Path to a mapping YAML file applied when none is given",
    )

    # Output
    default_format: Literal["json", "table"] = Field(
        default="json",
        description="Default output format for CLI commands",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Logging level",
    )

    @property
    def resolved_setter_naming(self) -> SetterNaming:
        """Get the setter naming policy for the configured preset."""
        return get_setter_naming(self.setter_naming)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

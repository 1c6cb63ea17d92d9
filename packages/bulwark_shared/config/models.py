"""Typed configuration models for Bulwark runtime settings."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "bulwark" / "bulwark.yaml"


class LoggingSettings(BaseModel):
    """Structured logging configuration shared by Bulwark components."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    json_output: bool = True
    service: str = "bulwark"
    environment: str = "dev"


class ErrorOverride(BaseModel):
    """Per-deployment replacement for one canonical error's message or status."""

    message: str | None = None
    http_status: int | None = Field(default=None, ge=400, le=599)


class ErrorRegistrySettings(BaseModel):
    """Project error registry settings under ``errors``."""

    overrides: dict[str, ErrorOverride] = Field(default_factory=dict)

    def override_mapping(self) -> dict[str, dict[str, object]]:
        """Return overrides as plain mappings with unset fields dropped."""
        return {
            code: override.model_dump(exclude_none=True)
            for code, override in self.overrides.items()
        }


class ClassificationSettings(BaseModel):
    """Failure classifier settings under ``classification``."""

    warn_on_rule_overlap: bool = True


class BulwarkSettings(BaseSettings):
    """Root runtime settings resolved from init/env/yaml/defaults sources."""

    model_config = SettingsConfigDict(
        env_prefix="BULWARK_",
        env_nested_delimiter="__",
        extra="ignore",
        yaml_file=DEFAULT_CONFIG_PATH,
        yaml_file_encoding="utf-8",
    )

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    errors: ErrorRegistrySettings = Field(default_factory=ErrorRegistrySettings)
    classification: ClassificationSettings = Field(
        default_factory=ClassificationSettings
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Apply Bulwark precedence: init > env > yaml > model defaults."""
        return (
            init_settings,
            env_settings,
            YamlConfigSettingsSource(settings_cls),
        )

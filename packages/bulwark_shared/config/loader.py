"""Configuration loading with deterministic precedence.

The cascade is always:
1) CLI/init params
2) Environment variables
3) ~/.config/bulwark/bulwark.yaml (or an explicit ``config_path``)
4) Built-in model defaults

Environment variable format:
- Prefix: ``BULWARK_``
- Nested keys: ``__`` separator
- Example: ``BULWARK_LOGGING__LEVEL=DEBUG`` -> ``logging.level = "DEBUG"``
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

from pydantic_settings import SettingsConfigDict

from .models import BulwarkSettings


def load_settings(
    *,
    cli_params: Mapping[str, Any] | None = None,
    config_path: str | Path | None = None,
) -> BulwarkSettings:
    """Load settings by applying the standard Bulwark precedence cascade."""
    settings_cls: type[BulwarkSettings] = BulwarkSettings
    if config_path is not None:
        settings_cls = type(
            "BulwarkSettings",
            (BulwarkSettings,),
            {
                "__module__": __name__,
                "model_config": SettingsConfigDict(yaml_file=Path(config_path)),
            },
        )
    return settings_cls(**dict(cli_params or {}))

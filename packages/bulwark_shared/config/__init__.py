"""Public API for shared Bulwark configuration utilities."""

from .loader import load_settings
from .models import (
    DEFAULT_CONFIG_PATH,
    BulwarkSettings,
    ClassificationSettings,
    ErrorOverride,
    ErrorRegistrySettings,
    LoggingSettings,
)

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "BulwarkSettings",
    "ClassificationSettings",
    "ErrorOverride",
    "ErrorRegistrySettings",
    "LoggingSettings",
    "load_settings",
]

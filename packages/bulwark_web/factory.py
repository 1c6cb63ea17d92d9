"""Composition helpers wiring classifier stages from settings."""

from __future__ import annotations

from packages.bulwark_shared.config import BulwarkSettings, load_settings
from packages.bulwark_shared.errors import ProjectErrorRegistry

from .listeners import DEFAULT_UTILS, FrameworkFailureClassifier


def build_registry(settings: BulwarkSettings) -> ProjectErrorRegistry:
    """Build the project error registry with configured overrides applied."""
    return ProjectErrorRegistry(overrides=settings.errors.override_mapping())


def build_classifier(settings: BulwarkSettings | None = None) -> FrameworkFailureClassifier:
    """Build a framework failure classifier from resolved settings."""
    resolved = settings if settings is not None else load_settings()
    return FrameworkFailureClassifier(
        build_registry(resolved),
        DEFAULT_UTILS,
        warn_on_rule_overlap=resolved.classification.warn_on_rule_overlap,
    )

"""Configuration for StudyRAG: settings, credentials and logging."""

from .credentials import (
    PROVIDER_DEFAULTS,
    ResolvedCredentials,
    UserPreferences,
    mask_key,
    normalise_provider,
    resolve_credentials,
)
from .logging import configure_logging
from .settings import Settings, load_settings, settings

__all__ = [
    "PROVIDER_DEFAULTS",
    "ResolvedCredentials",
    "UserPreferences",
    "mask_key",
    "normalise_provider",
    "resolve_credentials",
    "configure_logging",
    "Settings",
    "load_settings",
    "settings",
]

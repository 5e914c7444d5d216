"""Core package for fantasy baseball head-to-head scoring."""

from .settings import AppSettings, ConfigurationError, get_settings, reset_settings_cache

__all__ = [
    "AppSettings",
    "ConfigurationError",
    "get_settings",
    "reset_settings_cache",
]

"""Core configuration, environment and logging."""

from form_builder.core.config import Settings, get_settings, clear_settings_cache
from form_builder.core.environment import Environment, EnvironmentType

__all__ = [
    "Settings",
    "get_settings",
    "clear_settings_cache",
    "Environment",
    "EnvironmentType",
]

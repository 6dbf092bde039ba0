"""Shared Warden settings and their loader."""

from .loader import load_settings
from .models import (
    DEFAULT_CONFIG_PATH,
    ENV_PREFIX,
    ComponentsSettings,
    LoggingSettings,
    WardenSettings,
    resolve_component_settings,
)

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "ENV_PREFIX",
    "ComponentsSettings",
    "LoggingSettings",
    "WardenSettings",
    "load_settings",
    "resolve_component_settings",
]

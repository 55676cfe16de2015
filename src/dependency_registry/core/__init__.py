"""Core registry, configuration, and logging utilities."""

from .config import AppSettings, LoggingSettings, RegistrySettings, load_app_settings
from .logging import configure_logging
from .models import Registration, Scope, ServiceKey
from .registry import (
    DependencyNotResolvedError,
    DependencyRegistry,
    default_registry,
    reset_default_registry,
)

__all__ = [
    "AppSettings",
    "DependencyNotResolvedError",
    "DependencyRegistry",
    "LoggingSettings",
    "Registration",
    "RegistrySettings",
    "Scope",
    "ServiceKey",
    "configure_logging",
    "default_registry",
    "load_app_settings",
    "reset_default_registry",
]

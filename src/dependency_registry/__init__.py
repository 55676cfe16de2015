"""Process-wide service registry with global and unique resolution scopes."""

from .core import (
    DependencyNotResolvedError,
    DependencyRegistry,
    Registration,
    Scope,
    ServiceKey,
    default_registry,
    reset_default_registry,
)
from .injection import inject, inject_optional

__all__ = [
    "DependencyNotResolvedError",
    "DependencyRegistry",
    "Registration",
    "Scope",
    "ServiceKey",
    "default_registry",
    "inject",
    "inject_optional",
    "reset_default_registry",
]

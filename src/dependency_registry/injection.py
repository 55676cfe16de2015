"""Dataclass field helpers that resolve dependencies at construction time.

``inject`` and ``inject_optional`` return :func:`dataclasses.field` objects
whose default factory asks the registry for the service when the enclosing
object is built::

    @dataclass
    class Notifier:
        messaging: Messaging = inject(Messaging)
        publisher: Publisher | None = inject_optional(Publisher)

The value is resolved once and stored as a plain attribute. Passing the
value to the constructor skips the registry entirely, and declaring the
dataclass with ``frozen=True`` makes the injected value read-only.
"""

from __future__ import annotations

from dataclasses import field
from functools import partial
from typing import Any

from .core.models import Scope
from .core.registry import DependencyRegistry, default_registry


def _registry_or_default(registry: DependencyRegistry | None) -> DependencyRegistry:
    return registry if registry is not None else default_registry()


def _resolve_required(
    service_type: type[Any] | str,
    scope: Scope | str | None,
    tag: str | None,
    registry: DependencyRegistry | None,
) -> Any:
    return _registry_or_default(registry).resolve(service_type, scope=scope, tag=tag)


def _resolve_optional(
    service_type: type[Any] | str,
    scope: Scope | str | None,
    tag: str | None,
    registry: DependencyRegistry | None,
) -> Any:
    return _registry_or_default(registry).try_resolve(
        service_type, scope=scope, tag=tag
    )


def inject(
    service_type: type[Any] | str,
    *,
    scope: Scope | str | None = None,
    tag: str | None = None,
    registry: DependencyRegistry | None = None,
) -> Any:
    """Declare a field resolved from the registry, failing when unregistered."""
    return field(
        default_factory=partial(_resolve_required, service_type, scope, tag, registry)
    )


def inject_optional(
    service_type: type[Any] | str,
    *,
    scope: Scope | str | None = None,
    tag: str | None = None,
    registry: DependencyRegistry | None = None,
) -> Any:
    """Declare a field resolved from the registry, ``None`` when unregistered."""
    return field(
        default_factory=partial(_resolve_optional, service_type, scope, tag, registry)
    )


__all__ = ["inject", "inject_optional"]

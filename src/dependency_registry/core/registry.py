"""Service registry with memoized and per-call resolution scopes."""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from threading import Lock, RLock
from typing import Any, TypeVar

from .config import RegistrySettings, load_app_settings
from .models import Registration, Scope, ServiceBinding, ServiceKey

T = TypeVar("T")

LOGGER = logging.getLogger(__name__)

_MISSING: Any = object()


class DependencyNotResolvedError(RuntimeError):
    """Raised when a required dependency has no registered factory."""

    def __init__(self, key: ServiceKey) -> None:
        self.key = key
        super().__init__(
            f"Required dependency {key.describe()} not resolved. "
            "Ensure the service is registered. "
            "Use try_resolve() instead of resolve() to resolve optional dependencies."
        )


class DependencyRegistry:
    """Registry mapping service keys to factories.

    Services resolved in the ``global`` scope are created once per key and
    cached until the key is registered again or the registry is reset.
    Services resolved in the ``unique`` scope are built on every call and
    never touch the cache.

    All state is guarded by a single re-entrant lock. Factories run outside
    the lock; when two threads race to populate the same singleton the first
    stored instance wins and the other is discarded.
    """

    def __init__(self, settings: RegistrySettings | None = None) -> None:
        """Initialise registry storage."""
        self._settings = settings or RegistrySettings()
        self._bindings: dict[ServiceKey, ServiceBinding] = {}
        self._singletons: dict[ServiceKey, Any] = {}
        self._lock = RLock()

    @property
    def settings(self) -> RegistrySettings:
        return self._settings

    def register(
        self,
        factory: Callable[[], T],
        service_type: type[T] | str | None = None,
        *,
        tag: str | None = None,
    ) -> None:
        """Install ``factory`` for the service type, replacing any previous one.

        When ``service_type`` is omitted the factory must be a class, which
        is then registered as its own service type.
        """
        if not callable(factory):
            raise TypeError(f"Factory {factory!r} is not callable")
        if service_type is None:
            if not inspect.isclass(factory):
                raise TypeError(
                    "service_type is required when the factory is not a class"
                )
            service_type = factory
        elif not (inspect.isclass(service_type) or isinstance(service_type, str)):
            raise TypeError(
                f"Service type {service_type!r} must be a class or a string"
            )

        key = ServiceKey(service_type, tag)
        with self._lock:
            replaced = key in self._bindings
            self._bindings[key] = ServiceBinding(key=key, factory=factory)
            self._singletons.pop(key, None)

        if replaced:
            level = logging.INFO if self._settings.log_overrides else logging.DEBUG
            LOGGER.log(level, "Replaced registration for %s", key.describe())
        else:
            LOGGER.debug("Registered %s", key.describe())

    def resolve(
        self,
        service_type: type[T] | str,
        *,
        scope: Scope | str | None = None,
        tag: str | None = None,
    ) -> T:
        """Resolve a required dependency, raising if nothing is registered."""
        key = ServiceKey(service_type, tag)
        instance = self._resolve(key, self._scope(scope))
        if instance is _MISSING:
            raise DependencyNotResolvedError(key)
        return instance

    def try_resolve(
        self,
        service_type: type[T] | str,
        *,
        scope: Scope | str | None = None,
        tag: str | None = None,
    ) -> T | None:
        """Resolve a dependency if available; return None otherwise."""
        instance = self._resolve(ServiceKey(service_type, tag), self._scope(scope))
        if instance is _MISSING:
            return None
        return instance

    def is_registered(
        self, service_type: type[Any] | str, *, tag: str | None = None
    ) -> bool:
        with self._lock:
            return ServiceKey(service_type, tag) in self._bindings

    def registrations(self) -> list[Registration]:
        """Return a snapshot of registered keys ordered by description."""
        with self._lock:
            snapshot = [
                Registration(key=key, cached=key in self._singletons)
                for key in self._bindings
            ]
        return sorted(snapshot, key=lambda item: item.key.describe())

    def reset(self) -> None:
        """Remove every registration and cached singleton."""
        with self._lock:
            self._bindings.clear()
            self._singletons.clear()
        LOGGER.debug("Registry reset")

    def __len__(self) -> int:
        with self._lock:
            return len(self._bindings)

    def _scope(self, scope: Scope | str | None) -> Scope:
        if scope is None:
            return self._settings.default_scope
        return Scope(scope)

    def _resolve(self, key: ServiceKey, scope: Scope) -> Any:
        with self._lock:
            binding = self._bindings.get(key)
            if binding is None:
                return _MISSING
            if scope is Scope.GLOBAL:
                cached = self._singletons.get(key, _MISSING)
                if cached is not _MISSING:
                    return cached

        instance = binding.factory()
        if scope is Scope.UNIQUE:
            return instance

        with self._lock:
            if self._bindings.get(key) is not binding:
                # Replaced or reset while the factory ran.
                LOGGER.debug(
                    "Registration for %s changed during resolution; not caching",
                    key.describe(),
                )
                return instance
            stored = self._singletons.setdefault(key, instance)

        if stored is not instance:
            LOGGER.debug(
                "Discarding redundant instance for %s built concurrently",
                key.describe(),
            )
        return stored


_DEFAULT_REGISTRY: DependencyRegistry | None = None
_DEFAULT_REGISTRY_LOCK = Lock()


def default_registry() -> DependencyRegistry:
    """Return the process-wide registry owned by the composition root."""
    global _DEFAULT_REGISTRY
    if _DEFAULT_REGISTRY is None:
        with _DEFAULT_REGISTRY_LOCK:
            if _DEFAULT_REGISTRY is None:
                _DEFAULT_REGISTRY = DependencyRegistry(load_app_settings().registry)
    return _DEFAULT_REGISTRY


def reset_default_registry() -> None:
    """Discard the process-wide registry so the next call builds a new one."""
    global _DEFAULT_REGISTRY
    with _DEFAULT_REGISTRY_LOCK:
        _DEFAULT_REGISTRY = None


__all__ = [
    "DependencyNotResolvedError",
    "DependencyRegistry",
    "default_registry",
    "reset_default_registry",
]

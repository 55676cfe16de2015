"""Tests for the dependency registry."""

from __future__ import annotations

import logging
from typing import Protocol

import pytest

from dependency_registry.core import (
    DependencyNotResolvedError,
    DependencyRegistry,
    RegistrySettings,
    Scope,
    ServiceKey,
)


class Messaging(Protocol):
    def send(self, message: str) -> None: ...


class Publisher(Protocol):
    def publish(self, event: str) -> None: ...


class SmsService:
    def send(self, message: str) -> None:
        return None


class AlternateSmsService:
    def send(self, message: str) -> None:
        return None


class EventPublisher:
    def publish(self, event: str) -> None:
        return None


class CountingFactory:
    """Factory stub recording how often it was invoked."""

    def __init__(self, product: type) -> None:
        self.product = product
        self.calls = 0

    def __call__(self) -> object:
        self.calls += 1
        return self.product()


@pytest.fixture()
def registry() -> DependencyRegistry:
    return DependencyRegistry()


def test_unregistered_service_is_absent(registry: DependencyRegistry) -> None:
    """Optional resolution returns None and required resolution raises."""

    assert registry.try_resolve(Publisher) is None
    with pytest.raises(DependencyNotResolvedError):
        registry.resolve(Publisher)


def test_missing_dependency_error_names_type_and_tag(
    registry: DependencyRegistry,
) -> None:
    """The error message identifies the key and points at try_resolve."""

    with pytest.raises(DependencyNotResolvedError) as excinfo:
        registry.resolve(Messaging, tag="alt")

    message = str(excinfo.value)
    assert "'Messaging' (tag 'alt')" in message
    assert "try_resolve()" in message
    assert excinfo.value.key == ServiceKey(Messaging, "alt")


def test_global_scope_returns_same_instance(registry: DependencyRegistry) -> None:
    """Global resolutions share one instance and invoke the factory once."""

    factory = CountingFactory(SmsService)
    registry.register(factory, Messaging)

    first = registry.resolve(Messaging)
    second = registry.resolve(Messaging, scope=Scope.GLOBAL)

    assert isinstance(first, SmsService)
    assert first is second
    assert factory.calls == 1


def test_unique_scope_returns_fresh_instances(registry: DependencyRegistry) -> None:
    """Unique resolutions build a new instance on every call."""

    factory = CountingFactory(EventPublisher)
    registry.register(factory, Publisher)

    first = registry.resolve(Publisher, scope=Scope.UNIQUE)
    second = registry.resolve(Publisher, scope="unique")

    assert isinstance(first, EventPublisher)
    assert isinstance(second, EventPublisher)
    assert first is not second
    assert factory.calls == 2


def test_unique_scope_does_not_touch_singleton(registry: DependencyRegistry) -> None:
    """Unique resolutions neither read nor populate the singleton cache."""

    registry.register(SmsService, Messaging)

    unique = registry.resolve(Messaging, scope=Scope.UNIQUE)
    assert registry.registrations()[0].cached is False

    shared = registry.resolve(Messaging)
    assert shared is not unique
    assert registry.resolve(Messaging, scope=Scope.UNIQUE) is not shared


def test_reregistration_replaces_factory_and_evicts_singleton(
    registry: DependencyRegistry,
) -> None:
    """Registering the same key again installs the new factory."""

    registry.register(EventPublisher, Publisher)
    original = registry.resolve(Publisher)
    assert registry.resolve(Publisher) is original

    registry.register(EventPublisher, Publisher)
    replacement = registry.resolve(Publisher)

    assert isinstance(replacement, EventPublisher)
    assert replacement is not original


def test_tagged_registrations_are_independent(registry: DependencyRegistry) -> None:
    """A tagged and an untagged registration of one type do not collide."""

    registry.register(SmsService, Messaging)
    messaging = registry.resolve(Messaging)
    assert isinstance(messaging, SmsService)

    registry.register(AlternateSmsService, Messaging, tag="alt")
    alternate = registry.resolve(Messaging, tag="alt")

    assert isinstance(alternate, AlternateSmsService)
    assert registry.resolve(Messaging) is messaging
    assert registry.resolve(Messaging, tag="alt") is alternate


def test_reset_clears_registrations_and_singletons(
    registry: DependencyRegistry,
) -> None:
    """After reset every previously registered service is absent."""

    registry.register(EventPublisher, Publisher)
    registry.register(SmsService, Messaging, tag="sms")
    assert registry.try_resolve(Publisher) is not None

    registry.reset()

    assert registry.try_resolve(Publisher) is None
    assert registry.try_resolve(Messaging, tag="sms") is None
    assert len(registry) == 0


def test_factory_errors_propagate(registry: DependencyRegistry) -> None:
    """Exceptions raised by a factory reach the caller unchanged."""

    def broken() -> Publisher:
        raise KeyError("database")

    registry.register(broken, Publisher)

    with pytest.raises(KeyError, match="database"):
        registry.resolve(Publisher)
    with pytest.raises(KeyError, match="database"):
        registry.try_resolve(Publisher)
    assert registry.registrations()[0].cached is False


def test_none_result_is_cached(registry: DependencyRegistry) -> None:
    """A factory returning None still counts as a resolved singleton."""

    calls: list[int] = []

    def factory() -> None:
        calls.append(1)

    registry.register(factory, "null-service")

    assert registry.resolve("null-service") is None
    assert registry.resolve("null-service") is None
    assert len(calls) == 1


def test_class_registers_as_its_own_type(registry: DependencyRegistry) -> None:
    """Omitting the service type registers a class under itself."""

    registry.register(EventPublisher)

    assert isinstance(registry.resolve(EventPublisher), EventPublisher)
    assert registry.is_registered(EventPublisher)


def test_register_rejects_invalid_factories(registry: DependencyRegistry) -> None:
    """Non-callable factories and untyped lambdas are refused."""

    with pytest.raises(TypeError):
        registry.register(object(), Publisher)  # type: ignore[arg-type]
    with pytest.raises(TypeError):
        registry.register(lambda: EventPublisher())
    assert len(registry) == 0


def test_string_discriminators(registry: DependencyRegistry) -> None:
    """Explicit string keys work alongside type keys."""

    registry.register(lambda: {"dsn": "sqlite://"}, "database-config")

    assert registry.resolve("database-config") == {"dsn": "sqlite://"}
    assert registry.is_registered("database-config")
    assert not registry.is_registered("database-config", tag="replica")


def test_registrations_snapshot(registry: DependencyRegistry) -> None:
    """Introspection lists keys in order with their cache state."""

    registry.register(SmsService, Messaging)
    registry.register(EventPublisher, Publisher)
    registry.resolve(Publisher)

    snapshot = registry.registrations()

    assert [item.key for item in snapshot] == [
        ServiceKey(Messaging),
        ServiceKey(Publisher),
    ]
    assert [item.cached for item in snapshot] == [False, True]


def test_default_scope_follows_settings() -> None:
    """Resolutions without a scope use the configured default."""

    registry = DependencyRegistry(RegistrySettings(default_scope=Scope.UNIQUE))
    registry.register(EventPublisher, Publisher)

    assert registry.resolve(Publisher) is not registry.resolve(Publisher)
    assert registry.resolve(Publisher, scope=Scope.GLOBAL) is registry.resolve(
        Publisher, scope=Scope.GLOBAL
    )


def test_override_is_logged(
    registry: DependencyRegistry, caplog: pytest.LogCaptureFixture
) -> None:
    """Replacing a registration is reported at INFO by default."""

    registry.register(SmsService, Messaging)
    with caplog.at_level(logging.INFO, logger="dependency_registry.core.registry"):
        registry.register(AlternateSmsService, Messaging)

    assert "Replaced registration for 'Messaging'" in caplog.text


def test_messaging_scenario(registry: DependencyRegistry) -> None:
    """Tagged alternatives coexist with the cached default implementation."""

    registry.register(SmsService, Messaging)
    messaging = registry.resolve(Messaging)
    assert isinstance(messaging, SmsService)

    registry.register(AlternateSmsService, Messaging, tag="alt")
    assert isinstance(registry.resolve(Messaging, tag="alt"), AlternateSmsService)
    assert registry.resolve(Messaging) is messaging
    assert registry.resolve(Messaging, scope=Scope.UNIQUE) is not messaging

    assert registry.try_resolve(Publisher) is None
    registry.register(EventPublisher, Publisher)
    assert isinstance(registry.try_resolve(Publisher), EventPublisher)


@pytest.mark.parametrize("service_type", [42, 3.5, ("Messaging",), SmsService()])
def test_register_rejects_unknown_service_types(
    registry: DependencyRegistry, service_type: object
) -> None:
    """Service types must be classes or string discriminators."""

    with pytest.raises(TypeError, match="must be a class or a string"):
        registry.register(SmsService, service_type)  # type: ignore[arg-type]
    assert len(registry) == 0


def test_override_logged_at_debug_when_disabled(
    caplog: pytest.LogCaptureFixture,
) -> None:
    """With log_overrides off, replacements are only reported at DEBUG."""

    registry = DependencyRegistry(RegistrySettings(log_overrides=False))
    registry.register(SmsService, Messaging)
    with caplog.at_level(logging.DEBUG, logger="dependency_registry.core.registry"):
        registry.register(AlternateSmsService, Messaging)

    records = [
        record
        for record in caplog.records
        if record.getMessage() == "Replaced registration for 'Messaging'"
    ]
    assert len(records) == 1
    assert records[0].levelno == logging.DEBUG

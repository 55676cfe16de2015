"""Value types shared by the registry and its adapters."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any


class Scope(str, Enum):
    """Resolution policy applied when a service is requested."""

    GLOBAL = "global"
    UNIQUE = "unique"


@dataclass(frozen=True, slots=True)
class ServiceKey:
    """Identity of a registration: the service type plus an optional tag."""

    service_type: type[Any] | str
    tag: str | None = None

    @property
    def service_name(self) -> str:
        if isinstance(self.service_type, str):
            return self.service_type
        return getattr(self.service_type, "__qualname__", repr(self.service_type))

    def describe(self) -> str:
        """Render the key for log and error messages."""
        if self.tag is None:
            return f"'{self.service_name}'"
        return f"'{self.service_name}' (tag '{self.tag}')"


@dataclass(slots=True, eq=False)
class ServiceBinding:
    """A factory installed for a key by a single ``register`` call."""

    key: ServiceKey
    factory: Callable[[], Any]


@dataclass(frozen=True, slots=True)
class Registration:
    """Snapshot of a registered key and whether its singleton is cached."""

    key: ServiceKey
    cached: bool


__all__ = ["Registration", "Scope", "ServiceBinding", "ServiceKey"]

"""FastAPI dependencies resolving services from an application registry."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from fastapi import FastAPI, HTTPException, Request, status as http_status

from dependency_registry.core import (
    DependencyNotResolvedError,
    DependencyRegistry,
    Scope,
)

LOGGER = logging.getLogger(__name__)


def attach_registry(app: FastAPI, registry: DependencyRegistry) -> None:
    """Make ``registry`` available to the dependencies of ``app``."""
    app.state.registry = registry


def _registry_for(request: Request) -> DependencyRegistry | None:
    return getattr(request.app.state, "registry", None)


def provide(
    service_type: type[Any] | str,
    *,
    scope: Scope | str | None = None,
    tag: str | None = None,
) -> Callable[[Request], Any]:
    """Build a ``Depends`` callable resolving a required service.

    A missing registry or registration is a wiring error and is reported as
    an HTTP 500.
    """

    def dependency(request: Request) -> Any:
        registry = _registry_for(request)
        if registry is None:
            LOGGER.error("Dependency registry not attached to application")
            raise HTTPException(
                status_code=http_status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Dependency registry not configured",
            )
        try:
            return registry.resolve(service_type, scope=scope, tag=tag)
        except DependencyNotResolvedError as exc:
            LOGGER.error("%s", exc)
            raise HTTPException(
                status_code=http_status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Service {exc.key.describe()} not configured",
            ) from exc

    return dependency


def provide_optional(
    service_type: type[Any] | str,
    *,
    scope: Scope | str | None = None,
    tag: str | None = None,
) -> Callable[[Request], Any]:
    """Build a ``Depends`` callable returning ``None`` for missing services."""

    def dependency(request: Request) -> Any:
        registry = _registry_for(request)
        if registry is None:
            return None
        return registry.try_resolve(service_type, scope=scope, tag=tag)

    return dependency


__all__ = ["attach_registry", "provide", "provide_optional"]

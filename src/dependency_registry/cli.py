"""Command-line entry point for inspecting registry wiring."""

from __future__ import annotations

import argparse
import importlib
import sys
from collections.abc import Callable, Sequence
from pathlib import Path

from dependency_registry.core import (
    AppSettings,
    DependencyNotResolvedError,
    DependencyRegistry,
    configure_logging,
    load_app_settings,
)


class WiringError(ValueError):
    """Raised when a ``--wiring`` target cannot be loaded."""


def build_parser() -> argparse.ArgumentParser:
    """Create and configure the CLI argument parser."""
    parser = argparse.ArgumentParser(
        description="Inspect services registered by an application's wiring"
    )
    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Path to a .env file containing configuration overrides.",
    )
    parser.add_argument(
        "--wiring",
        default=None,
        help="Callable populating the registry, as 'package.module:function'.",
    )
    parser.add_argument(
        "command",
        nargs="?",
        default="info",
        choices=["info", "list"],
        help="Operation to execute.",
    )
    return parser


def load_wiring(target: str) -> Callable[[DependencyRegistry], None]:
    """Import the wiring callable named by ``module:attribute``."""
    module_name, separator, attribute = target.partition(":")
    if not separator or not module_name or not attribute:
        raise WiringError(f"Wiring target '{target}' must look like 'module:function'")
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise WiringError(f"Cannot import wiring module '{module_name}': {exc}") from exc
    wiring = getattr(module, attribute, None)
    if not callable(wiring):
        raise WiringError(f"'{target}' is not a callable")
    return wiring


def build_registry(
    settings: AppSettings, wiring: str | None = None
) -> DependencyRegistry:
    """Create a registry from settings and apply the optional wiring."""
    registry = DependencyRegistry(settings.registry)
    if wiring:
        load_wiring(wiring)(registry)
    return registry


def execute(args: argparse.Namespace, settings: AppSettings) -> None:
    """Execute the requested CLI command."""
    registry = build_registry(settings, args.wiring)
    if args.command == "info":
        print(f"Default scope: {settings.registry.default_scope.value}")
        print(f"Log level: {settings.logging.level}")
        print(f"Registered services: {len(registry)}")
    elif args.command == "list":
        _print_registrations(registry)


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = load_app_settings(env_file=args.env_file)
    configure_logging(settings.logging)
    try:
        execute(args, settings)
    except (WiringError, DependencyNotResolvedError) as exc:
        print(f"Wiring failed: {exc}", file=sys.stderr)
        sys.exit(2)


def _print_registrations(registry: DependencyRegistry) -> None:
    registrations = registry.registrations()
    if not registrations:
        print("No services registered.")
        return

    print(f"Showing {len(registrations)} registration(s):")
    header = f"{'Service':<32}  {'Tag':<12}  Cached"
    print(header)
    print("-" * len(header))
    for registration in registrations:
        tag = registration.key.tag if registration.key.tag is not None else "-"
        cached = "yes" if registration.cached else "no"
        print(f"{registration.key.service_name:<32}  {tag:<12}  {cached}")


if __name__ == "__main__":
    main()

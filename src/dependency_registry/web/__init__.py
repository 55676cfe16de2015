"""FastAPI integration for the dependency registry."""

from .dependencies import attach_registry, provide, provide_optional

__all__ = ["attach_registry", "provide", "provide_optional"]

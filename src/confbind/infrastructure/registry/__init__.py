"""Registry package for converter lookup."""

from confbind.infrastructure.registry.converter_registry import ConversionRegistry

__all__ = ["ConversionRegistry"]

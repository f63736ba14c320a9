"""Configuration providers."""

from confbind.providers.cached_provider import CachedConfigProvider
from confbind.providers.default_provider import DefaultConfigProvider

__all__ = ["CachedConfigProvider", "DefaultConfigProvider"]

"""Library bootstrap - wires registry, provider, cache and reload from settings."""

from __future__ import annotations

from typing import Any, Dict, Optional, Union

from confbind.config import ConfbindSettings
from confbind.domain.ports import ConfigLoader, ConfigProvider, ReloadStrategy
from confbind.infrastructure.binding.binder import Binder
from confbind.infrastructure.logging.logger import get_logger, setup_logging
from confbind.infrastructure.registry.converter_registry import ConversionRegistry
from confbind.infrastructure.reload.timed import TimedReloadStrategy
from confbind.providers.cached_provider import CachedConfigProvider
from confbind.providers.default_provider import DefaultConfigProvider

SettingsLike = Union[ConfbindSettings, Dict[str, Any], None]

logger = get_logger(__name__)


def _as_settings(settings: SettingsLike) -> ConfbindSettings:
    if isinstance(settings, ConfbindSettings):
        return settings
    return ConfbindSettings.from_dict(settings)


def create_registry(settings: SettingsLike = None) -> ConversionRegistry:
    """
    Create a registry holding the default converters.

    Args:
        settings: Library settings; only the conversion section is used

    Returns:
        A new, independent registry
    """
    conversion = _as_settings(settings).conversion
    return ConversionRegistry(
        delimiter=conversion.list_delimiter,
        strip_elements=conversion.strip_elements,
    )


def create_provider(loader: ConfigLoader,
                    settings: SettingsLike = None,
                    *,
                    registry: Optional[ConversionRegistry] = None,
                    reload_strategy: Optional[ReloadStrategy] = None,
                    configure_logging: bool = False) -> ConfigProvider:
    """
    Create a provider for ``loader`` as described by ``settings``.

    A timed reload strategy is attached when ``reload.interval_seconds`` is
    positive and no explicit strategy is given. The provider is wrapped in a
    CachedConfigProvider when ``cache.enabled`` is set.

    Args:
        loader: Loader holding the configuration tree
        settings: ConfbindSettings or a dict validated into one
        registry: Registry to use instead of a new default one
        reload_strategy: Strategy to use instead of the configured one
        configure_logging: Whether to apply the logging section as well

    Returns:
        The configured provider
    """
    settings = _as_settings(settings)
    if configure_logging:
        setup_logging(settings.logging)

    if reload_strategy is None and settings.reload.enabled:
        reload_strategy = TimedReloadStrategy(settings.reload.interval_seconds)

    provider: ConfigProvider = DefaultConfigProvider(
        loader,
        reload_strategy=reload_strategy,
        binder=Binder(),
        registry=registry or create_registry(settings),
    )
    if settings.cache.enabled:
        provider = CachedConfigProvider(provider, cache_defaults=settings.cache.cache_defaults)

    logger.debug(
        "Created provider for %s (cache=%s, reload=%s)",
        type(loader).__name__,
        settings.cache.enabled,
        reload_strategy is not None,
    )
    return provider

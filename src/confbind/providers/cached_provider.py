"""Caching decorator for configuration providers."""
import threading
from typing import Any, Dict, Optional, Tuple, Type, TypeVar

from confbind.domain.config_value import ConfigValue
from confbind.domain.exceptions import ParserNotFound, SettingNotFound
from confbind.domain.ports import (
    MISSING,
    ChangeListener,
    ConfigProvider,
    ReloadErrorListener,
    ReloadListener,
)
from confbind.domain.type_descriptor import TypeDescriptor, TypeKind
from confbind.infrastructure.logging.logger import get_logger
from confbind.providers.default_provider import resolve_request

T = TypeVar("T")

CacheKey = Tuple[str, TypeDescriptor]


class CachedConfigProvider(ConfigProvider):
    """
    Provider that memoizes values and bindings per (path, type).

    Repeated calls return the identical object until the next successful
    reload of the wrapped provider, which clears the whole cache. Bindings
    are created against this provider, so nested members are cached too.

    With ``cache_defaults`` enabled, a default returned for an absent path
    is stored like a real value: later calls for the same path and type get
    the first default even if they pass another one.
    """

    def __init__(self, provider: ConfigProvider, cache_defaults: bool = True):
        self._provider = provider
        self._cache_defaults = cache_defaults
        self._values: Dict[CacheKey, Any] = {}
        self._bindings: Dict[CacheKey, Any] = {}
        self._cache_lock = threading.RLock()
        self.logger = get_logger(__name__)

        provider.add_reload_listener(self.clear_cache)

    @property
    def provider(self) -> ConfigProvider:
        return self._provider

    @property
    def registry(self) -> Any:
        return self._provider.registry

    @property
    def binder(self) -> Any:
        return self._provider.binder

    def clear_cache(self) -> None:
        """Drop every cached value and binding."""
        with self._cache_lock:
            self._values.clear()
            self._bindings.clear()
        self.logger.debug("Configuration cache cleared")

    def cache_size(self) -> int:
        """Number of cached values and bindings."""
        with self._cache_lock:
            return len(self._values) + len(self._bindings)

    def load(self, path: str) -> Optional[ConfigValue]:
        return self._provider.load(path)

    def contains(self, path: str) -> bool:
        return self._provider.contains(path)

    def get(self, path: str, type_: Any = None, *, default: Any = MISSING) -> Any:
        descriptor, default = resolve_request(type_, default)
        key = (path, descriptor)
        with self._cache_lock:
            if key in self._values:
                return self._values[key]

        value = self._lookup(path, descriptor)
        if value is MISSING:
            if default is MISSING:
                raise SettingNotFound(path)
            if not self._cache_defaults:
                return default
            value = default
        return self._store(key, value)

    def get_or_none(self, path: str, type_: Any = None, *, default: Any = None) -> Any:
        descriptor, default = resolve_request(type_, default, unset=None)
        key = (path, descriptor)
        with self._cache_lock:
            if key in self._values:
                return self._values[key]

        value = self._lookup(path, descriptor)
        if value is MISSING:
            if default is None or not self._cache_defaults:
                return default
            value = default
        return self._store(key, value)

    def bind(self, path: str, interface: Type[T]) -> T:
        key = (path, TypeDescriptor.of(interface))
        with self._cache_lock:
            binding = self._bindings.get(key)
        if binding is not None:
            return binding

        binding = self._provider.binder.bind(self, path, interface)
        with self._cache_lock:
            return self._bindings.setdefault(key, binding)

    def _lookup(self, path: str, descriptor: TypeDescriptor) -> Any:
        """Converted value at ``path``, or MISSING when absent."""
        value = self._provider.load(path)
        if value is None:
            return MISSING
        registry = self._provider.registry
        if registry.is_convertible(descriptor):
            return registry.convert(path, value, descriptor)
        if descriptor.kind is TypeKind.INTERFACE:
            return self.bind(path, descriptor.raw)
        raise ParserNotFound(descriptor.raw)

    def _store(self, key: CacheKey, value: Any) -> Any:
        with self._cache_lock:
            return self._values.setdefault(key, value)

    def reload(self) -> None:
        self._provider.reload()

    def cancel_reload(self) -> None:
        self._provider.cancel_reload()

    def add_reload_listener(self, listener: ReloadListener) -> None:
        self._provider.add_reload_listener(listener)

    def add_reload_error_listener(self, listener: ReloadErrorListener) -> None:
        self._provider.add_reload_error_listener(listener)

    def add_change_listener(self, path: str, type_: Any, listener: ChangeListener) -> None:
        self._provider.add_change_listener(path, type_, listener)

    def remove_listener(self, path: str, type_: Any) -> None:
        self._provider.remove_listener(path, type_)

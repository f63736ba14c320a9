"""Default configuration provider."""
import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple, Type, TypeVar

from confbind.domain.config_value import ConfigValue
from confbind.domain.exceptions import ParserNotFound, ReloadFailed, SettingNotFound
from confbind.domain.ports import (
    MISSING,
    ChangeListener,
    ConfigLoader,
    ConfigProvider,
    ReloadErrorListener,
    ReloadListener,
    ReloadStrategy,
)
from confbind.domain.type_descriptor import TypeDescriptor, TypeKind, is_type_like
from confbind.infrastructure.binding.binder import Binder
from confbind.infrastructure.logging.logger import get_logger
from confbind.infrastructure.registry.converter_registry import ConversionRegistry

T = TypeVar("T")

ListenerKey = Tuple[str, TypeDescriptor]


@dataclass(frozen=True)
class Snapshot:
    """Value of a watched path at one point in time; ``present`` is False when absent."""

    present: bool
    value: Any = None

    @classmethod
    def absent(cls) -> "Snapshot":
        return cls(False)

    def or_none(self) -> Any:
        return self.value if self.present else None


def resolve_request(type_: Any, default: Any = MISSING, unset: Any = MISSING) -> Tuple[TypeDescriptor, Any]:
    """
    Descriptor and default for a lookup.

    A positional ``type_`` that is not a type is the default itself when no
    default was passed, so ``get("timeout", 30)`` reads as an int with 30 as
    fallback. The descriptor comes from the explicit type, else from the
    default's class, else str.

    Returns:
        ``(descriptor, default)``
    """
    if type_ is not None and default is unset and not is_type_like(type_):
        type_, default = None, type_
    if type_ is not None:
        return TypeDescriptor.of(type_), default
    if default is not MISSING and default is not None:
        return TypeDescriptor.of(type(default)), default
    return TypeDescriptor.of(str), default


class DefaultConfigProvider(ConfigProvider):
    """
    Provider that converts loader values on every call.

    Nothing is cached here: every ``get`` and every member call of a bound
    interface reads the loader's current tree. Wrap the provider in a
    CachedConfigProvider for stable instances.

    Reload failures never escape ``reload``; they are delivered to the
    reload error listeners instead.
    """

    def __init__(self,
                 loader: ConfigLoader,
                 reload_strategy: Optional[ReloadStrategy] = None,
                 binder: Optional[Binder] = None,
                 registry: Optional[ConversionRegistry] = None):
        """
        Initialize the provider.

        Args:
            loader: Source of the configuration tree
            reload_strategy: Optional trigger; registered immediately
            binder: Binder for interfaces (a new one when omitted)
            registry: Converter registry (a default one when omitted)
        """
        self._loader = loader
        self._reload_strategy = reload_strategy
        self._binder = binder or Binder()
        self._registry = registry or ConversionRegistry()
        self._listener_lock = threading.RLock()
        self._reload_lock = threading.RLock()
        self._reload_listeners: List[ReloadListener] = []
        self._error_listeners: List[ReloadErrorListener] = []
        self._change_listeners: Dict[ListenerKey, ChangeListener] = {}
        self.logger = get_logger(__name__)

        if reload_strategy is not None:
            reload_strategy.register(self)

    @property
    def registry(self) -> ConversionRegistry:
        return self._registry

    @property
    def binder(self) -> Binder:
        return self._binder

    @property
    def loader(self) -> ConfigLoader:
        return self._loader

    def load(self, path: str) -> Optional[ConfigValue]:
        return self._loader.get(path)

    def contains(self, path: str) -> bool:
        return self._loader.contains(path)

    def get(self, path: str, type_: Any = None, *, default: Any = MISSING) -> Any:
        """
        Get the value at ``path`` converted to ``type_``.

        Args:
            path: Dot-delimited path
            type_: Requested type; inferred from ``default`` when omitted
            default: Returned when the path is absent

        Returns:
            Converted value, bound interface or the default

        Raises:
            SettingNotFound: If the path is absent and no default was given
            ParserNotFound: If the type is neither convertible nor bindable
            ConversionFailed: If the raw value cannot be converted
        """
        descriptor, default = resolve_request(type_, default)
        value = self._loader.get(path)
        if value is None:
            if default is MISSING:
                raise SettingNotFound(path)
            return default
        return self._convert(path, value, descriptor)

    def get_or_none(self, path: str, type_: Any = None, *, default: Any = None) -> Any:
        """Like ``get`` but returns ``default`` (None unless given) for absent paths."""
        descriptor, default = resolve_request(type_, default, unset=None)
        value = self._loader.get(path)
        if value is None:
            return default
        return self._convert(path, value, descriptor)

    def bind(self, path: str, interface: Type[T]) -> T:
        return self._binder.bind(self, path, interface)

    def _convert(self, path: str, value: ConfigValue, descriptor: TypeDescriptor) -> Any:
        if self._registry.is_convertible(descriptor):
            return self._registry.convert(path, value, descriptor)
        if descriptor.kind is TypeKind.INTERFACE:
            return self.bind(path, descriptor.raw)
        raise ParserNotFound(descriptor.raw)

    def add_reload_listener(self, listener: ReloadListener) -> None:
        with self._listener_lock:
            self._reload_listeners.append(listener)

    def add_reload_error_listener(self, listener: ReloadErrorListener) -> None:
        with self._listener_lock:
            self._error_listeners.append(listener)

    def add_change_listener(self, path: str, type_: Any, listener: ChangeListener) -> None:
        """
        Register ``listener(before, after)`` for ``path`` read as ``type_``.

        A second registration for the same path and type replaces the first.
        """
        key = (path, TypeDescriptor.of(type_))
        with self._listener_lock:
            if key in self._change_listeners:
                self.logger.debug(f"Replacing change listener for {path} ({key[1]})")
            self._change_listeners[key] = listener

    def remove_listener(self, path: str, type_: Any) -> None:
        with self._listener_lock:
            self._change_listeners.pop((path, TypeDescriptor.of(type_)), None)

    def cancel_reload(self) -> None:
        if self._reload_strategy is not None:
            self._reload_strategy.deregister(self)

    def reload(self) -> None:
        """
        Reload the loader and notify listeners.

        Change listeners receive ``(before, after)`` for every watched key,
        whether or not the value changed; an absent path, or one whose value
        no longer converts, is reported as None. A loader failure is reported
        to the error listeners and never raised.
        """
        with self._reload_lock:
            with self._listener_lock:
                reload_listeners = list(self._reload_listeners)
                change_listeners = dict(self._change_listeners)

            before = {key: self._snapshot(key) for key in change_listeners}
            try:
                self._loader.reload()
            except Exception as e:
                self._notify_failure(ReloadFailed(e))
                return
            after = {key: self._snapshot(key) for key in change_listeners}

            self.logger.info("Configuration reloaded")

            for listener in reload_listeners:
                self._call_listener(listener)

            for key, listener in change_listeners.items():
                self._call_listener(listener, before[key].or_none(), after[key].or_none())

    def _snapshot(self, key: ListenerKey) -> Snapshot:
        path, descriptor = key
        value = self._loader.get(path)
        if value is None:
            return Snapshot.absent()
        try:
            return Snapshot(True, self._convert(path, value, descriptor))
        except Exception as e:
            self.logger.warning(f"Cannot read {path} as {descriptor} for change listeners: {e}")
            return Snapshot.absent()

    def _notify_failure(self, error: ReloadFailed) -> None:
        error.__cause__ = error.cause
        self.logger.error(f"Configuration reload failed: {error.cause}")
        with self._listener_lock:
            error_listeners = list(self._error_listeners)
        for listener in error_listeners:
            self._call_listener(listener, error)

    def _call_listener(self, listener: Any, *args: Any) -> None:
        try:
            listener(*args)
        except Exception as e:
            self.logger.error(f"Reload listener {listener!r} failed: {e}")
            # Continue with other listeners

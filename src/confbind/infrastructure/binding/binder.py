"""Interface binding - live objects whose members resolve to configuration lookups.

An interface is an abstract class or a ``typing.Protocol``. Every public
zero-argument method or property with a return annotation is a setting:

    class ServerConfig(ABC):
        @abstractmethod
        def host(self) -> str: ...

        @property
        @abstractmethod
        def port(self) -> int: ...

        def get_timeout(self) -> float:
            return 30.0  # used when "timeout" is absent

The binder introspects each interface once and generates a subclass whose
members dispatch through that table. Member calls are never memoized here.
"""
import inspect
import threading
import types
import typing
from abc import ABC
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Type, TypeVar

from confbind.domain.config_value import ConfigLeaf, ConfigNode, ConfigValue, join_path
from confbind.domain.exceptions import BindingError, SettingNotFound
from confbind.domain.type_descriptor import (
    TypeDescriptor,
    TypeKind,
    is_interface,
    is_optional,
)
from confbind.infrastructure.logging.logger import get_logger

T = TypeVar("T")

SETTING_KEY_ATTR = "__confbind_key__"

_SKIPPED_BASES = (object, ABC, typing.Protocol, typing.Generic)


def setting(key: str) -> Callable[[Any], Any]:
    """
    Override the key a member is bound to.

    Works on plain methods, abstract methods and properties::

        @setting("maxConnections")
        @abstractmethod
        def max_connections(self) -> int: ...
    """
    def decorator(member: Any) -> Any:
        target = member.fget if isinstance(member, property) else member
        setattr(target, SETTING_KEY_ATTR, key)
        return member
    return decorator


def derive_key(name: str) -> str:
    """Strip a getter prefix: ``get_port`` and ``getPort`` both become ``port``."""
    if name.startswith("get_") and len(name) > 4:
        return name[4:]
    if name.startswith("get") and len(name) > 3 and name[3].isupper():
        return name[3].lower() + name[4:]
    return name


@dataclass(frozen=True)
class BoundMember:
    """One entry of an interface's dispatch table."""

    name: str
    key: str
    descriptor: TypeDescriptor
    optional: bool
    abstract: bool
    is_property: bool
    function: Callable[..., Any]

    @property
    def is_nested(self) -> bool:
        return self.descriptor.kind is TypeKind.INTERFACE


class BoundProxy:
    """
    Base of every generated binding class.

    Holds nothing but the provider, the base path and the interface. String
    conversion, equality and hashing reflect the underlying tree value.
    """

    _confbind_members: Dict[str, BoundMember] = {}

    def __init__(self, provider: Any, path: str, interface: type):
        self._confbind_provider = provider
        self._confbind_path = path
        self._confbind_interface = interface

    def _confbind_value(self) -> Optional[ConfigValue]:
        return self._confbind_provider.load(self._confbind_path)

    def _confbind_resolve(self, member: BoundMember) -> Any:
        provider = self._confbind_provider
        sub_path = join_path(self._confbind_path, member.key)

        if member.is_nested and not provider.registry.is_convertible(member.descriptor):
            if not member.optional or provider.contains(sub_path):
                return provider.bind(sub_path, member.descriptor.raw)
            value = None
        else:
            value = provider.get_or_none(sub_path, member.descriptor)
        if value is not None:
            return value

        if not member.abstract:
            default = member.function(self)
            if default is not None:
                return default
        if member.optional:
            return None
        raise SettingNotFound(sub_path)

    def __repr__(self) -> str:
        return repr(self._confbind_value())

    def __str__(self) -> str:
        return repr(self._confbind_value())

    def __eq__(self, other: object) -> bool:
        if isinstance(other, BoundProxy):
            return self._confbind_value() == other._confbind_value()
        if isinstance(other, (ConfigLeaf, ConfigNode)):
            return self._confbind_value() == other
        return NotImplemented

    def __ne__(self, other: object) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self) -> int:
        return hash(self._confbind_value())


def _resolve_return_annotation(function: Callable[..., Any]) -> Any:
    try:
        hints = typing.get_type_hints(function, include_extras=True)
    except Exception:
        # Forward references that cannot be evaluated; fall back to the raw value.
        hints = getattr(function, "__annotations__", {})
    return hints.get("return", inspect.Signature.empty)


def _has_required_arguments(function: Callable[..., Any]) -> bool:
    parameters = list(inspect.signature(function).parameters.values())[1:]
    return any(
        parameter.default is inspect.Parameter.empty
        and parameter.kind not in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
        for parameter in parameters
    )


class Binder:
    """
    Creates bound proxies for interfaces.

    Proxy classes (and with them the dispatch tables) are generated once per
    interface and reused for every ``bind`` call.
    """

    def __init__(self) -> None:
        self._proxy_classes: Dict[type, type] = {}
        self._lock = threading.RLock()
        self.logger = get_logger(__name__)

    def bind(self, provider: Any, path: str, interface: Type[T]) -> T:
        """
        Bind ``interface`` to the configuration subtree at ``path``.

        Args:
            provider: Provider used for every member lookup
            path: Base path; "" binds the root
            interface: Abstract class or Protocol to implement

        Returns:
            A live instance of ``interface``

        Raises:
            BindingError: If the interface cannot be implemented
        """
        proxy_class = self.proxy_class(interface)
        return proxy_class(provider, path, interface)

    def proxy_class(self, interface: type) -> type:
        """Get (generating on first use) the binding class for ``interface``."""
        with self._lock:
            proxy_class = self._proxy_classes.get(interface)
            if proxy_class is None:
                proxy_class = self._generate(interface)
                self._proxy_classes[interface] = proxy_class
        return proxy_class

    def members(self, interface: type) -> Dict[str, BoundMember]:
        """Dispatch table of ``interface``, keyed by member name."""
        return dict(self.proxy_class(interface)._confbind_members)

    def _generate(self, interface: type) -> type:
        if not is_interface(interface):
            raise BindingError(interface, "only abstract classes and Protocols can be bound")

        members = self._introspect(interface)
        namespace: Dict[str, Any] = {"_confbind_members": members}
        for member in members.values():
            namespace[member.name] = self._accessor(member)

        proxy_class = types.new_class(
            f"{interface.__name__}Binding",
            (BoundProxy, interface),
            exec_body=lambda ns: ns.update(namespace),
        )
        self.logger.debug(f"Generated binding for {interface.__name__} with {len(members)} members")
        return proxy_class

    @staticmethod
    def _accessor(member: BoundMember) -> Any:
        def accessor(self: BoundProxy) -> Any:
            return self._confbind_resolve(member)

        accessor.__name__ = member.name
        accessor.__qualname__ = member.name
        if member.is_property:
            return property(accessor)
        return accessor

    def _introspect(self, interface: type) -> Dict[str, BoundMember]:
        declared: Dict[str, Any] = {}
        for klass in reversed(interface.__mro__):
            if klass in _SKIPPED_BASES:
                continue
            for name, attribute in vars(klass).items():
                if isinstance(attribute, property) or inspect.isfunction(attribute):
                    declared[name] = attribute

        members: Dict[str, BoundMember] = {}
        for name, attribute in declared.items():
            is_property = isinstance(attribute, property)
            function = attribute.fget if is_property else attribute
            abstract = bool(getattr(attribute, "__isabstractmethod__", False))

            if name.startswith("_"):
                if abstract:
                    raise BindingError(interface, f"abstract member '{name}' is private")
                continue
            if function is None:
                raise BindingError(interface, f"property '{name}' has no getter")
            if _has_required_arguments(function):
                if abstract:
                    raise BindingError(interface, f"member '{name}' takes arguments")
                continue

            annotation = _resolve_return_annotation(function)
            if annotation is inspect.Signature.empty or annotation is None or annotation is type(None):
                if abstract:
                    raise BindingError(interface, f"member '{name}' has no return annotation")
                continue

            try:
                descriptor = TypeDescriptor.of(annotation)
            except TypeError as e:
                raise BindingError(interface, f"member '{name}': {e}") from e

            members[name] = BoundMember(
                name=name,
                key=getattr(function, SETTING_KEY_ATTR, None) or derive_key(name),
                descriptor=descriptor,
                optional=is_optional(annotation),
                abstract=abstract,
                is_property=is_property,
                function=function,
            )
        return members

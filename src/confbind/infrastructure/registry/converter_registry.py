"""Converter Registry - maps requested types to converters.

The registry is an explicit object: callers create one (usually through
``confbind.bootstrap.create_registry``) and hand it to their providers, so
tests and applications never share hidden global state.
"""

import inspect
import threading
from enum import Enum
from typing import Any, Dict, List, Optional

from confbind.domain.config_value import ConfigLeaf, ConfigNode, ConfigValue, join_path
from confbind.domain.exceptions import ConversionFailed, ParserNotFound
from confbind.domain.type_descriptor import TypeDescriptor, TypeKind
from confbind.infrastructure.converters.base import Converter, as_converter
from confbind.infrastructure.converters.containers import (
    DEFAULT_DELIMITER,
    PARSE_ERRORS,
    CollectionConverter,
    MapConverter,
)
from confbind.infrastructure.converters.defaults import default_converters
from confbind.infrastructure.converters.scalar import EnumConverter
from confbind.infrastructure.logging.logger import get_logger


class ConversionRegistry:
    """
    Registry of converters keyed by raw type.

    Resolution order for a TypeDescriptor:

    1. A converter registered for exactly ``descriptor.raw``
    2. A collection or map converter wrapping the element converters
    3. The enum converter for Enum subclasses

    Anything else raises ParserNotFound. Interfaces are not handled here;
    providers fall back to binding when ``is_convertible`` is False.

    Thread-safe.
    """

    def __init__(self,
                 converters: Optional[Dict[Any, Any]] = None,
                 delimiter: str = DEFAULT_DELIMITER,
                 strip_elements: bool = True):
        """
        Initialize converter registry.

        Args:
            converters: Initial converters; the defaults are used when None
            delimiter: Delimiter between collection elements
            strip_elements: Whether collection elements are stripped
        """
        self._registrations: Dict[Any, Converter] = {}
        self._registry_lock = threading.RLock()
        self._enum_converter = EnumConverter()
        self.delimiter = delimiter
        self.strip_elements = strip_elements
        self.logger = get_logger(__name__)

        initial = default_converters() if converters is None else converters
        for raw_type, converter in initial.items():
            self.register(raw_type, converter)

        self.logger.debug("Converter registry initialized with %d converters", len(self._registrations))

    def register(self, raw_type: Any, converter: Any) -> None:
        """
        Register a converter, replacing any previous one for ``raw_type``.

        Args:
            raw_type: Type the converter produces
            converter: A Converter or a ``str -> value`` callable
        """
        converter = as_converter(converter)
        with self._registry_lock:
            replaced = raw_type in self._registrations
            self._registrations[raw_type] = converter

        name = getattr(raw_type, "__name__", repr(raw_type))
        if replaced:
            self.logger.debug(f"Replaced converter for type: {name}")
        else:
            self.logger.debug(f"Registered converter for type: {name}")

    def unregister(self, raw_type: Any) -> bool:
        """Remove the converter for ``raw_type``; returns whether one existed."""
        with self._registry_lock:
            return self._registrations.pop(raw_type, None) is not None

    def is_registered(self, raw_type: Any) -> bool:
        with self._registry_lock:
            return raw_type in self._registrations

    def registered_types(self) -> List[Any]:
        """Get all raw types with a registered converter."""
        with self._registry_lock:
            return list(self._registrations.keys())

    def clear_registrations(self) -> None:
        """Remove every converter (mainly for tests)."""
        with self._registry_lock:
            self._registrations.clear()

    def resolve(self, requested: Any) -> Converter:
        """
        Find the converter for a requested type.

        Args:
            requested: A type or TypeDescriptor

        Returns:
            Converter able to parse leaves into the requested type

        Raises:
            ParserNotFound: If no converter applies
        """
        descriptor = TypeDescriptor.of(requested)

        with self._registry_lock:
            converter = self._registrations.get(descriptor.raw)
        if converter is not None:
            return converter

        if descriptor.kind is TypeKind.COLLECTION:
            return CollectionConverter(
                self.resolve(descriptor.element),
                delimiter=self.delimiter,
                strip_elements=self.strip_elements,
            )

        if descriptor.kind is TypeKind.MAP:
            return MapConverter(
                self.resolve(descriptor.key),
                self.resolve(descriptor.value),
                delimiter=self.delimiter,
            )

        if inspect.isclass(descriptor.raw) and issubclass(descriptor.raw, Enum):
            return self._enum_converter

        raise ParserNotFound(descriptor.raw)

    def is_convertible(self, requested: Any) -> bool:
        """Whether ``resolve`` would find a converter."""
        try:
            self.resolve(requested)
        except ParserNotFound:
            return False
        return True

    def convert(self, path: str, value: ConfigValue, requested: Any) -> Any:
        """
        Convert a tree value found at ``path``.

        Args:
            path: Full path of the value, used in error messages
            value: Leaf or node from the configuration tree
            requested: Target type or TypeDescriptor

        Returns:
            The converted value

        Raises:
            ParserNotFound: If no converter applies
            ConversionFailed: If the converter rejects the raw value
        """
        descriptor = TypeDescriptor.of(requested)

        if isinstance(value, ConfigNode):
            if descriptor.kind is TypeKind.MAP and not self.is_registered(descriptor.raw):
                return self._convert_node(path, value, descriptor)
            raise ConversionFailed(path, value.to_dict(), descriptor,
                                   "expected a single value but found a section")

        converter = self.resolve(descriptor)
        try:
            return converter.parse(value.value, descriptor)
        except ConversionFailed as e:
            raise e.with_path(path) from e.__cause__
        except PARSE_ERRORS as e:
            raise ConversionFailed(path, value.value, descriptor, str(e)) from e

    def _convert_node(self, path: str, node: ConfigNode, descriptor: TypeDescriptor) -> Dict[Any, Any]:
        """Convert every child of a section into a dict entry."""
        result: Dict[Any, Any] = {}
        for segment, child in node.children.items():
            child_path = join_path(path, segment)
            key = self.convert(child_path, ConfigLeaf(segment), descriptor.key)
            result[key] = self.convert(child_path, child, descriptor.value)
        return result

"""Converters that wrap an element converter for delimited leaves."""
from typing import Any, Dict, List

from confbind.domain.exceptions import ConversionFailed
from confbind.domain.type_descriptor import TypeDescriptor
from confbind.infrastructure.converters.base import Converter

DEFAULT_DELIMITER = ","
PARSE_ERRORS = (ValueError, TypeError, ArithmeticError)


class CollectionConverter(Converter):
    """
    Splits a leaf on a delimiter and parses every element independently.

    The container produced follows ``descriptor.raw``: list and tuple keep the
    order, set and frozenset deduplicate. An empty leaf yields an empty
    container.
    """

    def __init__(self, element_converter: Converter, delimiter: str = DEFAULT_DELIMITER,
                 strip_elements: bool = True):
        self.element_converter = element_converter
        self.delimiter = delimiter
        self.strip_elements = strip_elements

    def split(self, raw: str) -> List[str]:
        if raw.strip() == "":
            return []
        parts = raw.split(self.delimiter)
        if self.strip_elements:
            parts = [part.strip() for part in parts]
        return parts

    def parse(self, raw: str, descriptor: TypeDescriptor) -> Any:
        element_type = descriptor.element
        values = []
        for part in self.split(raw):
            try:
                values.append(self.element_converter.parse(part, element_type))
            except ConversionFailed:
                raise
            except PARSE_ERRORS as e:
                raise ConversionFailed(None, part, element_type, str(e)) from e
        return descriptor.raw(values)

    def __repr__(self) -> str:
        return f"CollectionConverter({self.element_converter!r}, delimiter={self.delimiter!r})"


class MapConverter(Converter):
    """Parses ``key=value`` pairs joined by the delimiter into a dict."""

    def __init__(self, key_converter: Converter, value_converter: Converter,
                 delimiter: str = DEFAULT_DELIMITER):
        self.key_converter = key_converter
        self.value_converter = value_converter
        self.delimiter = delimiter

    def parse(self, raw: str, descriptor: TypeDescriptor) -> Dict[Any, Any]:
        result: Dict[Any, Any] = {}
        if raw.strip() == "":
            return result
        for pair in raw.split(self.delimiter):
            key_text, separator, value_text = pair.partition("=")
            if not separator:
                raise ConversionFailed(None, pair, descriptor, "expected key=value")
            key = self._parse_part(self.key_converter, key_text.strip(), descriptor.key)
            result[key] = self._parse_part(self.value_converter, value_text.strip(), descriptor.value)
        return result

    @staticmethod
    def _parse_part(converter: Converter, text: str, descriptor: TypeDescriptor) -> Any:
        try:
            return converter.parse(text, descriptor)
        except ConversionFailed:
            raise
        except PARSE_ERRORS as e:
            raise ConversionFailed(None, text, descriptor, str(e)) from e

"""Converters for primitive and domain scalar types."""
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Type
from urllib.parse import SplitResult, urlsplit

from pydantic import TypeAdapter

from confbind.domain.type_descriptor import TypeDescriptor
from confbind.infrastructure.converters.base import Converter

TRUE_VALUES = frozenset({"true", "yes", "y", "on", "1"})
FALSE_VALUES = frozenset({"false", "no", "n", "off", "0"})


class StringConverter(Converter):
    """Returns the raw text untouched, whitespace included."""

    def parse(self, raw: str, descriptor: TypeDescriptor) -> str:
        return raw


class BooleanConverter(Converter):
    """Strict boolean parsing; anything outside the known words is an error."""

    def parse(self, raw: str, descriptor: TypeDescriptor) -> bool:
        normalized = raw.strip().lower()
        if normalized in TRUE_VALUES:
            return True
        if normalized in FALSE_VALUES:
            return False
        raise ValueError(f"'{raw}' is not a boolean")


class DecimalConverter(Converter):
    def parse(self, raw: str, descriptor: TypeDescriptor) -> Decimal:
        try:
            return Decimal(raw.strip())
        except InvalidOperation as e:
            raise ValueError(f"'{raw}' is not a decimal number") from e


class UrlConverter(Converter):
    """Splits a URL with urllib; a scheme and a location are required."""

    def parse(self, raw: str, descriptor: TypeDescriptor) -> SplitResult:
        result = urlsplit(raw.strip())
        if not result.scheme or not (result.netloc or result.path):
            raise ValueError(f"'{raw}' is not an absolute URL")
        return result


class PydanticConverter(Converter):
    """Validates the raw text with a pydantic TypeAdapter (AnyUrl, HttpUrl, ...)."""

    def __init__(self, target: Any):
        self.target = target
        self._adapter = TypeAdapter(target)

    def parse(self, raw: str, descriptor: TypeDescriptor) -> Any:
        # pydantic's ValidationError is a ValueError subclass
        return self._adapter.validate_python(raw.strip())

    def __repr__(self) -> str:
        return f"PydanticConverter({getattr(self.target, '__name__', self.target)})"


class EnumConverter(Converter):
    """Looks an enum member up by name first, then by value."""

    def parse(self, raw: str, descriptor: TypeDescriptor) -> Enum:
        enum_type: Type[Enum] = descriptor.raw
        text = raw.strip()
        if text in enum_type.__members__:
            return enum_type.__members__[text]
        for member in enum_type:
            if str(member.value) == text:
                return member
        choices = ", ".join(enum_type.__members__)
        raise ValueError(f"'{raw}' is not one of: {choices}")

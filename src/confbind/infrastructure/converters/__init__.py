"""Built-in converters."""

from confbind.infrastructure.converters.base import Converter, FunctionConverter, as_converter
from confbind.infrastructure.converters.containers import CollectionConverter, MapConverter
from confbind.infrastructure.converters.defaults import default_converters
from confbind.infrastructure.converters.scalar import (
    BooleanConverter,
    DecimalConverter,
    EnumConverter,
    PydanticConverter,
    StringConverter,
    UrlConverter,
)
from confbind.infrastructure.converters.temporal import (
    ISO_FORMAT,
    DateConverter,
    DateTimeConverter,
    TimeConverter,
)

__all__ = [
    "Converter",
    "FunctionConverter",
    "as_converter",
    "CollectionConverter",
    "MapConverter",
    "default_converters",
    "BooleanConverter",
    "DecimalConverter",
    "EnumConverter",
    "PydanticConverter",
    "StringConverter",
    "UrlConverter",
    "ISO_FORMAT",
    "DateConverter",
    "DateTimeConverter",
    "TimeConverter",
]

"""Converters every new registry starts with."""
import pathlib
import uuid
from decimal import Decimal
from fractions import Fraction
from typing import Any, Dict
from urllib.parse import SplitResult

from pydantic import AnyUrl, HttpUrl

from confbind.infrastructure.converters.base import Converter, FunctionConverter
from confbind.infrastructure.converters.scalar import (
    BooleanConverter,
    DecimalConverter,
    PydanticConverter,
    StringConverter,
    UrlConverter,
)


def default_converters() -> Dict[Any, Converter]:
    """
    Build the default converter table.

    Date and time types are intentionally absent; they need a pattern
    registered by the application.
    """
    return {
        str: StringConverter(),
        int: FunctionConverter(int),
        float: FunctionConverter(float),
        bool: BooleanConverter(),
        Decimal: DecimalConverter(),
        Fraction: FunctionConverter(Fraction),
        pathlib.Path: FunctionConverter(pathlib.Path),
        pathlib.PurePath: FunctionConverter(pathlib.PurePath),
        uuid.UUID: FunctionConverter(uuid.UUID),
        SplitResult: UrlConverter(),
        AnyUrl: PydanticConverter(AnyUrl),
        HttpUrl: PydanticConverter(HttpUrl),
    }

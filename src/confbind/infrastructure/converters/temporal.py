"""Date and time converters.

There is no default pattern: these converters are only available after the
application registers one with an explicit ``strftime`` pattern or with
``ISO_FORMAT``, for example::

    registry.register(datetime.date, DateConverter("%d-%m-%Y"))
    registry.register(datetime.datetime, DateTimeConverter(ISO_FORMAT))
"""
import datetime
from typing import Any

from confbind.domain.type_descriptor import TypeDescriptor
from confbind.infrastructure.converters.base import Converter

ISO_FORMAT = "iso"


class _PatternConverter(Converter):
    def __init__(self, pattern: str):
        if not pattern:
            raise ValueError("A date/time pattern is required")
        self.pattern = pattern

    @property
    def is_iso(self) -> bool:
        return self.pattern == ISO_FORMAT

    def _strptime(self, raw: str) -> datetime.datetime:
        return datetime.datetime.strptime(raw.strip(), self.pattern)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.pattern!r})"


class DateConverter(_PatternConverter):
    def parse(self, raw: str, descriptor: TypeDescriptor) -> datetime.date:
        if self.is_iso:
            return datetime.date.fromisoformat(raw.strip())
        return self._strptime(raw).date()


class DateTimeConverter(_PatternConverter):
    """Parses datetimes; ``%z`` in the pattern yields an aware datetime."""

    def parse(self, raw: str, descriptor: TypeDescriptor) -> datetime.datetime:
        if self.is_iso:
            return datetime.datetime.fromisoformat(raw.strip())
        return self._strptime(raw)


class TimeConverter(_PatternConverter):
    """Parses times of day, keeping any UTC offset from ``%z``."""

    def parse(self, raw: str, descriptor: TypeDescriptor) -> Any:
        if self.is_iso:
            return datetime.time.fromisoformat(raw.strip())
        return self._strptime(raw).timetz()

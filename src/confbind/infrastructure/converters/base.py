"""Converter interface and the adapter for plain callables."""
from abc import ABC, abstractmethod
from typing import Any, Callable

from confbind.domain.type_descriptor import TypeDescriptor


class Converter(ABC):
    """Parses raw leaf text into a value of the requested type."""

    @abstractmethod
    def parse(self, raw: str, descriptor: TypeDescriptor) -> Any:
        """
        Parse ``raw`` into the type described by ``descriptor``.

        Raises:
            ValueError: If the raw text is not a valid representation
        """

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class FunctionConverter(Converter):
    """Wraps a ``str -> value`` callable such as ``int`` or ``Path``."""

    def __init__(self, function: Callable[[str], Any], strip: bool = True):
        self.function = function
        self.strip = strip

    def parse(self, raw: str, descriptor: TypeDescriptor) -> Any:
        return self.function(raw.strip() if self.strip else raw)

    def __repr__(self) -> str:
        name = getattr(self.function, "__name__", repr(self.function))
        return f"FunctionConverter({name})"


def as_converter(candidate: Any) -> Converter:
    """Accept either a Converter or a plain callable."""
    if isinstance(candidate, Converter):
        return candidate
    if callable(candidate):
        return FunctionConverter(candidate)
    raise TypeError(f"Expected a Converter or a callable, got {type(candidate).__name__}")

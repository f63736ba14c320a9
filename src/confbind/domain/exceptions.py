"""Exception hierarchy for configuration lookup, conversion and binding."""
from typing import Any, Optional


def _type_name(target_type: Any) -> str:
    """Readable name for a requested type or TypeDescriptor."""
    name = getattr(target_type, "__name__", None)
    if name is not None:
        return name
    return str(target_type)


class ConfbindError(Exception):
    """Base exception for all configuration errors."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class SettingNotFound(ConfbindError):
    """Raised when a required path is absent and no default was supplied."""

    def __init__(self, path: str):
        super().__init__(f"Setting '{path}' not found")
        self.path = path


class ParserNotFound(ConfbindError):
    """Raised when no converter exists for a type that cannot be bound either."""

    def __init__(self, target_type: Any, details: Optional[Any] = None):
        super().__init__(f"Parser for type '{_type_name(target_type)}' was not found", details)
        self.target_type = target_type


class ConversionFailed(ConfbindError):
    """Raised when a converter rejects a raw value."""

    def __init__(self, path: Optional[str], raw_value: Any, target_type: Any,
                 reason: Optional[str] = None):
        where = f" at '{path}'" if path is not None else ""
        message = f"Cannot convert {raw_value!r}{where} to '{_type_name(target_type)}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, reason)
        self.path = path
        self.raw_value = raw_value
        self.target_type = target_type
        self.reason = reason

    def with_path(self, path: str) -> "ConversionFailed":
        """Copy of this error located at ``path``, keeping the original cause."""
        located = ConversionFailed(path, self.raw_value, self.target_type, self.reason)
        located.__cause__ = self.__cause__
        return located


class ReloadFailed(ConfbindError):
    """Wraps an exception raised while reloading; only delivered to error listeners."""

    def __init__(self, cause: BaseException):
        super().__init__(f"Reload failed: {cause}", cause)
        self.cause = cause


class BindingError(ConfbindError):
    """Raised when an interface declares members that cannot be bound."""

    def __init__(self, interface: Any, reason: str):
        super().__init__(f"Cannot bind '{_type_name(interface)}': {reason}")
        self.interface = interface
        self.reason = reason

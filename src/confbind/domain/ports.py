"""Ports between the conversion engine and its collaborators."""
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional, Type, TypeVar

from confbind.domain.config_value import ConfigValue

T = TypeVar("T")

ReloadListener = Callable[[], None]
ReloadErrorListener = Callable[[Exception], None]
ChangeListener = Callable[[Any, Any], None]


class _Missing:
    """Marker for an omitted default; None is a legitimate default."""

    _instance: Optional["_Missing"] = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


class ConfigSource(ABC):
    """Port for anything that can produce raw configuration text."""

    @abstractmethod
    def read(self) -> str:
        """Return the current raw content."""


class ConfigLoader(ABC):
    """
    Port for loaders that turn a source format into a ConfigValue tree.

    Implementations must publish a new tree atomically on reload instead of
    mutating the tree readers may currently hold.
    """

    @abstractmethod
    def get(self, path: str) -> Optional[ConfigValue]:
        """Return the value at ``path`` or None when absent."""

    @abstractmethod
    def reload(self) -> None:
        """Refresh the tree from the source; raise on failure."""

    def contains(self, path: str) -> bool:
        """Whether ``path`` resolves to a value."""
        return self.get(path) is not None


class ConfigProvider(ABC):
    """User facing access to typed configuration values."""

    @abstractmethod
    def get(self, path: str, type_: Any = None, *, default: Any = MISSING) -> Any:
        """
        Get a converted value, or a bound interface.

        Raises:
            SettingNotFound: If the path is absent and no default was given
        """

    @abstractmethod
    def get_or_none(self, path: str, type_: Any = None, *, default: Any = None) -> Any:
        """Get a converted value, returning ``default`` when the path is absent."""

    @abstractmethod
    def contains(self, path: str) -> bool:
        """Whether ``path`` is present in the underlying tree."""

    @abstractmethod
    def load(self, path: str) -> Optional[ConfigValue]:
        """Return the raw tree value at ``path``."""

    @abstractmethod
    def bind(self, path: str, interface: Type[T]) -> T:
        """Bind the subtree at ``path`` to ``interface``."""

    @abstractmethod
    def reload(self) -> None:
        """Reload the underlying tree; never raises."""

    @abstractmethod
    def cancel_reload(self) -> None:
        """Stop receiving reloads from the reload strategy."""

    @abstractmethod
    def add_reload_listener(self, listener: ReloadListener) -> None:
        """Call ``listener`` after every successful reload."""

    @abstractmethod
    def add_reload_error_listener(self, listener: ReloadErrorListener) -> None:
        """Call ``listener`` with the failure of every unsuccessful reload."""

    @abstractmethod
    def add_change_listener(self, path: str, type_: Any, listener: ChangeListener) -> None:
        """Call ``listener(before, after)`` for ``path`` after every reload."""

    @abstractmethod
    def remove_listener(self, path: str, type_: Any) -> None:
        """Remove the change listener registered for ``path`` and ``type_``."""

    @property
    @abstractmethod
    def registry(self) -> Any:
        """Conversion registry used for scalars and collections."""

    @property
    @abstractmethod
    def binder(self) -> Any:
        """Binder used for interfaces."""


class ReloadStrategy(ABC):
    """Port for whatever decides when providers reload."""

    @abstractmethod
    def register(self, provider: ConfigProvider) -> None:
        """Start triggering reloads on ``provider``."""

    @abstractmethod
    def deregister(self, provider: ConfigProvider) -> None:
        """Stop triggering reloads on ``provider``."""

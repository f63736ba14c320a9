"""confbind - typed configuration conversion and interface binding."""

from confbind.bootstrap import create_provider, create_registry
from confbind.config import ConfbindSettings
from confbind.domain import (
    MISSING,
    BindingError,
    ConfbindError,
    ConfigLeaf,
    ConfigLoader,
    ConfigNode,
    ConfigProvider,
    ConfigSource,
    ConversionFailed,
    ParserNotFound,
    ReloadFailed,
    ReloadStrategy,
    SettingNotFound,
    TypeDescriptor,
    TypeKind,
)
from confbind.infrastructure.binding import Binder, setting
from confbind.infrastructure.loaders import (
    CallableConfigSource,
    FileConfigSource,
    JsonConfigLoader,
    MappingConfigLoader,
    PropertiesConfigLoader,
    StringConfigSource,
    TreeConfigLoader,
    YamlConfigLoader,
)
from confbind.infrastructure.registry import ConversionRegistry
from confbind.infrastructure.reload import TimedReloadStrategy
from confbind.providers import CachedConfigProvider, DefaultConfigProvider

__version__ = "0.1.0"

__all__ = [
    "create_provider",
    "create_registry",
    "ConfbindSettings",
    "MISSING",
    "BindingError",
    "ConfbindError",
    "ConfigLeaf",
    "ConfigLoader",
    "ConfigNode",
    "ConfigProvider",
    "ConfigSource",
    "ConversionFailed",
    "ParserNotFound",
    "ReloadFailed",
    "ReloadStrategy",
    "SettingNotFound",
    "TypeDescriptor",
    "TypeKind",
    "Binder",
    "setting",
    "CallableConfigSource",
    "FileConfigSource",
    "JsonConfigLoader",
    "MappingConfigLoader",
    "PropertiesConfigLoader",
    "StringConfigSource",
    "TreeConfigLoader",
    "YamlConfigLoader",
    "ConversionRegistry",
    "TimedReloadStrategy",
    "CachedConfigProvider",
    "DefaultConfigProvider",
]

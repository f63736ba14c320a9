"""Domain layer - configuration tree, type descriptors, ports and errors."""

from confbind.domain.config_value import ConfigLeaf, ConfigNode, ConfigValue, join_path, to_config
from confbind.domain.exceptions import (
    BindingError,
    ConfbindError,
    ConversionFailed,
    ParserNotFound,
    ReloadFailed,
    SettingNotFound,
)
from confbind.domain.ports import MISSING, ConfigLoader, ConfigProvider, ConfigSource, ReloadStrategy
from confbind.domain.type_descriptor import TypeDescriptor, TypeKind

__all__ = [
    "ConfigLeaf",
    "ConfigNode",
    "ConfigValue",
    "join_path",
    "to_config",
    "BindingError",
    "ConfbindError",
    "ConversionFailed",
    "ParserNotFound",
    "ReloadFailed",
    "SettingNotFound",
    "MISSING",
    "ConfigLoader",
    "ConfigProvider",
    "ConfigSource",
    "ReloadStrategy",
    "TypeDescriptor",
    "TypeKind",
]

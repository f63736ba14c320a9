"""Reference loaders and sources."""

from confbind.infrastructure.loaders.loaders import (
    JsonConfigLoader,
    MappingConfigLoader,
    PropertiesConfigLoader,
    SourceConfigLoader,
    TreeConfigLoader,
    YamlConfigLoader,
    expand_dotted,
)
from confbind.infrastructure.loaders.sources import (
    CallableConfigSource,
    FileConfigSource,
    StringConfigSource,
)

__all__ = [
    "CallableConfigSource",
    "FileConfigSource",
    "JsonConfigLoader",
    "MappingConfigLoader",
    "PropertiesConfigLoader",
    "SourceConfigLoader",
    "StringConfigSource",
    "TreeConfigLoader",
    "YamlConfigLoader",
    "expand_dotted",
]

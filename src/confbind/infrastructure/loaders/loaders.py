"""Reference loaders turning common formats into configuration trees."""
import json
import threading
from abc import abstractmethod
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

import yaml

from confbind.domain.config_value import PATH_SEPARATOR, ConfigNode, ConfigValue, to_config
from confbind.domain.ports import ConfigLoader, ConfigSource
from confbind.infrastructure.loaders.sources import FileConfigSource
from confbind.infrastructure.logging.logger import get_logger

MappingSupplier = Callable[[], Mapping[str, Any]]


class TreeConfigLoader(ConfigLoader):
    """
    Base for loaders that parse their whole input into one tree.

    The tree is built on construction and rebuilt by ``reload``. A new tree
    replaces the old one with a single assignment; a failing ``_load`` leaves
    the current tree in place.
    """

    def __init__(self) -> None:
        self.logger = get_logger(__name__)
        self._reload_lock = threading.Lock()
        self._root: ConfigNode = self._load()

    @abstractmethod
    def _load(self) -> ConfigNode:
        """Build a fresh tree from the underlying input."""

    @property
    def root(self) -> ConfigNode:
        return self._root

    def get(self, path: str) -> Optional[ConfigValue]:
        return self._root.resolve(path)

    def reload(self) -> None:
        with self._reload_lock:
            root = self._load()
            self._root = root
        self.logger.debug(f"{type(self).__name__} loaded {len(root)} top-level entries")


def expand_dotted(data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Expand dotted keys at every level: ``{"a.b": 1}`` becomes ``{"a": {"b": 1}}``.

    Sections sharing a prefix are merged.
    """
    result: Dict[str, Any] = {}
    for dotted_key, value in data.items():
        if isinstance(value, Mapping):
            value = expand_dotted(value)
        segments = str(dotted_key).split(PATH_SEPARATOR)
        current = result
        for segment in segments[:-1]:
            existing = current.get(segment)
            if not isinstance(existing, dict):
                existing = {}
                current[segment] = existing
            current = existing
        leaf_key = segments[-1]
        existing = current.get(leaf_key)
        if isinstance(existing, dict) and isinstance(value, dict):
            existing.update(value)
        else:
            current[leaf_key] = value
    return result


class MappingConfigLoader(TreeConfigLoader):
    """Loader over a dict, or a callable returning one on every (re)load."""

    def __init__(self, data: Union[Mapping[str, Any], MappingSupplier]):
        self._data = data
        super().__init__()

    def _load(self) -> ConfigNode:
        data = self._data() if callable(self._data) else self._data
        return to_config(expand_dotted(data))


class SourceConfigLoader(TreeConfigLoader):
    """Base for loaders parsing the text of a ConfigSource."""

    def __init__(self, source: ConfigSource):
        self.source = source
        super().__init__()

    @classmethod
    def from_file(cls, path: Union[str, Path], encoding: str = "utf-8") -> "SourceConfigLoader":
        return cls(FileConfigSource(path, encoding))

    def _load(self) -> ConfigNode:
        return self.parse(self.source.read())

    @abstractmethod
    def parse(self, text: str) -> ConfigNode:
        """Parse raw text into a tree; raise ValueError on malformed input."""


class PropertiesConfigLoader(SourceConfigLoader):
    """
    ``.properties`` style loader.

    Supported syntax: ``key=value`` and ``key: value`` lines, ``#`` and ``!``
    comment lines, and lines continued with a trailing backslash. Dotted keys
    become nested sections.
    """

    def parse(self, text: str) -> ConfigNode:
        entries: Dict[str, str] = {}
        for line in _logical_lines(text):
            key, value = _split_property(line)
            entries[key] = value
        return ConfigNode.from_flat(entries)


def _logical_lines(text: str) -> List[str]:
    lines: List[str] = []
    pending = ""
    for raw_line in text.splitlines():
        line = raw_line.lstrip() if pending else raw_line.strip()
        if not pending and (not line or line[0] in "#!"):
            continue
        if _is_continued(line):
            pending += line[:-1]
            continue
        lines.append(pending + line)
        pending = ""
    if pending:
        lines.append(pending)
    return lines


def _is_continued(line: str) -> bool:
    trailing = len(line) - len(line.rstrip("\\"))
    return trailing % 2 == 1


def _split_property(line: str) -> Tuple[str, str]:
    positions = [index for index in (line.find("="), line.find(":")) if index >= 0]
    if not positions:
        return line.strip(), ""
    separator = min(positions)
    return line[:separator].strip(), line[separator + 1:].strip()


class JsonConfigLoader(SourceConfigLoader):
    """JSON loader; the document root must be an object."""

    def parse(self, text: str) -> ConfigNode:
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError(f"JSON configuration root must be an object, got {type(data).__name__}")
        return to_config(expand_dotted(data))


class YamlConfigLoader(SourceConfigLoader):
    """YAML loader using ``yaml.safe_load``; an empty document is an empty tree."""

    def parse(self, text: str) -> ConfigNode:
        data = yaml.safe_load(text)
        if data is None:
            return ConfigNode({})
        if not isinstance(data, dict):
            raise ValueError(f"YAML configuration root must be a mapping, got {type(data).__name__}")
        return to_config(expand_dotted(data))

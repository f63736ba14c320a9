"""Generic configuration tree shared by loaders and the conversion engine.

A tree is made of two kinds of values:

- ``ConfigLeaf`` holds the raw text of a single setting.
- ``ConfigNode`` maps path segments to child values.

Trees are immutable. Loaders build a new tree on every reload and publish it
by swapping a single reference, so readers never observe a partially updated
tree.
"""
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Optional, Union

PATH_SEPARATOR = "."


@dataclass(frozen=True)
class ConfigLeaf:
    """A single raw setting value."""

    value: str

    def is_leaf(self) -> bool:
        return True


@dataclass(frozen=True)
class ConfigNode:
    """A nested mapping of path segment to ConfigValue."""

    children: Mapping[str, "ConfigValue"] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Freeze a private copy so later changes to the source dict are invisible.
        object.__setattr__(self, "children", MappingProxyType(dict(self.children)))

    def is_leaf(self) -> bool:
        return False

    def __hash__(self) -> int:
        return hash(frozenset(self.children.items()))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ConfigNode):
            return NotImplemented
        return dict(self.children) == dict(other.children)

    def __repr__(self) -> str:
        return f"ConfigNode(children={dict(self.children)!r})"

    def __iter__(self) -> Iterator[str]:
        return iter(self.children)

    def __len__(self) -> int:
        return len(self.children)

    def child(self, segment: str) -> Optional["ConfigValue"]:
        return self.children.get(segment)

    def resolve(self, path: str) -> Optional["ConfigValue"]:
        """
        Resolve a dot-delimited path below this node.

        Args:
            path: Dot-delimited path; the empty path resolves to this node

        Returns:
            The value at ``path`` or None when any segment is missing
        """
        if path == "":
            return self

        current: ConfigValue = self
        for segment in path.split(PATH_SEPARATOR):
            if not isinstance(current, ConfigNode):
                return None
            next_value = current.child(segment)
            if next_value is None:
                return None
            current = next_value
        return current

    def to_dict(self) -> Dict[str, Any]:
        """Plain nested dict, leaves rendered as their raw strings."""
        result: Dict[str, Any] = {}
        for key, value in self.children.items():
            if isinstance(value, ConfigNode):
                result[key] = value.to_dict()
            else:
                result[key] = value.value
        return result

    @classmethod
    def from_flat(cls, entries: Mapping[str, Any]) -> "ConfigNode":
        """
        Build a tree from flat dotted keys such as ``{"nested.a": "b"}``.

        A key that is both a leaf and a parent keeps the nested mapping; the
        leaf value is dropped, since a path resolves to exactly one value.
        """
        nested: Dict[str, Any] = {}
        for dotted_key, value in entries.items():
            segments = dotted_key.split(PATH_SEPARATOR)
            current = nested
            for segment in segments[:-1]:
                existing = current.get(segment)
                if not isinstance(existing, dict):
                    existing = {}
                    current[segment] = existing
                current = existing
            leaf_key = segments[-1]
            if isinstance(current.get(leaf_key), dict):
                continue
            current[leaf_key] = value
        return to_config(nested)


ConfigValue = Union[ConfigLeaf, ConfigNode]


def _leaf_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    return str(value)


def to_config(obj: Any) -> ConfigValue:
    """
    Convert plain Python data (as produced by json/yaml parsers) into a tree.

    Mappings become nodes, sequences become comma-joined leaves so that the
    collection converters can split them again, and everything else becomes
    a leaf holding its string form.
    """
    if isinstance(obj, (ConfigLeaf, ConfigNode)):
        return obj
    if isinstance(obj, Mapping):
        return ConfigNode({str(key): to_config(value) for key, value in obj.items()})
    if isinstance(obj, (list, tuple, set, frozenset)):
        return ConfigLeaf(",".join(_leaf_text(item) for item in obj))
    return ConfigLeaf(_leaf_text(obj))


def join_path(base: str, segment: str) -> str:
    """Append a segment to a base path; an empty base yields the segment itself."""
    if not base:
        return segment
    return f"{base}{PATH_SEPARATOR}{segment}"

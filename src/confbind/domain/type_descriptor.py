"""Normalized description of a requested target type."""
import collections.abc
import inspect
import types
import typing
from dataclasses import dataclass
from enum import Enum
from typing import Any, Tuple

_NONE_TYPE = type(None)

# Origins that are converted as delimited leaves, mapped to the concrete
# container that is produced.
_COLLECTION_ORIGINS = {
    list: list,
    tuple: tuple,
    set: set,
    frozenset: frozenset,
    collections.abc.Sequence: list,
    collections.abc.MutableSequence: list,
    collections.abc.Collection: list,
    collections.abc.Iterable: list,
    collections.abc.Set: frozenset,
    collections.abc.MutableSet: set,
}

_MAP_ORIGINS = {
    dict: dict,
    collections.abc.Mapping: dict,
    collections.abc.MutableMapping: dict,
}


class TypeKind(str, Enum):
    """Structural kind of a requested type."""

    SCALAR = "scalar"
    COLLECTION = "collection"
    MAP = "map"
    INTERFACE = "interface"


_ARITY = {
    TypeKind.SCALAR: 0,
    TypeKind.COLLECTION: 1,
    TypeKind.MAP: 2,
    TypeKind.INTERFACE: 0,
}


@dataclass(frozen=True)
class TypeDescriptor:
    """
    Requested type reduced to its raw kind and nested element types.

    Descriptors are hashable and compare by value, so they are used directly
    as cache and listener keys.
    """

    kind: TypeKind
    raw: Any
    element_types: Tuple["TypeDescriptor", ...] = ()

    def __post_init__(self) -> None:
        expected = _ARITY[self.kind]
        if len(self.element_types) != expected:
            raise ValueError(
                f"{self.kind.value} descriptor for {self.raw!r} needs {expected} "
                f"element type(s), got {len(self.element_types)}"
            )

    @property
    def element(self) -> "TypeDescriptor":
        """Element type of a collection."""
        return self.element_types[0]

    @property
    def key(self) -> "TypeDescriptor":
        """Key type of a map."""
        return self.element_types[0]

    @property
    def value(self) -> "TypeDescriptor":
        """Value type of a map."""
        return self.element_types[1]

    @property
    def name(self) -> str:
        raw_name = getattr(self.raw, "__name__", repr(self.raw))
        if not self.element_types:
            return raw_name
        inner = ", ".join(element.name for element in self.element_types)
        return f"{raw_name}[{inner}]"

    def __str__(self) -> str:
        return self.name

    @classmethod
    def scalar(cls, raw: Any) -> "TypeDescriptor":
        return cls(TypeKind.SCALAR, raw)

    @classmethod
    def of(cls, requested: Any) -> "TypeDescriptor":
        """
        Normalize a Python type or typing construct into a descriptor.

        Args:
            requested: A class, a parameterized generic such as ``list[int]``,
                ``Optional[T]`` or an existing TypeDescriptor

        Returns:
            The normalized TypeDescriptor

        Raises:
            TypeError: If ``requested`` is not a type, or is a fixed-length
                tuple such as ``Tuple[int, str]``
        """
        if isinstance(requested, TypeDescriptor):
            return requested
        if not is_type_like(requested):
            raise TypeError(f"Expected a type or typing construct, got {requested!r}")

        requested = unwrap_optional(requested)
        origin = typing.get_origin(requested)
        args = typing.get_args(requested)

        if origin is None and requested in _COLLECTION_ORIGINS:
            origin, args = requested, ()
        if origin is None and requested in _MAP_ORIGINS:
            origin, args = requested, ()

        if origin is tuple and args and not (len(args) == 2 and args[1] is Ellipsis):
            raise TypeError(f"Only homogeneous tuples (Tuple[T, ...]) are supported, got {requested!r}")

        if origin in _COLLECTION_ORIGINS:
            element = args[0] if args else str
            return cls(TypeKind.COLLECTION, _COLLECTION_ORIGINS[origin], (cls.of(element),))

        if origin in _MAP_ORIGINS:
            key_type, value_type = args if len(args) == 2 else (str, str)
            return cls(TypeKind.MAP, dict, (cls.of(key_type), cls.of(value_type)))

        if origin is typing.Annotated:
            # Annotated aliases (e.g. pydantic URL types) are registered as a whole.
            return cls(TypeKind.SCALAR, requested)

        if origin is not None:
            # Other parameterized generics are looked up by their origin.
            requested = origin

        if is_interface(requested):
            return cls(TypeKind.INTERFACE, requested)
        return cls(TypeKind.SCALAR, requested)


def is_type_like(candidate: Any) -> bool:
    """Whether ``candidate`` can be normalized: a class, a typing construct or a descriptor."""
    if isinstance(candidate, TypeDescriptor) or inspect.isclass(candidate):
        return True
    if candidate is typing.Any or _is_pep604_union(candidate):
        return True
    return typing.get_origin(candidate) is not None


def unwrap_optional(requested: Any) -> Any:
    """Strip ``Optional[...]`` from an annotation, leaving other unions intact."""
    if typing.get_origin(requested) is typing.Union or _is_pep604_union(requested):
        members = [arg for arg in typing.get_args(requested) if arg is not _NONE_TYPE]
        if len(members) == 1:
            return members[0]
    return requested


def is_optional(requested: Any) -> bool:
    """Whether an annotation admits None."""
    if typing.get_origin(requested) is typing.Union or _is_pep604_union(requested):
        return _NONE_TYPE in typing.get_args(requested)
    return requested is None or requested is _NONE_TYPE


def _is_pep604_union(requested: Any) -> bool:
    union_type = getattr(types, "UnionType", None)
    return union_type is not None and isinstance(requested, union_type)


def is_interface(candidate: Any) -> bool:
    """
    Whether a class is a bindable interface.

    Abstract classes and ``typing.Protocol`` classes qualify. Enums never do,
    even when they carry abstract members.
    """
    if not inspect.isclass(candidate):
        return False
    if issubclass(candidate, Enum):
        return False
    if getattr(candidate, "_is_protocol", False):
        return True
    return inspect.isabstract(candidate)

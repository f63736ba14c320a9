"""Tests for TypeDescriptor normalization."""
from abc import ABC, abstractmethod
from decimal import Decimal
from enum import Enum
from typing import AbstractSet, Dict, FrozenSet, List, Mapping, Optional, Protocol, Sequence, Set, Tuple

import pytest

from confbind.domain.type_descriptor import (
    TypeDescriptor,
    TypeKind,
    is_interface,
    is_optional,
    is_type_like,
    unwrap_optional,
)


class Settings(ABC):
    @abstractmethod
    def port(self) -> int: ...


class SettingsProtocol(Protocol):
    def port(self) -> int: ...


class Color(Enum):
    RED = "red"


class TestTypeDescriptor:
    """Test TypeDescriptor.of for the supported typing constructs."""

    def test_scalars(self):
        assert TypeDescriptor.of(int) == TypeDescriptor(TypeKind.SCALAR, int)
        assert TypeDescriptor.of(Decimal).kind is TypeKind.SCALAR
        assert TypeDescriptor.of(Color).kind is TypeKind.SCALAR

    @pytest.mark.parametrize("requested, raw", [
        (List[int], list),
        (Sequence[int], list),
        (Tuple[int, ...], tuple),
        (Set[int], set),
        (FrozenSet[int], frozenset),
        (AbstractSet[int], frozenset),
    ])
    def test_collections(self, requested, raw):
        descriptor = TypeDescriptor.of(requested)

        assert descriptor.kind is TypeKind.COLLECTION
        assert descriptor.raw is raw
        assert descriptor.element == TypeDescriptor.scalar(int)

    def test_bare_containers_hold_strings(self):
        assert TypeDescriptor.of(list).element == TypeDescriptor.scalar(str)
        assert TypeDescriptor.of(dict).value == TypeDescriptor.scalar(str)

    def test_maps(self):
        descriptor = TypeDescriptor.of(Mapping[str, List[int]])

        assert descriptor.kind is TypeKind.MAP
        assert descriptor.raw is dict
        assert descriptor.key == TypeDescriptor.scalar(str)
        assert descriptor.value == TypeDescriptor.of(List[int])
        assert TypeDescriptor.of(Dict[str, int]).name == "dict[str, int]"

    def test_optional_is_unwrapped(self):
        assert TypeDescriptor.of(Optional[int]) == TypeDescriptor.of(int)

    def test_interfaces(self):
        assert TypeDescriptor.of(Settings).kind is TypeKind.INTERFACE
        assert TypeDescriptor.of(SettingsProtocol).kind is TypeKind.INTERFACE

    def test_descriptor_passes_through(self):
        descriptor = TypeDescriptor.of(List[int])
        assert TypeDescriptor.of(descriptor) is descriptor

    def test_descriptors_are_hashable_keys(self):
        keys = {("a", TypeDescriptor.of(List[int])): 1}
        assert keys[("a", TypeDescriptor.of(List[int]))] == 1

    def test_arity_is_validated(self):
        with pytest.raises(ValueError):
            TypeDescriptor(TypeKind.COLLECTION, list)
        with pytest.raises(ValueError):
            TypeDescriptor(TypeKind.SCALAR, int, (TypeDescriptor.scalar(int),))

    @pytest.mark.parametrize("requested", [Tuple[int, str], Tuple[int]])
    def test_fixed_length_tuples_are_rejected(self, requested):
        with pytest.raises(TypeError, match="homogeneous"):
            TypeDescriptor.of(requested)

    @pytest.mark.parametrize("requested", [1, "int", None, 2.5])
    def test_non_types_are_rejected(self, requested):
        with pytest.raises(TypeError):
            TypeDescriptor.of(requested)


class TestTypeHelpers:
    """Test the optional and interface helpers."""

    def test_is_optional(self):
        assert is_optional(Optional[int])
        assert not is_optional(int)

    def test_unwrap_optional_keeps_real_unions(self):
        from typing import Union

        union = Union[int, str]
        assert unwrap_optional(union) is union

    def test_is_interface(self):
        assert is_interface(Settings)
        assert is_interface(SettingsProtocol)
        assert not is_interface(int)
        assert not is_interface(Color)
        assert not is_interface("Settings")

    def test_is_type_like(self):
        assert is_type_like(int)
        assert is_type_like(List[int])
        assert is_type_like(Optional[Settings])
        assert is_type_like(TypeDescriptor.scalar(int))
        assert not is_type_like(1)
        assert not is_type_like("int")

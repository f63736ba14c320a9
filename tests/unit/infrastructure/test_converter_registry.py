"""Tests for the conversion registry."""
import datetime
import pathlib
import uuid
from abc import ABC, abstractmethod
from decimal import Decimal
from enum import Enum
from fractions import Fraction
from typing import Dict, FrozenSet, List, Set, Tuple
from urllib.parse import SplitResult

import pytest
from pydantic import AnyUrl, HttpUrl

from confbind.domain.config_value import ConfigLeaf, to_config
from confbind.domain.exceptions import ConversionFailed, ParserNotFound
from confbind.domain.type_descriptor import TypeDescriptor
from confbind.infrastructure.converters import DateConverter, FunctionConverter, StringConverter
from confbind.infrastructure.registry import ConversionRegistry


class Mode(Enum):
    FAST = "fast"
    SAFE = "safe"


class Bindable(ABC):
    @abstractmethod
    def value(self) -> str: ...


class Money:
    def __init__(self, text):
        self.amount, self.currency = text.split()

    def __eq__(self, other):
        return isinstance(other, Money) and (self.amount, self.currency) == (other.amount, other.currency)


class TestConversionRegistry:
    """Test registration and resolution."""

    def setup_method(self):
        self.registry = ConversionRegistry()

    def test_defaults_registered(self):
        registered = self.registry.registered_types()

        for raw_type in (str, int, float, bool, Decimal, Fraction, pathlib.Path, uuid.UUID, SplitResult):
            assert raw_type in registered
        assert datetime.date not in registered

    def test_register_callable(self):
        self.registry.register(Money, Money)

        assert self.registry.is_registered(Money)
        assert self.registry.convert("price", ConfigLeaf("10 EUR"), Money) == Money("10 EUR")

    def test_register_overwrites(self):
        self.registry.register(int, FunctionConverter(lambda raw: int(raw) * 10))
        assert self.registry.convert("n", ConfigLeaf("2"), int) == 20

    def test_unregister(self):
        assert self.registry.unregister(int)
        assert not self.registry.unregister(int)
        assert not self.registry.is_convertible(int)

    def test_clear_registrations(self):
        self.registry.clear_registrations()
        assert self.registry.registered_types() == []

    def test_empty_registry(self):
        registry = ConversionRegistry(converters={})
        with pytest.raises(ParserNotFound):
            registry.resolve(str)

    def test_resolution_of_wrappers_and_enums(self):
        assert self.registry.is_convertible(List[int])
        assert self.registry.is_convertible(Dict[str, List[int]])
        assert self.registry.is_convertible(Mode)

    def test_unknown_types_are_not_convertible(self):
        assert not self.registry.is_convertible(Bindable)
        assert not self.registry.is_convertible(datetime.date)
        assert not self.registry.is_convertible(List[datetime.date])
        with pytest.raises(ParserNotFound, match="date"):
            self.registry.resolve(datetime.date)

    def test_date_after_registration(self):
        self.registry.register(datetime.date, DateConverter("%d-%m-%Y"))
        result = self.registry.convert("when", ConfigLeaf("01-01-2017"), datetime.date)
        assert result == datetime.date(2017, 1, 1)


class TestConversion:
    """Test converting tree values."""

    def setup_method(self):
        self.registry = ConversionRegistry()

    @pytest.mark.parametrize("raw, requested, expected", [
        ("1", int, 1),
        ("2.1", float, 2.1),
        ("yes", bool, True),
        ("1.1", Decimal, Decimal("1.1")),
        ("1/3", Fraction, Fraction(1, 3)),
        ("mypath.txt", pathlib.Path, pathlib.Path("mypath.txt")),
        ("12345678-1234-5678-1234-567812345678", uuid.UUID, uuid.UUID("12345678-1234-5678-1234-567812345678")),
        ("safe", Mode, Mode.SAFE),
        ("FAST", Mode, Mode.FAST),
        (" text ", str, " text "),
    ])
    def test_scalars(self, raw, requested, expected):
        assert self.registry.convert("key", ConfigLeaf(raw), requested) == expected

    def test_pydantic_urls(self):
        url = self.registry.convert("url", ConfigLeaf("https://www.amazon.com"), HttpUrl)
        assert url.host == "www.amazon.com"
        any_url = self.registry.convert("url", ConfigLeaf("ftp://files.example.com"), AnyUrl)
        assert any_url.scheme == "ftp"
        with pytest.raises(ConversionFailed):
            self.registry.convert("url", ConfigLeaf("not a url"), HttpUrl)

    def test_collections(self):
        leaf = ConfigLeaf("1,2,3,3")

        assert self.registry.convert("xs", leaf, List[int]) == [1, 2, 3, 3]
        assert self.registry.convert("xs", leaf, Tuple[int, ...]) == (1, 2, 3, 3)
        assert self.registry.convert("xs", leaf, Set[int]) == {1, 2, 3}
        assert self.registry.convert("xs", leaf, FrozenSet[int]) == frozenset({1, 2, 3})

    def test_collection_of_enums(self):
        assert self.registry.convert("modes", ConfigLeaf("fast, SAFE"), List[Mode]) == [Mode.FAST, Mode.SAFE]

    def test_empty_collection(self):
        assert self.registry.convert("xs", ConfigLeaf(""), List[int]) == []

    def test_configured_delimiter(self):
        registry = ConversionRegistry(delimiter=";")
        assert registry.convert("xs", ConfigLeaf("a;b"), List[str]) == ["a", "b"]

    def test_map_from_section(self):
        node = to_config({"a": "1", "b": "2"})
        assert self.registry.convert("limits", node, Dict[str, int]) == {"a": 1, "b": 2}

    def test_nested_map_from_section(self):
        node = to_config({"eu": {"a": "1"}, "us": {"b": "2"}})
        result = self.registry.convert("regions", node, Dict[str, Dict[str, int]])
        assert result == {"eu": {"a": 1}, "us": {"b": 2}}

    def test_map_from_leaf(self):
        assert self.registry.convert("limits", ConfigLeaf("a=1,b=2"), Dict[str, int]) == {"a": 1, "b": 2}

    def test_section_for_scalar_fails(self):
        with pytest.raises(ConversionFailed, match="found a section"):
            self.registry.convert("server", to_config({"host": "x"}), str)

    def test_failure_carries_path_raw_and_type(self):
        with pytest.raises(ConversionFailed) as exc_info:
            self.registry.convert("server.port", ConfigLeaf("eighty"), int)

        error = exc_info.value
        assert error.path == "server.port"
        assert error.raw_value == "eighty"
        assert error.target_type == TypeDescriptor.of(int)
        assert isinstance(error.__cause__, ValueError)
        assert "server.port" in str(error)
        assert "'eighty'" in str(error)
        assert "'int'" in str(error)

    def test_element_failure_is_located(self):
        with pytest.raises(ConversionFailed) as exc_info:
            self.registry.convert("ports", ConfigLeaf("80,x"), List[int])

        assert exc_info.value.path == "ports"
        assert exc_info.value.raw_value == "x"
        assert isinstance(exc_info.value.__cause__, ValueError)

    def test_map_value_failure_is_located_at_child(self):
        with pytest.raises(ConversionFailed) as exc_info:
            self.registry.convert("limits", to_config({"a": "x"}), Dict[str, int])
        assert exc_info.value.path == "limits.a"

    def test_registered_string_converter_accepts_any_leaf(self):
        registry = ConversionRegistry(converters={str: StringConverter()})
        assert registry.convert("k", ConfigLeaf(""), str) == ""

"""Tests for the caching provider."""
import threading
from abc import ABC, abstractmethod
from typing import List
from unittest.mock import Mock

import pytest

from confbind.domain.exceptions import SettingNotFound
from confbind.infrastructure.loaders import MappingConfigLoader
from confbind.providers import CachedConfigProvider, DefaultConfigProvider


class Normal(ABC):
    @abstractmethod
    def a(self) -> str: ...


class Nested(ABC):
    @abstractmethod
    def normal(self) -> Normal: ...

    @abstractmethod
    def values(self) -> List[int]: ...


class TestCachedConfigProvider:
    """Test memoization and invalidation."""

    def setup_method(self):
        self.data = {"a": "1", "nested": {"normal": {"a": "reala"}, "values": "1,2"}}
        self.inner = DefaultConfigProvider(MappingConfigLoader(lambda: self.data))
        self.provider = CachedConfigProvider(self.inner)

    def test_values_are_identical_until_reload(self):
        first = self.provider.get("nested.values", List[int])
        second = self.provider.get("nested.values", List[int])

        assert first is second
        assert self.provider.cache_size() == 1

    def test_cache_is_keyed_by_type(self):
        assert self.provider.get("a", int) == 1
        assert self.provider.get("a", str) == "1"
        assert self.provider.cache_size() == 2

    def test_bindings_are_identical(self):
        first = self.provider.bind("nested", Nested)
        second = self.provider.bind("nested", Nested)

        assert first is second
        assert first.normal() is second.normal()
        assert first.values() is second.values()

    def test_unwrapped_bindings_are_distinct_but_equal(self):
        first = self.inner.bind("nested", Nested)
        second = self.inner.bind("nested", Nested)

        assert first is not second
        assert first == second
        assert str(first) == str(second)

    def test_get_for_interface_uses_binding_cache(self):
        assert self.provider.get("nested", Nested) is self.provider.bind("nested", Nested)

    def test_default_is_cached(self):
        assert self.provider.get("this.does.not.exist", default=1) == 1
        assert self.provider.get("this.does.not.exist", default=2) == 1

    def test_default_not_cached_when_disabled(self):
        provider = CachedConfigProvider(self.inner, cache_defaults=False)

        assert provider.get("this.does.not.exist", default=1) == 1
        assert provider.get("this.does.not.exist", default=2) == 2
        assert provider.cache_size() == 0

    def test_missing_without_default_raises(self):
        with pytest.raises(SettingNotFound):
            self.provider.get("missing", int)
        assert self.provider.cache_size() == 0

    def test_get_or_none_caches_only_values(self):
        assert self.provider.get_or_none("missing", int) is None
        assert self.provider.cache_size() == 0

        assert self.provider.get_or_none("a", int) == 1
        assert self.provider.cache_size() == 1

    def test_reload_clears_the_cache(self):
        before = self.provider.bind("nested", Nested)
        assert self.provider.get("a", int) == 1

        self.data = {"a": "2", "nested": {"normal": {"a": "new"}, "values": "3"}}
        self.provider.reload()

        assert self.provider.cache_size() == 0
        assert self.provider.get("a", int) == 2
        after = self.provider.bind("nested", Nested)
        assert after is not before
        assert after.normal().a() == "new"

    def test_reload_through_inner_provider_clears_the_cache(self):
        self.provider.get("a", int)

        self.data = {"a": "3"}
        self.inner.reload()

        assert self.provider.get("a", int) == 3

    def test_unconvertible_watched_value_still_clears_the_cache(self):
        change_listener = Mock()
        self.provider.add_change_listener("a", int, change_listener)
        assert self.provider.get("b", default="x") == "x"
        assert self.provider.get("a", int) == 1

        self.data = {"a": "oops", "b": "y"}
        self.provider.reload()

        change_listener.assert_called_once_with(1, None)
        assert self.provider.get("b", default="x") == "y"

    def test_failed_reload_keeps_the_cache(self):
        value = self.provider.get("nested.values", List[int])
        self.inner.loader._load = Mock(side_effect=RuntimeError("source unavailable"))

        self.provider.reload()

        assert self.provider.get("nested.values", List[int]) is value

    def test_listener_methods_delegate(self):
        reload_listener, change_listener, error_listener = Mock(), Mock(), Mock()
        self.provider.add_reload_listener(reload_listener)
        self.provider.add_change_listener("a", int, change_listener)
        self.provider.add_reload_error_listener(error_listener)

        self.provider.reload()

        reload_listener.assert_called_once_with()
        change_listener.assert_called_once_with(1, 1)
        error_listener.assert_not_called()

        self.provider.remove_listener("a", int)
        self.provider.reload()
        change_listener.assert_called_once()

    def test_registry_and_binder_are_shared(self):
        assert self.provider.registry is self.inner.registry
        assert self.provider.binder is self.inner.binder

    def test_cancel_reload_delegates(self):
        strategy = Mock()
        inner = DefaultConfigProvider(MappingConfigLoader({}), reload_strategy=strategy)

        CachedConfigProvider(inner).cancel_reload()

        strategy.deregister.assert_called_once_with(inner)

    @pytest.mark.timeout(10)
    def test_concurrent_first_calls_converge(self):
        results = []
        barrier = threading.Barrier(8)

        def read():
            barrier.wait()
            results.append(self.provider.bind("nested", Nested))

        threads = [threading.Thread(target=read) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(results) == 8
        assert all(result is results[0] for result in results)

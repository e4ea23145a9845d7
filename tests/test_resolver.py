"""Tests for resolving type identifiers to message and service handlers."""

from pathlib import Path

import pytest

from conftest import make_package
from msgbundle.data.fast_registry import FastRegistry
from msgbundle.data.registry import PackageRegistry
from msgbundle.domain.errors import NotFoundError
from msgbundle.domain.models import PackageHandle, ServiceHandlers
from msgbundle.services.resolver import TypeResolver, split_type_id
from msgbundle.storage.loader import Loader


class Foo:
    pass


class Bar:
    pass


class CountingLoader(Loader):
    def __init__(self):
        self.calls = []

    def load(self, name: str, location: Path) -> PackageHandle:
        self.calls.append(name)
        return PackageHandle(
            name=name,
            location=location,
            msg={"Foo": Foo, "Bar": Bar},
            srv={"Add": ServiceHandlers(request=Foo, response=Bar)},
        )


class UntouchableRegistry(PackageRegistry):
    def get_package(self, name):
        raise AssertionError("registry must not be consulted")

    def load_message_package(self, name):
        raise AssertionError("registry must not be consulted")


@pytest.fixture
def resolver(tmp_path):
    make_package(tmp_path, "pkgA", msgs=["Foo"])
    make_package(tmp_path, "pkgB", msgs=["Bar"])
    loader = CountingLoader()
    registry = PackageRegistry([tmp_path], loader=loader)
    registry.find_message_files()
    resolver = TypeResolver(registry, FastRegistry())
    return resolver


def test_split_type_id() -> None:
    assert split_type_id("std_msgs/String") == ("std_msgs", "String")


# ---------------------------------------------------------------------------
# Message types
# ---------------------------------------------------------------------------


class TestMessageResolution:
    def test_load_then_resolve_returns_package_handler(self, resolver) -> None:
        handle = resolver.registry.load_message_package("pkgA")
        assert resolver.get_handler_for_msg_type("pkgA/Foo") is handle.msg["Foo"]

    def test_lazy_load_on_demand_loads_once(self, resolver) -> None:
        assert resolver.get_handler_for_msg_type("pkgB/Bar", True) is Bar
        assert resolver.get_handler_for_msg_type("pkgB/Bar", True) is Bar
        assert resolver.registry.loader.calls == ["pkgB"]

    def test_without_load_if_missing_does_not_load(self, resolver) -> None:
        with pytest.raises(NotFoundError):
            resolver.get_handler_for_msg_type("pkgB/Bar")
        assert resolver.registry.loader.calls == []

    def test_missing_package_message_names_package(self, resolver) -> None:
        with pytest.raises(NotFoundError, match="Unable to find message package nope") as exc_info:
            resolver.get_handler_for_msg_type("nope/Thing", False)
        assert exc_info.value.identifier == "nope"

    def test_lazy_load_of_unknown_package_is_not_found(self, resolver) -> None:
        with pytest.raises(NotFoundError, match="nope"):
            resolver.get_handler_for_msg_type("nope/Thing", True)

    def test_missing_type_in_loaded_package(self, resolver) -> None:
        resolver.registry.load_message_package("pkgA")
        with pytest.raises(NotFoundError, match="pkgA/Missing"):
            resolver.get_handler_for_msg_type("pkgA/Missing")

    def test_fast_registry_bypasses_disk(self, tmp_path) -> None:
        fast = FastRegistry()
        fast.register_message("linked/Foo", Foo)
        resolver = TypeResolver(UntouchableRegistry([tmp_path]), fast)

        handler = resolver.get_handler_for_msg_type("linked/Foo", True)
        assert handler is Foo

    def test_fast_and_fallback_paths_both_return_classes(self, resolver) -> None:
        resolver.fast_registry.register_message("linked/Bar", Bar)
        fast = resolver.get_handler_for_msg_type("linked/Bar")
        slow = resolver.get_handler_for_msg_type("pkgA/Foo", True)
        assert isinstance(fast, type)
        assert isinstance(slow, type)


# ---------------------------------------------------------------------------
# Service types
# ---------------------------------------------------------------------------


class TestServiceResolution:
    def test_fast_path_needs_both_halves(self, resolver) -> None:
        resolver.fast_registry.register_service("linked/Add", request=Foo)
        with pytest.raises(NotFoundError) as exc_info:
            resolver.get_handler_for_srv_type("linked/Add")
        err = exc_info.value
        assert "Unable to find service package linked" in str(err)
        assert "Request: True, Response: False" in str(err)
        assert err.request_found is True
        assert err.response_found is False

    def test_fast_path_pair(self, tmp_path) -> None:
        fast = FastRegistry()
        fast.register_service("linked/Add", request=Foo, response=Bar)
        resolver = TypeResolver(UntouchableRegistry([tmp_path]), fast)

        handlers = resolver.get_handler_for_srv_type("linked/Add")
        assert handlers.Request is Foo
        assert handlers.Response is Bar

    def test_fallback_with_lazy_load(self, resolver) -> None:
        handlers = resolver.get_handler_for_srv_type("pkgA/Add", load_if_missing=True)
        assert handlers.request is Foo
        assert handlers.response is Bar
        assert resolver.registry.loader.calls == ["pkgA"]

    def test_missing_package_reports_flags(self, resolver) -> None:
        with pytest.raises(NotFoundError, match=r"nope\. Request: False, Response: False"):
            resolver.get_handler_for_srv_type("nope/Thing")


class TestFastRegistry:
    def test_get_follows_key_path(self) -> None:
        fast = FastRegistry()
        fast.register_service("a/B", request=Foo, response=Bar)
        assert fast.get("a/B", ("srv", "Request")) is Foo
        assert fast.get("a/B", ("msg",)) is None
        assert fast.get("missing/Type", ("msg",)) is None
        assert "a/B" in fast

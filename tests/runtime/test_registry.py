"""Tests for fnshim.runtime.registry — HandlerRegistry and decorator."""

import pytest

from fnshim.core.errors import HandlerNotFoundError
from fnshim.core.result import Ok
from fnshim.runtime.registry import (
    get_default_registry,
    register_function,
    reset_default_registry,
)


def _hello(ctx):
    """Say hello."""
    return Ok("hello")


class TestHandlerRegistry:
    def test_register_and_get(self, registry):
        registry.register("hello", _hello)
        assert registry.get("hello") is _hello
        assert registry.has("hello")
        assert len(registry) == 1

    def test_get_unknown_raises(self, registry):
        registry.register("hello", _hello)
        with pytest.raises(HandlerNotFoundError) as exc_info:
            registry.get("missing")
        assert exc_info.value.available == ["hello"]

    def test_register_replaces(self, registry):
        registry.register("hello", _hello)
        other = lambda ctx: Ok("hi")  # noqa: E731
        registry.register("hello", other)
        assert registry.get("hello") is other

    def test_rejects_non_callable(self, registry):
        with pytest.raises(TypeError, match="callable"):
            registry.register("hello", "not a function")  # type: ignore[arg-type]

    def test_rejects_empty_name(self, registry):
        with pytest.raises(ValueError):
            registry.register("", _hello)

    def test_metadata(self, registry):
        registry.register("hello", _hello, description="greets", tags={"team": "a"})
        meta = registry.get_metadata("hello")
        assert meta["name"] == "hello"
        assert meta["description"] == "greets"
        assert meta["tags"] == {"team": "a"}
        assert meta["handler"].endswith("_hello")
        assert registry.get_metadata("missing") is None

    def test_listing_is_sorted(self, registry):
        registry.register("b", _hello)
        registry.register("a", _hello)
        assert registry.list_functions() == ["a", "b"]
        assert [m["name"] for m in registry.list_with_metadata()] == ["a", "b"]

    def test_unregister_and_clear(self, registry):
        registry.register("a", _hello)
        registry.register("b", _hello)
        assert registry.unregister("a") is True
        assert registry.unregister("a") is False
        registry.clear()
        assert registry.list_functions() == []


class TestDefaultRegistry:
    def test_singleton(self):
        assert get_default_registry() is get_default_registry()

    def test_reset(self):
        first = get_default_registry()
        reset_default_registry()
        assert get_default_registry() is not first


class TestDecorator:
    def test_registers_into_explicit_registry(self, registry):
        @register_function("greet", registry=registry)
        def greet(ctx):
            return Ok("hello")

        assert registry.get("greet") is greet
        assert not get_default_registry().has("greet")

    def test_empty_explicit_registry_is_not_replaced(self, registry):
        assert len(registry) == 0
        register_function("late", registry=registry)(_hello)
        assert registry.list_functions() == ["late"]
        assert get_default_registry().list_functions() == []

    def test_defaults_name_and_description(self):
        decorated = register_function()(_hello)
        assert decorated is _hello
        meta = get_default_registry().get_metadata("_hello")
        assert meta["description"] == "Say hello."

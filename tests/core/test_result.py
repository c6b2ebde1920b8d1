"""Tests for fnshim.core.result — the Ok / Err envelope."""

import pytest

from fnshim.core.errors import HandlerError
from fnshim.core.result import Err, Ok, is_result, try_result, try_result_with


class TestOk:
    def test_inspection(self):
        ok = Ok("hello")
        assert ok.is_ok()
        assert not ok.is_err()
        assert ok.unwrap() == "hello"

    def test_defaults_ignored(self):
        assert Ok(1).unwrap_or(2) == 1
        assert Ok(1).unwrap_or_else(lambda e: 2) == 1

    def test_map_and_flat_map(self):
        assert Ok("hello").map(str.upper) == Ok("HELLO")
        assert Ok(2).flat_map(lambda v: Ok(v * 3)) == Ok(6)
        assert Ok(2).flat_map(lambda v: Err(ValueError("x"))).is_err()

    def test_error_side_is_noop(self):
        ok = Ok(1)
        assert ok.map_err(lambda e: RuntimeError("y")) is ok
        assert ok.or_else(lambda e: Ok(2)) is ok

    def test_inspect_calls_with_value(self):
        seen = []
        Ok(5).inspect(seen.append).inspect_err(seen.append)
        assert seen == [5]

    def test_equality_and_hash(self):
        assert Ok("hello") == Ok("hello")
        assert hash(Ok("hello")) == hash(Ok("hello"))

    def test_to_dict(self):
        assert Ok("hello").to_dict() == {"ok": True, "value": "hello"}

    def test_pattern_matching(self):
        match Ok("hello"):
            case Ok(value):
                assert value == "hello"
            case _:
                pytest.fail("expected Ok")


class TestErr:
    def test_inspection(self):
        err = Err(ValueError("bad"))
        assert err.is_err()
        assert not err.is_ok()

    def test_unwrap_raises_contained_error(self):
        with pytest.raises(ValueError, match="bad"):
            Err(ValueError("bad")).unwrap()

    def test_defaults(self):
        assert Err(ValueError("x")).unwrap_or("d") == "d"
        assert Err(ValueError("x")).unwrap_or_else(lambda e: str(e)) == "x"

    def test_short_circuits(self):
        err = Err(ValueError("x"))
        assert err.map(lambda v: v * 2) is err
        assert err.flat_map(lambda v: Ok(v)) is err

    def test_map_err_and_or_else(self):
        wrapped = Err(ValueError("raw")).map_err(lambda e: HandlerError(f"wrapped: {e}"))
        assert isinstance(wrapped.error, HandlerError)
        assert wrapped.error.message == "wrapped: raw"
        assert Err(ValueError("x")).or_else(lambda e: Ok("backup")) == Ok("backup")

    def test_inspect_err(self):
        seen = []
        Err(ValueError("x")).inspect(seen.append).inspect_err(lambda e: seen.append(str(e)))
        assert seen == ["x"]

    def test_to_dict_plain_exception(self):
        assert Err(ValueError("x")).to_dict() == {
            "ok": False,
            "error": {"error_type": "ValueError", "message": "x"},
        }

    def test_to_dict_function_error(self):
        data = Err(HandlerError("x")).to_dict()
        assert data["ok"] is False
        assert data["error"]["error_type"] == "HandlerError"
        assert data["error"]["category"] == "HANDLER"


class TestUtilities:
    def test_is_result(self):
        assert is_result(Ok(1))
        assert is_result(Err(ValueError()))
        assert not is_result("hello")
        assert not is_result(None)

    def test_try_result(self):
        assert try_result(lambda: "hello") == Ok("hello")
        result = try_result(lambda: 1 / 0)
        assert isinstance(result.error, ZeroDivisionError)

    def test_try_result_with_mapper(self):
        result = try_result_with(lambda: 1 / 0, lambda e: HandlerError("bad math", cause=e))
        assert isinstance(result.error, HandlerError)
        assert isinstance(result.error.cause, ZeroDivisionError)

    def test_try_result_with_without_mapper(self):
        assert isinstance(try_result_with(lambda: 1 / 0).error, ZeroDivisionError)

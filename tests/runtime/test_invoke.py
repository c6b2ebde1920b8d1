"""Tests for fnshim.runtime.invoke — the handler shim."""

import pytest

from fnshim.core.errors import (
    ContextReleasedError,
    HandlerError,
    InvalidResultError,
)
from fnshim.core.result import Err, Ok
from fnshim.runtime.context import InvocationContext
from fnshim.runtime.invoke import InvocationRecord, invoke, invoke_recorded


class TestResultChannel:
    def test_ok_passes_through(self, echo_handler):
        ctx = InvocationContext(metadata={"event": {"name": "world"}})
        assert invoke(echo_handler, ctx) == Ok({"name": "world"})

    def test_err_passes_through(self, failing_handler):
        result = invoke(failing_handler, InvocationContext.background())
        assert result.is_err()
        assert isinstance(result.error, HandlerError)
        assert result.error.message == "nope"

    def test_raise_becomes_handler_error(self, raising_handler):
        ctx = InvocationContext(request_id="r1")
        result = invoke(raising_handler, ctx, name="boomer")
        assert isinstance(result, Err)
        error = result.error
        assert type(error) is HandlerError
        assert isinstance(error.cause, RuntimeError)
        assert "boomer" in error.message
        assert "boom" in error.message
        assert error.context == {"request_id": "r1", "function": "boomer"}

    @pytest.mark.parametrize("returned", [None, "hello", 42, {"ok": True}])
    def test_non_result_becomes_invalid_result(self, returned):
        result = invoke(lambda ctx: returned, InvocationContext.background())
        assert isinstance(result, Err)
        assert isinstance(result.error, InvalidResultError)
        assert type(returned).__name__ in result.error.message

    def test_handler_called_once(self):
        calls = []

        def counting(ctx):
            calls.append(ctx.request_id)
            return Ok(len(calls))

        ctx = InvocationContext(request_id="r1")
        assert invoke(counting, ctx) == Ok(1)
        assert calls == ["r1"]


class TestContextLifetime:
    def test_context_released_after_return(self, echo_handler):
        ctx = InvocationContext.background()
        invoke(echo_handler, ctx)
        assert ctx.released

    def test_context_released_after_raise(self, raising_handler):
        ctx = InvocationContext.background()
        invoke(raising_handler, ctx)
        assert ctx.released

    def test_stashed_context_rejects_metadata_reads(self):
        stash = []

        def stashing(ctx):
            stash.append(ctx)
            return Ok(ctx.metadata.get("k"))

        assert invoke(stashing, InvocationContext(metadata={"k": "v"})) == Ok("v")
        with pytest.raises(ContextReleasedError):
            _ = stash[0].metadata

    def test_cancelled_context_is_visible_to_handler(self):
        ctx = InvocationContext.background()
        ctx.cancel()
        result = invoke(lambda c: Err(c.error) if c.done else Ok("ran"), ctx)
        assert result.is_err()


class TestInvokeRecorded:
    def test_record_fields(self, echo_handler):
        ctx = InvocationContext(request_id="r1", function_name="echo", metadata={"event": 1})
        record = invoke_recorded(echo_handler, ctx)
        assert isinstance(record, InvocationRecord)
        assert record.request_id == "r1"
        assert record.function_name == "echo"
        assert record.result == Ok(1)
        assert record.ok
        assert record.duration_ms >= 0
        assert record.envelope is None

    def test_name_falls_back_to_handler_name(self, failing_handler):
        record = invoke_recorded(failing_handler, InvocationContext.background())
        assert record.function_name == "failing"
        assert not record.ok

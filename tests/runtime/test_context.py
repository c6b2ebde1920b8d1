"""Tests for fnshim.runtime.context — InvocationContext."""

import threading
import time
from types import SimpleNamespace

import pytest

from fnshim.core.errors import ContextReleasedError, DeadlineExceeded, InvocationCancelled
from fnshim.runtime.context import InvocationContext, new_request_id


class TestConstruction:
    def test_background(self):
        ctx = InvocationContext.background()
        assert ctx.deadline is None
        assert ctx.remaining() is None
        assert not ctx.done
        assert ctx.error is None
        assert len(ctx.request_id) == 32

    def test_request_ids_are_unique(self):
        assert InvocationContext().request_id != InvocationContext().request_id

    def test_new_request_id(self):
        first, second = new_request_id(), new_request_id()
        assert first != second
        assert len(first) == 32
        int(first, 16)

    def test_explicit_fields(self):
        ctx = InvocationContext(request_id="r1", function_name="hello", metadata={"k": "v"})
        assert ctx.request_id == "r1"
        assert ctx.function_name == "hello"
        assert ctx.metadata["k"] == "v"

    def test_metadata_is_read_only_copy(self):
        source = {"k": "v"}
        ctx = InvocationContext(metadata=source)
        source["k"] = "changed"
        assert ctx.metadata["k"] == "v"
        with pytest.raises(TypeError):
            ctx.metadata["k"] = "x"  # type: ignore[index]

    def test_with_timeout(self):
        ctx = InvocationContext.with_timeout(5.0, metadata={"event": 1})
        remaining = ctx.remaining()
        assert 4.5 < remaining <= 5.0
        assert ctx.event == 1
        assert not ctx.expired

    def test_negative_timeout_rejected(self):
        with pytest.raises(ValueError, match="non-negative"):
            InvocationContext.with_timeout(-1.0)

    def test_repr_omits_metadata(self):
        ctx = InvocationContext(request_id="r1", metadata={"secret": "s"})
        assert "r1" in repr(ctx)
        assert "secret" not in repr(ctx)


class TestFromLambda:
    def test_reads_lambda_context(self):
        lambda_context = SimpleNamespace(
            aws_request_id="aws-1",
            function_name="hello-fn",
            invoked_function_arn="arn:aws:lambda:us-east-1:123:function:hello-fn",
            memory_limit_in_mb="128",
            get_remaining_time_in_millis=lambda: 3000,
        )
        ctx = InvocationContext.from_lambda(lambda_context, {"path": "/"})
        assert ctx.request_id == "aws-1"
        assert ctx.function_name == "hello-fn"
        assert ctx.event == {"path": "/"}
        assert ctx.metadata["memory_limit_in_mb"] == "128"
        assert ctx.metadata["invoked_function_arn"].endswith("hello-fn")
        assert 2.5 < ctx.remaining() <= 3.0

    def test_missing_context(self):
        ctx = InvocationContext.from_lambda(None, None)
        assert ctx.request_id
        assert ctx.deadline is None
        assert ctx.event is None


class TestCancellation:
    def test_cancel(self):
        ctx = InvocationContext.background()
        ctx.cancel()
        assert ctx.cancelled
        assert ctx.done
        assert isinstance(ctx.error, InvocationCancelled)

    def test_first_cause_sticks(self):
        ctx = InvocationContext.background()
        first = RuntimeError("first")
        ctx.cancel(first)
        ctx.cancel(RuntimeError("second"))
        assert ctx.error is first

    def test_check_raises(self):
        ctx = InvocationContext.background()
        ctx.check()
        ctx.cancel()
        with pytest.raises(InvocationCancelled):
            ctx.check()

    def test_cancel_wins_over_deadline(self):
        ctx = InvocationContext.with_timeout(0.0)
        ctx.cancel()
        assert isinstance(ctx.error, InvocationCancelled)

    def test_wait_returns_when_cancelled_from_other_thread(self):
        ctx = InvocationContext.background()
        timer = threading.Timer(0.05, ctx.cancel)
        timer.start()
        try:
            assert ctx.wait(timeout=5.0) is True
        finally:
            timer.cancel()


class TestDeadline:
    def test_zero_timeout_is_expired(self):
        ctx = InvocationContext.with_timeout(0.0)
        assert ctx.expired
        assert ctx.done
        assert isinstance(ctx.error, DeadlineExceeded)
        with pytest.raises(DeadlineExceeded):
            ctx.check()

    def test_remaining_negative_after_deadline(self):
        ctx = InvocationContext(deadline=time.monotonic() - 1.0)
        assert ctx.remaining() < 0

    def test_wait_stops_at_deadline(self):
        ctx = InvocationContext.with_timeout(0.05)
        started = time.monotonic()
        assert ctx.wait(timeout=5.0) is True
        assert time.monotonic() - started < 2.0

    def test_wait_times_out_while_live(self):
        ctx = InvocationContext.background()
        assert ctx.wait(timeout=0.01) is False


class TestRelease:
    def test_metadata_unavailable_after_release(self):
        ctx = InvocationContext(metadata={"k": "v"})
        ctx.release()
        assert ctx.released
        with pytest.raises(ContextReleasedError):
            _ = ctx.metadata
        with pytest.raises(ContextReleasedError):
            _ = ctx.event

    def test_signals_still_readable_after_release(self):
        ctx = InvocationContext.background()
        ctx.release()
        ctx.release()
        assert not ctx.done
        assert ctx.error is None

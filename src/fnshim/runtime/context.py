"""Invocation context handed from a host to a handler.

The host owns the context; a handler borrows it for exactly one call. It
carries the request's identity and metadata plus two signals a handler doing
real work should honor: a deadline and a cancellation flag.

Architecture:

    .. code-block:: text

        InvocationContext
        ├── .request_id      → host request id (uuid4 hex by default)
        ├── .function_name   → registered name of the handler
        ├── .metadata        → read-only request metadata (borrowed)
        ├── .remaining()     → seconds left, None without a deadline
        ├── .cancelled / .expired / .done
        ├── .error           → InvocationCancelled | DeadlineExceeded | None
        ├── .check()         → raise .error if set
        ├── .wait(timeout)   → block until done or timeout
        ├── .cancel(cause)   → host-side cancellation
        └── .release()       → called by the shim when the call returns

Example:
    >>> ctx = InvocationContext.with_timeout(2.0, function_name="hello")
    >>> ctx.done
    False
    >>> ctx.cancel()
    >>> type(ctx.error).__name__
    'InvocationCancelled'

Tags:
    fnshim, runtime, context, deadline, cancellation

Doc-Types:
    api-reference
"""

from __future__ import annotations

import threading
import time
import uuid
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from fnshim.core.errors import ContextReleasedError, DeadlineExceeded, InvocationCancelled


def new_request_id() -> str:
    """Fresh host-side request identifier."""
    return uuid.uuid4().hex


class InvocationContext:
    """Per-call deadline, cancellation signal and request metadata.

    Attributes:
        request_id: Host-assigned request identifier
        function_name: Name the handler is registered under
        deadline: Absolute deadline on the monotonic clock, None for no deadline
    """

    def __init__(
        self,
        request_id: str | None = None,
        function_name: str = "",
        deadline: float | None = None,
        metadata: Mapping[str, Any] | None = None,
    ):
        self.request_id = request_id or new_request_id()
        self.function_name = function_name
        self.deadline = deadline
        self._metadata: Mapping[str, Any] = MappingProxyType(dict(metadata or {}))
        self._cancelled = threading.Event()
        self._cause: Exception | None = None
        self._released = False

    def __repr__(self) -> str:
        return (
            f"InvocationContext(request_id={self.request_id!r}, "
            f"function_name={self.function_name!r}, deadline={self.deadline!r})"
        )

    # ------------------------------------------------------------------ #
    # Constructors
    # ------------------------------------------------------------------ #

    @classmethod
    def background(cls, **kwargs: Any) -> InvocationContext:
        """Context with no deadline that is never cancelled unless asked."""
        return cls(**kwargs)

    @classmethod
    def with_timeout(
        cls,
        seconds: float,
        *,
        metadata: Mapping[str, Any] | None = None,
        **kwargs: Any,
    ) -> InvocationContext:
        """Context whose deadline is ``seconds`` from now.

        Raises:
            ValueError: If seconds is negative
        """
        if seconds < 0:
            raise ValueError(f"timeout must be non-negative, got {seconds}")
        return cls(deadline=time.monotonic() + seconds, metadata=metadata, **kwargs)

    @classmethod
    def from_lambda(
        cls,
        lambda_context: Any,
        event: Any = None,
    ) -> InvocationContext:
        """Build a context from the AWS managed runtime's ``context`` object.

        Reads ``aws_request_id``, ``function_name`` and
        ``get_remaining_time_in_millis()`` when present; the ARN, memory limit,
        log group/stream and the event go into metadata.
        """
        request_id = getattr(lambda_context, "aws_request_id", None) or new_request_id()
        function_name = getattr(lambda_context, "function_name", "") or ""

        deadline = None
        remaining_ms = getattr(lambda_context, "get_remaining_time_in_millis", None)
        if callable(remaining_ms):
            deadline = time.monotonic() + max(remaining_ms(), 0) / 1000.0

        metadata: dict[str, Any] = {"event": event}
        for attr in (
            "invoked_function_arn",
            "function_version",
            "memory_limit_in_mb",
            "log_group_name",
            "log_stream_name",
        ):
            value = getattr(lambda_context, attr, None)
            if value is not None:
                metadata[attr] = value

        return cls(
            request_id=request_id,
            function_name=function_name,
            deadline=deadline,
            metadata=metadata,
        )

    # ------------------------------------------------------------------ #
    # Request data
    # ------------------------------------------------------------------ #

    @property
    def metadata(self) -> Mapping[str, Any]:
        """Request-scoped metadata. Only valid while the call is running."""
        if self._released:
            raise ContextReleasedError(
                f"context for request {self.request_id} was used after its invocation returned",
                context={"request_id": self.request_id},
            )
        return self._metadata

    @property
    def event(self) -> Any:
        """Shortcut for ``metadata.get("event")``."""
        return self.metadata.get("event")

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> None:
        """Mark the borrow as over. Idempotent."""
        self._released = True

    # ------------------------------------------------------------------ #
    # Deadline / cancellation
    # ------------------------------------------------------------------ #

    def remaining(self) -> float | None:
        """Seconds until the deadline (negative once passed), None without one."""
        if self.deadline is None:
            return None
        return self.deadline - time.monotonic()

    @property
    def expired(self) -> bool:
        return self.deadline is not None and time.monotonic() >= self.deadline

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def done(self) -> bool:
        """True once cancelled or past the deadline."""
        return self.cancelled or self.expired

    @property
    def error(self) -> Exception | None:
        """Why the context is done, or None while it is live.

        Cancellation wins over an expired deadline.
        """
        if self.cancelled:
            return self._cause or InvocationCancelled(
                f"request {self.request_id} was cancelled",
                context={"request_id": self.request_id},
            )
        if self.expired:
            return DeadlineExceeded(
                f"request {self.request_id} passed its deadline",
                context={"request_id": self.request_id},
            )
        return None

    def check(self) -> None:
        """Raise ``self.error`` if the context is done."""
        error = self.error
        if error is not None:
            raise error

    def cancel(self, cause: Exception | None = None) -> None:
        """Signal cancellation. The first cause given sticks."""
        if not self._cancelled.is_set():
            self._cause = cause
            self._cancelled.set()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the context is done or ``timeout`` elapses.

        Returns:
            True if the context is done
        """
        limit = self.remaining()
        if timeout is not None:
            limit = timeout if limit is None else min(limit, timeout)
        if limit is not None:
            limit = max(limit, 0.0)
        self._cancelled.wait(limit)
        return self.done


__all__ = ["InvocationContext", "new_request_id"]

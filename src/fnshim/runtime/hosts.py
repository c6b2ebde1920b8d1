"""Host loops that wait for invocations and dispatch them to a handler.

A host owns the loop, builds an :class:`InvocationContext` per call, runs the
handler through the shim and converts the result into its own wire format.

ARCHITECTURE
────────────
::

    RuntimeHost (Protocol)
      ├── .serve(name, handler)  ─ blocking loop
      └── .stop()                ─ request shutdown

    Implementations:
      LocalHost      ─ in-process queue, one invocation at a time (dev / tests)
      StdioHost      ─ NDJSON invocations on stdin, envelopes on stdout
      lambda_adapter ─ (event, context) entry point for the AWS managed
                       Python runtime, which owns the loop itself

Usage::

    host = LocalHost(default_timeout=3.0)
    host.submit({"name": "world"})
    host.run_pending("hello", handler)
    host.records[0].envelope   # {"requestId": ..., "ok": True, "payload": "hello"}
"""

from __future__ import annotations

import dataclasses
import queue
import signal
import sys
import threading
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol, TextIO, runtime_checkable

from fnshim.core.errors import WireFormatError
from fnshim.core.logging import ensure_logging, get_logger
from fnshim.core.result import Ok
from fnshim.runtime.context import InvocationContext, new_request_id
from fnshim.runtime.invoke import Handler, InvocationRecord, invoke, invoke_recorded
from fnshim.runtime.wire import InboundInvocation, decode_event, encode, error_object, to_envelope

logger = get_logger(__name__)


@runtime_checkable
class RuntimeHost(Protocol):
    """Anything that can run a handler loop.

    Example implementation:
        >>> class OneShotHost:
        ...     def serve(self, name, handler):
        ...         print(invoke(handler, InvocationContext.background(), name=name))
        ...
        ...     def stop(self):
        ...         pass
    """

    def serve(self, name: str, handler: Handler) -> None:
        """Dispatch invocations to handler until stopped."""
        ...

    def stop(self) -> None:
        """Request graceful shutdown."""
        ...


@dataclass(frozen=True)
class PendingInvocation:
    """An invocation waiting in a host's queue."""

    request_id: str | None = None
    event: Any = None
    timeout: float | None = None
    cancelled: bool = False
    metadata: Mapping[str, Any] = field(default_factory=dict)


# --------------------------------------------------------------------------- #
# LocalHost
# --------------------------------------------------------------------------- #


class LocalHost:
    """In-process host: a FIFO queue drained one invocation at a time.

    Thread-safety:
        ``submit`` and ``stop`` may be called from any thread; ``serve`` runs
        the handler on the calling thread only.
    """

    def __init__(
        self,
        *,
        default_timeout: float | None = None,
        poll_interval: float = 0.1,
    ):
        """
        Args:
            default_timeout: Deadline in seconds for invocations submitted
                without one. ``None`` means no deadline.
            poll_interval: Seconds ``serve`` waits on an empty queue before
                checking for shutdown.
        """
        if default_timeout is not None and default_timeout <= 0:
            raise ValueError(f"default_timeout must be positive, got {default_timeout}")
        self._default_timeout = default_timeout
        self._poll_interval = poll_interval
        self._queue: queue.Queue[PendingInvocation] = queue.Queue()
        self._shutdown = threading.Event()
        self.records: list[InvocationRecord] = []

    # ------------------------------------------------------------------ #
    # Submission
    # ------------------------------------------------------------------ #

    def submit(
        self,
        event: Any = None,
        *,
        timeout: float | None = None,
        cancelled: bool = False,
        metadata: Mapping[str, Any] | None = None,
        request_id: str | None = None,
    ) -> str:
        """Queue an invocation and return its request id."""
        pending = PendingInvocation(
            request_id=request_id or new_request_id(),
            event=event,
            timeout=timeout,
            cancelled=cancelled,
            metadata=dict(metadata or {}),
        )
        self._queue.put(pending)
        return pending.request_id

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #

    def serve(self, name: str, handler: Handler, *, once: bool = False) -> None:
        """Dispatch queued invocations until ``stop()``.

        With ``once=True`` the loop returns as soon as the queue is empty.
        Installs SIGINT / SIGTERM handlers when running on the main thread.
        """
        logger.info("host_started", host=type(self).__name__, function=name, once=once)
        self._shutdown.clear()
        restore = {} if once else self._install_signal_handlers()
        try:
            while not self._shutdown.is_set():
                try:
                    if once:
                        pending = self._queue.get_nowait()
                    else:
                        pending = self._queue.get(timeout=self._poll_interval)
                except queue.Empty:
                    if once:
                        break
                    continue
                self._dispatch(name, handler, pending)
        finally:
            for signum, previous in restore.items():
                signal.signal(signum, previous)
            logger.info("host_stopped", host=type(self).__name__, processed=len(self.records))

    def run_pending(self, name: str, handler: Handler) -> list[InvocationRecord]:
        """Drain the queue and return the records produced by this call."""
        start = len(self.records)
        self.serve(name, handler, once=True)
        return self.records[start:]

    def stop(self) -> None:
        """Request graceful shutdown after the current invocation."""
        logger.info("host_stopping", host=type(self).__name__)
        self._shutdown.set()

    def _install_signal_handlers(self) -> dict[int, Any]:
        if threading.current_thread() is not threading.main_thread():
            return {}
        previous = {}
        for signum in (signal.SIGINT, signal.SIGTERM):
            previous[signum] = signal.getsignal(signum)
            signal.signal(signum, self._handle_signal)
        return previous

    def _handle_signal(self, signum: int, frame: Any) -> None:
        logger.info("host_signal", signal=signal.Signals(signum).name)
        self.stop()

    # ------------------------------------------------------------------ #
    # Dispatch
    # ------------------------------------------------------------------ #

    def _context_for(self, name: str, pending: PendingInvocation) -> InvocationContext:
        metadata = {"event": pending.event, **pending.metadata}
        timeout = pending.timeout if pending.timeout is not None else self._default_timeout
        if timeout is None:
            ctx = InvocationContext.background(
                request_id=pending.request_id,
                function_name=name,
                metadata=metadata,
            )
        else:
            ctx = InvocationContext.with_timeout(
                timeout,
                request_id=pending.request_id,
                function_name=name,
                metadata=metadata,
            )
        if pending.cancelled:
            ctx.cancel()
        return ctx

    def _dispatch(self, name: str, handler: Handler, pending: PendingInvocation) -> InvocationRecord:
        ctx = self._context_for(name, pending)
        record = invoke_recorded(handler, ctx, name=name)
        record = dataclasses.replace(record, envelope=to_envelope(record.request_id, record.result))
        self.records.append(record)
        self._emit(record.envelope)
        return record

    def _emit(self, envelope: dict[str, Any]) -> None:
        """Hand an envelope to the outside world. LocalHost keeps records only."""


# --------------------------------------------------------------------------- #
# StdioHost
# --------------------------------------------------------------------------- #


class StdioHost(LocalHost):
    """Newline-delimited JSON host.

    Reads one invocation per input line, writes one envelope per output line,
    and stops at EOF. A line that fails to decode gets a failure envelope and
    the loop moves on.
    """

    def __init__(
        self,
        input: TextIO | None = None,
        output: TextIO | None = None,
        *,
        default_timeout: float | None = None,
    ):
        super().__init__(default_timeout=default_timeout)
        stream = input if input is not None else sys.stdin
        # Raw bytes, so undecodable lines reach decode_event instead of the iterator
        self._input = getattr(stream, "buffer", stream)
        self._output = output if output is not None else sys.stdout

    def serve(self, name: str, handler: Handler, *, once: bool = False) -> None:
        """Process input lines until EOF, ``stop()``, or Ctrl-C."""
        ensure_logging()
        logger.info("host_started", host=type(self).__name__, function=name)
        self._shutdown.clear()
        try:
            for line in self._input:
                if self._shutdown.is_set():
                    break
                if not line.strip():
                    continue
                try:
                    inbound = decode_event(line)
                except WireFormatError as exc:
                    logger.warning("invocation_rejected", error=str(exc))
                    self._emit({"requestId": None, "ok": False, "error": error_object(exc)})
                    continue
                self._dispatch(name, handler, self._pending_from(inbound))
                if once:
                    break
        except KeyboardInterrupt:
            logger.info("host_interrupted", host=type(self).__name__)
        finally:
            logger.info("host_stopped", host=type(self).__name__, processed=len(self.records))

    def _pending_from(self, inbound: InboundInvocation) -> PendingInvocation:
        return PendingInvocation(
            request_id=inbound.request_id or new_request_id(),
            event=inbound.event,
            timeout=inbound.timeout,
            cancelled=inbound.cancelled,
            metadata=inbound.metadata,
        )

    def _emit(self, envelope: dict[str, Any]) -> None:
        self._output.write(encode(envelope).decode("utf-8") + "\n")
        self._output.flush()


# --------------------------------------------------------------------------- #
# AWS managed runtime
# --------------------------------------------------------------------------- #


def lambda_adapter(handler: Handler, *, name: str | None = None) -> Callable[[Any, Any], Any]:
    """Wrap a handler as an AWS Lambda ``(event, context)`` entry point.

    The managed runtime owns the loop; this only translates the two result
    channels into its conventions: ``Ok(value)`` is returned, ``Err(error)``
    is raised so the platform records a function error.

    Example:
        lambda_handler = lambda_adapter(handler)   # Handler: fnshim.functions.hello.lambda_handler
    """
    function = name or getattr(handler, "__name__", "handler")

    def lambda_handler(event: Any, context: Any) -> Any:
        ctx = InvocationContext.from_lambda(context, event)
        if not ctx.function_name:
            ctx.function_name = function
        result = invoke(handler, ctx, name=function)
        if isinstance(result, Ok):
            return result.value
        raise result.error

    lambda_handler.handler = handler  # type: ignore[attr-defined]
    return lambda_handler


__all__ = [
    "RuntimeHost",
    "PendingInvocation",
    "LocalHost",
    "StdioHost",
    "lambda_adapter",
]

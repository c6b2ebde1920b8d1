"""Handler invocation shim.

``invoke(handler, ctx)`` is the one place a handler is called. Whatever the
handler does, the caller gets back an ``Ok`` or an ``Err``:

    .. code-block:: text

        handler(ctx) returns Ok(v)      ──>  Ok(v)
        handler(ctx) returns Err(e)     ──>  Err(e)
        handler(ctx) returns other      ──>  Err(InvalidResultError)
        handler(ctx) raises exc         ──>  Err(HandlerError(cause=exc))

The context is released when the call returns, so a handler that stashes it
gets ``ContextReleasedError`` on the next metadata read.

Example:
    >>> from fnshim.core.result import Ok
    >>> invoke(lambda ctx: Ok("hello"), InvocationContext.background())
    Ok('hello')
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from fnshim.core.errors import HandlerError, InvalidResultError
from fnshim.core.logging import LogContext, get_logger
from fnshim.core.result import Err, Ok, Result, is_result
from fnshim.runtime.context import InvocationContext

logger = get_logger(__name__)

Handler = Callable[[InvocationContext], Result[Any]]


@dataclass(frozen=True)
class InvocationRecord:
    """What a host keeps about one dispatched invocation."""

    request_id: str
    function_name: str
    result: Result[Any]
    duration_ms: float
    envelope: dict[str, Any] | None = None

    @property
    def ok(self) -> bool:
        return self.result.is_ok()


def _name_of(handler: Callable) -> str:
    return getattr(handler, "__name__", type(handler).__name__)


def invoke(
    handler: Handler,
    ctx: InvocationContext,
    *,
    name: str | None = None,
) -> Result[Any]:
    """Call ``handler(ctx)`` once and return its result on the explicit channel.

    Args:
        handler: Callable taking the context and returning Ok / Err
        ctx: Context borrowed for this call; released on return
        name: Function name for logs (defaults to ctx.function_name, then __name__)

    Returns:
        The handler's Ok / Err, or an Err wrapping whatever went wrong
    """
    function = name or ctx.function_name or _name_of(handler)
    started = time.perf_counter()

    with LogContext(request_id=ctx.request_id, function=function):
        logger.debug("invocation_started", remaining=ctx.remaining())
        try:
            outcome = handler(ctx)
        except Exception as exc:
            logger.exception("invocation_raised", error_type=type(exc).__name__)
            result: Result[Any] = Err(
                HandlerError(
                    f"function '{function}' raised {type(exc).__name__}: {exc}",
                    context={"request_id": ctx.request_id, "function": function},
                    cause=exc,
                )
            )
        else:
            if is_result(outcome):
                result = outcome
            else:
                result = Err(
                    InvalidResultError(
                        f"function '{function}' returned {type(outcome).__name__}, expected Ok or Err",
                        context={"request_id": ctx.request_id, "function": function},
                    )
                )
        finally:
            ctx.release()

        duration_ms = round((time.perf_counter() - started) * 1000.0, 3)
        if isinstance(result, Ok):
            logger.info("invocation_completed", duration_ms=duration_ms)
        else:
            logger.warning(
                "invocation_failed",
                duration_ms=duration_ms,
                error_type=type(result.error).__name__,
                error=str(result.error),
            )

    return result


def invoke_recorded(
    handler: Handler,
    ctx: InvocationContext,
    *,
    name: str | None = None,
) -> InvocationRecord:
    """Like :func:`invoke` but also returns timing and identity for hosts."""
    function = name or ctx.function_name or _name_of(handler)
    started = time.perf_counter()
    result = invoke(handler, ctx, name=function)
    return InvocationRecord(
        request_id=ctx.request_id,
        function_name=function,
        result=result,
        duration_ms=round((time.perf_counter() - started) * 1000.0, 3),
    )


__all__ = ["Handler", "InvocationRecord", "invoke", "invoke_recorded"]

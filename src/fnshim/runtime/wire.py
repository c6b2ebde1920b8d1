"""Wire codec between handler results and the host's JSON envelopes.

One envelope per invocation, one JSON object per line:

    .. code-block:: text

        success  {"requestId": "...", "ok": true,  "payload": "hello"}
        failure  {"requestId": "...", "ok": false,
                  "error": {"errorType": "HandlerError",
                            "errorMessage": "...",
                            "stackTrace": ["..."]}}

The error object uses the field names AWS Lambda reports for function
errors, so envelopes can be forwarded unchanged.

Inbound lines are JSON objects. ``requestId``, ``timeoutMs``, ``cancelled``
and ``metadata`` steer the invocation context; the payload is ``event`` when
present, otherwise the whole object.
"""

from __future__ import annotations

import json
import traceback
from dataclasses import dataclass, field
from typing import Any

from fnshim.core.errors import WireFormatError
from fnshim.core.result import Ok, Result

_CONTROL_KEYS = ("requestId", "timeoutMs", "cancelled", "metadata")


@dataclass(frozen=True)
class InboundInvocation:
    """A decoded inbound line."""

    event: Any = None
    request_id: str | None = None
    timeout: float | None = None
    cancelled: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)


def _stack_trace(error: BaseException) -> list[str]:
    source = error.__cause__ or error
    if source.__traceback__ is None:
        return []
    return [line.rstrip("\n") for line in traceback.format_tb(source.__traceback__)]


def error_object(error: BaseException) -> dict[str, Any]:
    """Lambda-style error object for an exception."""
    return {
        "errorType": type(error).__name__,
        "errorMessage": str(error),
        "stackTrace": _stack_trace(error),
    }


def to_envelope(request_id: str, result: Result[Any]) -> dict[str, Any]:
    """Build the outbound envelope for a result."""
    if isinstance(result, Ok):
        return {"requestId": request_id, "ok": True, "payload": result.value}
    return {"requestId": request_id, "ok": False, "error": error_object(result.error)}


def encode(envelope: dict[str, Any]) -> bytes:
    """Compact single-line JSON; non-JSON values fall back to ``str()``."""
    return json.dumps(envelope, separators=(",", ":"), default=str).encode("utf-8")


def decode_event(line: str | bytes) -> InboundInvocation:
    """Decode one inbound line.

    Raises:
        WireFormatError: On invalid JSON, a non-object payload, or bad control fields
    """
    try:
        if isinstance(line, bytes):
            line = line.decode("utf-8")
        data = json.loads(line)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise WireFormatError(f"invalid invocation JSON: {exc}", cause=exc) from exc

    if not isinstance(data, dict):
        raise WireFormatError(f"invocation must be a JSON object, got {type(data).__name__}")

    timeout_ms = data.get("timeoutMs")
    if timeout_ms is not None and (
        isinstance(timeout_ms, bool) or not isinstance(timeout_ms, (int, float)) or timeout_ms < 0
    ):
        raise WireFormatError(f"timeoutMs must be a non-negative number, got {timeout_ms!r}")

    metadata = data.get("metadata")
    if metadata is None:
        metadata = {}
    elif not isinstance(metadata, dict):
        raise WireFormatError("metadata must be a JSON object")

    cancelled = data.get("cancelled")
    if cancelled is None:
        cancelled = False
    elif not isinstance(cancelled, bool):
        raise WireFormatError(f"cancelled must be a boolean, got {cancelled!r}")

    request_id = data.get("requestId")
    if request_id is not None and not isinstance(request_id, str):
        raise WireFormatError("requestId must be a string")

    if "event" in data:
        event = data["event"]
    else:
        event = {k: v for k, v in data.items() if k not in _CONTROL_KEYS}

    return InboundInvocation(
        event=event,
        request_id=request_id,
        timeout=None if timeout_ms is None else timeout_ms / 1000.0,
        cancelled=cancelled,
        metadata=metadata,
    )


__all__ = [
    "InboundInvocation",
    "decode_event",
    "encode",
    "error_object",
    "to_envelope",
]

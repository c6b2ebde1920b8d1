"""
Structured error types for fnshim.

Every failure a handler or host can surface is a ``FunctionError`` carrying a
category, a retry flag, free-form context, and an optional chained cause.
Handlers return these inside ``Err``; hosts format them for their wire.

Manifesto:
    - **Typed Error Hierarchy:** One subclass per failure kind
    - **Explicit Retry Semantics:** Each error knows if it's retryable
    - **Rich Context:** Errors carry metadata for logging and host envelopes
    - **Error Chaining:** Preserve original exceptions while adding context

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────────┐
        │                      FunctionError                               │
        │          (category, retryable, context, cause)                   │
        ├─────────────────────────────────────────────────────────────────┤
        │                                                                  │
        │  InvocationCancelled   DeadlineExceeded    HandlerError          │
        │  (CANCELLED)           (TIMEOUT, retry)    (HANDLER)             │
        │                                                 │                │
        │                                          InvalidResultError      │
        │                                                                  │
        │  HandlerNotFoundError  ContextReleasedError  WireFormatError     │
        │  (REGISTRY)            (USAGE)               (WIRE)              │
        │                                                                  │
        │  ConfigError                                                     │
        │  (CONFIG)                                                        │
        └─────────────────────────────────────────────────────────────────┘

Examples:
    >>> error = DeadlineExceeded("deadline passed", context={"request_id": "abc"})
    >>> error.retryable
    True
    >>> error.to_dict()["category"]
    'TIMEOUT'

Tags:
    error-handling, exception-hierarchy, fnshim

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories used for classification and routing.

    Attributes:
        CANCELLED: Invocation cancelled by the host
        TIMEOUT: Invocation deadline passed
        HANDLER: Handler raised or returned something unusable
        REGISTRY: Unknown function name
        USAGE: Misuse of a borrowed object
        WIRE: Malformed host payload
        CONFIG: Missing or invalid settings
        INTERNAL: Bugs, unexpected state
    """

    CANCELLED = "CANCELLED"
    TIMEOUT = "TIMEOUT"
    HANDLER = "HANDLER"
    REGISTRY = "REGISTRY"
    USAGE = "USAGE"
    WIRE = "WIRE"
    CONFIG = "CONFIG"
    INTERNAL = "INTERNAL"


class FunctionError(Exception):
    """
    Base exception for all fnshim errors.

    Subclasses set ``default_category`` and ``default_retryable`` so callers
    only pass a message in the common case.

    Examples:
        >>> error = FunctionError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>
        >>> error.retryable
        False

        >>> try:
        ...     raise ConnectionError("DNS lookup failed")
        ... except ConnectionError as e:
        ...     error = FunctionError("Network error", cause=e)
        >>> error.cause
        ConnectionError('DNS lookup failed')
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL
    default_retryable: bool = False

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        retryable: bool | None = None,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.retryable = retryable if retryable is not None else self.default_retryable
        self.context: dict[str, Any] = dict(context or {})
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> FunctionError:
        """
        Add context to this error (fluent API).

        Usage:
            return Err(HandlerError("boom").with_context(request_id=ctx.request_id))
        """
        self.context.update(kwargs)
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
            "retryable": self.retryable,
        }
        if self.context:
            result["context"] = dict(self.context)
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# INVOCATION LIFECYCLE
# =============================================================================


class InvocationCancelled(FunctionError):
    """The host cancelled the invocation."""

    default_category = ErrorCategory.CANCELLED


class DeadlineExceeded(FunctionError):
    """The invocation ran past its deadline. Retryable: a fresh call gets a fresh deadline."""

    default_category = ErrorCategory.TIMEOUT
    default_retryable = True


# =============================================================================
# HANDLER ERRORS
# =============================================================================


class HandlerError(FunctionError):
    """A handler raised instead of returning ``Err``."""

    default_category = ErrorCategory.HANDLER


class InvalidResultError(HandlerError):
    """A handler returned something other than ``Ok`` / ``Err``."""


class HandlerNotFoundError(FunctionError):
    """No handler is registered under the requested name."""

    default_category = ErrorCategory.REGISTRY

    def __init__(self, name: str, available: list[str] | None = None, **kwargs: Any):
        self.name = name
        self.available = sorted(available or [])
        message = f"No function registered as '{name}'. Available: {self.available or 'none'}"
        super().__init__(message, **kwargs)


class ContextReleasedError(FunctionError):
    """An invocation context was used after the call that borrowed it returned."""

    default_category = ErrorCategory.USAGE


# =============================================================================
# HOST / CONFIG ERRORS
# =============================================================================


class WireFormatError(FunctionError):
    """A host payload could not be decoded."""

    default_category = ErrorCategory.WIRE


class ConfigError(FunctionError):
    """Settings are missing or invalid."""

    default_category = ErrorCategory.CONFIG


# =============================================================================
# UTILITIES
# =============================================================================


def is_retryable(error: Exception) -> bool:
    """Check whether an error is retryable. Plain exceptions are not."""
    if isinstance(error, FunctionError):
        return error.retryable
    return False


def categorize_error(error: Exception) -> ErrorCategory:
    """Return the category of an error, INTERNAL for plain exceptions."""
    if isinstance(error, FunctionError):
        return error.category
    if isinstance(error, TimeoutError):
        return ErrorCategory.TIMEOUT
    return ErrorCategory.INTERNAL


__all__ = [
    "ErrorCategory",
    "FunctionError",
    "InvocationCancelled",
    "DeadlineExceeded",
    "HandlerError",
    "InvalidResultError",
    "HandlerNotFoundError",
    "ContextReleasedError",
    "WireFormatError",
    "ConfigError",
    "is_retryable",
    "categorize_error",
]

"""Core primitives: result envelope, errors, logging, settings."""

from fnshim.core.errors import (
    ConfigError,
    ContextReleasedError,
    DeadlineExceeded,
    ErrorCategory,
    FunctionError,
    HandlerError,
    HandlerNotFoundError,
    InvalidResultError,
    InvocationCancelled,
    WireFormatError,
)
from fnshim.core.result import Err, Ok, Result, is_result, try_result, try_result_with

__all__ = [
    "ConfigError",
    "ContextReleasedError",
    "DeadlineExceeded",
    "Err",
    "ErrorCategory",
    "FunctionError",
    "HandlerError",
    "HandlerNotFoundError",
    "InvalidResultError",
    "InvocationCancelled",
    "Ok",
    "Result",
    "WireFormatError",
    "is_result",
    "try_result",
    "try_result_with",
]

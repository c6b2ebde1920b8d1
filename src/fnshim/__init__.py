"""
fnshim — register a plain function with a serverless-style host loop.

A handler takes an :class:`~fnshim.runtime.context.InvocationContext` and
returns ``Ok(value)`` or ``Err(error)``; ``start(handler)`` hands it to a host
that owns the loop and formats results for its wire.

Usage:
    from fnshim import Ok, start

    def handler(ctx):
        return Ok("hello")

    start(handler)
"""

from fnshim.core.errors import FunctionError
from fnshim.core.result import Err, Ok, Result
from fnshim.runtime.context import InvocationContext
from fnshim.runtime.hosts import LocalHost, StdioHost, lambda_adapter
from fnshim.runtime.invoke import invoke
from fnshim.runtime.lifecycle import start
from fnshim.runtime.registry import register_function

__version__ = "0.1.0"

__all__ = [
    "Err",
    "FunctionError",
    "InvocationContext",
    "LocalHost",
    "Ok",
    "Result",
    "StdioHost",
    "invoke",
    "lambda_adapter",
    "register_function",
    "start",
    "__version__",
]

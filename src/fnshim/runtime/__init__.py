"""Invocation runtime: context, registry, shim, wire codec and hosts.

Related modules:
    context.py   — InvocationContext borrowed by handlers
    registry.py  — HandlerRegistry and register_function
    invoke.py    — the shim that turns any handler outcome into Ok / Err
    wire.py      — JSON envelopes hosts emit
    hosts.py     — LocalHost, StdioHost, lambda_adapter
    lifecycle.py — start(), the process-start registration call
"""

from fnshim.runtime.context import InvocationContext
from fnshim.runtime.hosts import LocalHost, RuntimeHost, StdioHost, lambda_adapter
from fnshim.runtime.invoke import Handler, InvocationRecord, invoke
from fnshim.runtime.lifecycle import resolve_host, start
from fnshim.runtime.registry import (
    HandlerRegistry,
    get_default_registry,
    register_function,
    reset_default_registry,
)

__all__ = [
    "Handler",
    "HandlerRegistry",
    "InvocationContext",
    "InvocationRecord",
    "LocalHost",
    "RuntimeHost",
    "StdioHost",
    "get_default_registry",
    "invoke",
    "lambda_adapter",
    "register_function",
    "reset_default_registry",
    "resolve_host",
    "start",
]

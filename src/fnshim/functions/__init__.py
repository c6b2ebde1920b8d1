"""Bundled functions.

Importing a function module registers it into the global registry;
``register_builtin_functions`` does the same for an explicit registry, so
callers that reset or inject registries still see the bundled functions.
"""

from __future__ import annotations

from fnshim.functions import hello
from fnshim.runtime.registry import HandlerRegistry, get_default_registry

BUILTIN_FUNCTIONS = {
    "hello": (hello.handler, "Return the fixed greeting."),
}


def register_builtin_functions(registry: HandlerRegistry | None = None) -> HandlerRegistry:
    """Register every bundled function that is not registered yet."""
    target = registry if registry is not None else get_default_registry()
    for name, (handler, description) in BUILTIN_FUNCTIONS.items():
        if not target.has(name):
            target.register(name, handler, description=description)
    return target


__all__ = ["BUILTIN_FUNCTIONS", "register_builtin_functions"]

"""Handler Registry — injectable name → handler lookup.

Manifesto:
Hosts need to resolve ``"hello"`` to a callable handler. The registry
decouples registration (at import time or in ``start()``) from resolution
(at dispatch time), and supports both a global singleton and injectable
instances for testing.

ARCHITECTURE
────────────
::

    HandlerRegistry
      ├── .register(name, handler)  ─ store handler
      ├── .get(name)                ─ lookup, HandlerNotFoundError if absent
      ├── .list_functions()         ─ registered names
      └── .has(name)                ─ existence check

    register_function(name)    ─ decorator using the global registry
    get_default_registry()     ─ module-level singleton
    reset_default_registry()   ─ clear for testing

Tags:
    fnshim, runtime, registry, handler-registry, lookup

Doc-Types:
    api-reference
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from fnshim.core.errors import HandlerNotFoundError


class HandlerRegistry:
    """Injectable handler registry.

    Example:
        >>> registry = HandlerRegistry()
        >>>
        >>> @register_function("hello", registry=registry)
        ... def hello(ctx):
        ...     return Ok("hello")
        >>>
        >>> registry.get("hello") is hello
        True
    """

    def __init__(self):
        self._handlers: dict[str, Callable] = {}
        self._metadata: dict[str, dict[str, Any]] = {}

    def register(
        self,
        name: str,
        handler: Callable,
        description: str | None = None,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Register a handler, replacing any previous one with the same name.

        Args:
            name: Function name hosts resolve
            handler: Callable taking an InvocationContext and returning a Result
            description: Optional description for listings
            tags: Optional tags for filtering/categorization

        Raises:
            TypeError: If handler is not callable
            ValueError: If name is empty
        """
        if not callable(handler):
            raise TypeError(f"handler for '{name}' must be callable, got {type(handler).__name__}")
        if not name:
            raise ValueError("function name must be non-empty")
        self._handlers[name] = handler
        self._metadata[name] = {
            "name": name,
            "handler": f"{getattr(handler, '__module__', '?')}.{getattr(handler, '__qualname__', repr(handler))}",
            "description": description,
            "tags": tags or {},
        }

    def get(self, name: str) -> Callable:
        """Get a handler.

        Raises:
            HandlerNotFoundError: If no handler is registered under name
        """
        if name not in self._handlers:
            raise HandlerNotFoundError(name, available=list(self._handlers))
        return self._handlers[name]

    def has(self, name: str) -> bool:
        """Check if handler exists."""
        return name in self._handlers

    def get_metadata(self, name: str) -> dict[str, Any] | None:
        """Get handler metadata (description, tags, etc.)."""
        metadata = self._metadata.get(name)
        return metadata.copy() if metadata else None

    def list_functions(self) -> list[str]:
        """Sorted list of registered names."""
        return sorted(self._handlers)

    def list_with_metadata(self) -> list[dict[str, Any]]:
        """List handlers with their metadata, sorted by name."""
        return [self._metadata[name].copy() for name in self.list_functions()]

    def unregister(self, name: str) -> bool:
        """Unregister a handler.

        Returns:
            True if handler was removed, False if not found
        """
        if name in self._handlers:
            del self._handlers[name]
            del self._metadata[name]
            return True
        return False

    def clear(self) -> None:
        """Clear all handlers (for testing)."""
        self._handlers.clear()
        self._metadata.clear()

    def __len__(self) -> int:
        return len(self._handlers)


# === GLOBAL DEFAULT REGISTRY ===

_default_registry: HandlerRegistry | None = None


def get_default_registry() -> HandlerRegistry:
    """Get the global default registry, creating it on first access."""
    global _default_registry
    if _default_registry is None:
        _default_registry = HandlerRegistry()
    return _default_registry


def reset_default_registry() -> None:
    """Reset the global registry (for testing)."""
    global _default_registry
    _default_registry = None


# === DECORATOR API ===


def register_function(
    name: str | None = None,
    registry: HandlerRegistry | None = None,
    description: str | None = None,
    tags: dict[str, str] | None = None,
):
    """Decorator to register a handler.

    Args:
        name: Function name (defaults to the decorated function's __name__)
        registry: Optional registry (uses global if None)
        description: Optional description (defaults to the docstring)
        tags: Optional tags

    Example:
        >>> @register_function("hello")
        ... def handler(ctx):
        ...     return Ok("hello")
    """

    def decorator(func: Callable) -> Callable:
        target = registry if registry is not None else get_default_registry()
        target.register(
            name or func.__name__,
            func,
            description=description or func.__doc__,
            tags=tags,
        )
        return func

    return decorator


__all__ = [
    "HandlerRegistry",
    "get_default_registry",
    "reset_default_registry",
    "register_function",
]

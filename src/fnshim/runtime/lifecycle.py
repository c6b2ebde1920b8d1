"""Process-start registration: hand a handler to a host loop.

``start(handler)`` is the single call a function module makes at process
start. It registers the handler, picks the host, and blocks in the host's
loop until the host stops.

Usage::

    from fnshim.runtime import start

    def handler(ctx):
        return Ok("hello")

    if __name__ == "__main__":
        start(handler)
"""

from __future__ import annotations

import sys

from fnshim.core.logging import configure_logging, ensure_logging, get_logger
from fnshim.core.settings import FunctionSettings, get_settings
from fnshim.runtime.hosts import LocalHost, RuntimeHost, StdioHost
from fnshim.runtime.invoke import Handler
from fnshim.runtime.registry import HandlerRegistry, get_default_registry

logger = get_logger(__name__)


def resolve_host(settings: FunctionSettings) -> RuntimeHost:
    """Build the host named by ``settings.host``."""
    if settings.host == "local":
        return LocalHost(default_timeout=settings.default_timeout)
    return StdioHost(sys.stdin, sys.stdout, default_timeout=settings.default_timeout)


def start(
    handler: Handler,
    *,
    name: str | None = None,
    host: RuntimeHost | None = None,
    registry: HandlerRegistry | None = None,
    settings: FunctionSettings | None = None,
    configure: bool = True,
) -> RuntimeHost:
    """Register ``handler`` and run it under a host loop until the host stops.

    Args:
        handler: Callable taking an InvocationContext and returning Ok / Err
        name: Registered function name (defaults to handler.__name__)
        host: Host to serve on; built from settings when None
        registry: Registry to record the handler in (global default if None)
        settings: Settings override (cached process settings if None)
        configure: Configure structlog from settings before serving. When
            False, logging is still pointed at stderr if nothing configured it

    Returns:
        The host, after its loop has returned

    Raises:
        TypeError: If handler is not callable
        ConfigError: If the environment holds invalid settings
    """
    if not callable(handler):
        raise TypeError(f"start() needs a callable handler, got {type(handler).__name__}")

    settings = settings if settings is not None else get_settings()
    log_options = {
        "level": settings.log_level,
        "json_format": settings.json_logs,
        "service": settings.service_name,
    }
    if configure:
        configure_logging(**log_options)
    else:
        ensure_logging(**log_options)

    function = name or getattr(handler, "__name__", "handler")
    target = registry if registry is not None else get_default_registry()
    target.register(function, handler)

    host = host if host is not None else resolve_host(settings)
    logger.info("function_registered", function=function, host=type(host).__name__)
    host.serve(function, handler)
    return host


__all__ = ["resolve_host", "start"]

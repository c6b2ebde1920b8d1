"""
Shared pytest fixtures and configuration for fnshim tests.

This module provides:
- Registry / settings / logging reset for test isolation
- An isolated HandlerRegistry
- A few reusable handlers
"""

import os
from pathlib import Path
from typing import Any, Generator

import pytest
import structlog

from fnshim.core.errors import HandlerError
from fnshim.core.result import Err, Ok
from fnshim.core.settings import reset_settings
from fnshim.runtime.context import InvocationContext
from fnshim.runtime.registry import HandlerRegistry, reset_default_registry


# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-mark tests based on their location."""
    for item in items:
        test_path = Path(item.fspath).relative_to(Path(__file__).parent)

        if "integration" in str(test_path) or "_integration" in item.name:
            item.add_marker(pytest.mark.integration)

        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Isolation Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_runtime(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """
    Reset global state before and after each test.

    Clears the default handler registry, the cached settings, structlog
    configuration and bound context, and any FNSHIM_* variables from the
    developer's environment.
    """
    for key in [k for k in os.environ if k.startswith("FNSHIM_")]:
        monkeypatch.delenv(key, raising=False)
    reset_default_registry()
    reset_settings()
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
    yield
    reset_default_registry()
    reset_settings()
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()


@pytest.fixture
def registry() -> HandlerRegistry:
    """A fresh registry not shared with the global default."""
    return HandlerRegistry()


# =============================================================================
# Handler Fixtures
# =============================================================================


@pytest.fixture
def echo_handler():
    """Handler that returns its event, exercising context reads."""

    def echo(ctx: InvocationContext) -> Any:
        return Ok(ctx.event)

    return echo


@pytest.fixture
def failing_handler():
    """Handler that reports failure on the explicit channel."""

    def failing(ctx: InvocationContext) -> Any:
        return Err(HandlerError("nope", context={"request_id": ctx.request_id}))

    return failing


@pytest.fixture
def raising_handler():
    """Handler that breaks the contract by raising."""

    def raising(ctx: InvocationContext) -> Any:
        raise RuntimeError("boom")

    return raising

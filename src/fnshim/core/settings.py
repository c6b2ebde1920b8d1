"""Process settings for fnshim hosts and the CLI.

Everything a deployment might tune (log level and format, which host loop
``start()`` hands the handler to, the default invocation timeout) is read from
``FNSHIM_*`` environment variables or a ``.env`` file.

Manifesto:
    Configuration should be explicit, validated, and environment-driven.

    - **Pydantic validation:** Type-checked at startup, not on first invocation
    - **Environment-driven:** Reads from env vars and .env files
    - **Sensible defaults:** ``start(handler)`` works with no configuration

Examples:
    >>> from fnshim.core.settings import FunctionSettings
    >>> settings = FunctionSettings(host="local", default_timeout=3.0)
    >>> settings.default_timeout
    3.0

Tags:
    settings, configuration, pydantic, environment, fnshim

Doc-Types:
    - API Reference
    - Configuration Guide
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Literal

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from fnshim.core.errors import ConfigError


class FunctionSettings(BaseSettings):
    """Settings shared by the hosts, the shim and the CLI.

    Fields
    ──────
    log_level       : structlog level name
    json_logs       : force JSON (True) / console (False); None = auto-detect
    host            : loop ``start()`` uses when no host is passed
    default_timeout : seconds per invocation when the host supplies no deadline
    function        : function name the CLI and ``python -m fnshim`` target
    service_name    : ``service`` field on every log line
    """

    model_config = SettingsConfigDict(
        env_prefix="FNSHIM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Observability ────────────────────────────────────────────
    log_level: str = "INFO"
    json_logs: bool | None = None
    service_name: str = "fnshim"

    # ── Runtime ──────────────────────────────────────────────────
    host: Literal["stdio", "local"] = "stdio"
    default_timeout: float | None = Field(default=None, gt=0)
    function: str = Field(default="hello", min_length=1)

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        upper = value.upper()
        if not isinstance(logging.getLevelName(upper), int):
            raise ValueError(f"unknown log level {value!r}")
        return upper


@lru_cache(maxsize=1)
def get_settings() -> FunctionSettings:
    """Load settings once per process.

    Raises:
        ConfigError: If the environment holds invalid values
    """
    try:
        return FunctionSettings()
    except ValidationError as exc:
        raise ConfigError(f"Invalid fnshim settings: {exc}", cause=exc) from exc


def reset_settings() -> None:
    """Drop the cached settings (for testing)."""
    get_settings.cache_clear()

"""Command-line interface (``fnshim``)."""

from fnshim.cli.app import app

__all__ = ["app"]

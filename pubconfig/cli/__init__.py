"""Command line interface for pubconfig."""

from pubconfig.cli.app import app, main

__all__ = ["app", "main"]

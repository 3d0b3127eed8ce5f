"""CLI module."""

from goinspect.cli.main import cli

__all__ = ["cli"]

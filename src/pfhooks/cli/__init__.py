"""
CLI module for pfhooks.

Provides the command-line interface using Click.
"""

from pfhooks.cli.main import cli, main

__all__ = ["main", "cli"]

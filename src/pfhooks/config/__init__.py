"""
Configuration module for pfhooks.

Uses pydantic-settings for environment variable loading and YAML files
for the global and device declarations.
"""

from pfhooks.config.settings import Settings
from pfhooks.config.sources import ConfigFileError
from pfhooks.config.types import DeclarationSet

__all__ = ["ConfigFileError", "DeclarationSet", "Settings"]

"""
pfhooks - Phenotype flag override hooks

Resolves namespace aliases and typed flag overrides from static
declarations and merges them into key/value collections read from
phenotype-style content providers and shared-preference property maps.
"""

import importlib.metadata as _metadata

# Version is defined in pyproject.toml - read it and parse into tuple (primary representation)
_raw_version = _metadata.version("pfhooks")
__version_info__: tuple[int, int, int] = tuple(int(x) for x in _raw_version.split(".")[:3])  # type: ignore[assignment]
__version__: str = ".".join(str(x) for x in __version_info__)
__author__ = "pfhooks Contributors"

from pfhooks.config import Settings  # noqa: E402
from pfhooks.hooks import OverrideHooks  # noqa: E402

__all__ = ["__version__", "__version_info__", "OverrideHooks", "Settings"]

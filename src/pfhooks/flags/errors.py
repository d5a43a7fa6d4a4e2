"""
Exception taxonomy for flag override resolution.

Parsing functions raise these; the directory and table builders catch
them, log, and skip the offending declaration. Nothing here is ever
allowed to escape a request: the worst outcome of any declaration problem
is that no override is applied.
"""

from __future__ import annotations

import typing as _typing


class OverrideError(Exception):
    """Base class for all flag override errors."""

    pass


class MalformedDeclarationError(OverrideError):
    """A declaration line does not have the expected field count."""

    def __init__(self, declaration: str, reason: str) -> None:
        self.declaration = declaration
        self.reason = reason
        super().__init__(f"Invalid config: {declaration!r} ({reason})")


class UnsupportedTypeTagError(OverrideError):
    """An override declares a type tag outside the supported set."""

    def __init__(self, type_tag: str, declaration: str | None = None) -> None:
        self.type_tag = type_tag
        self.declaration = declaration
        message = f"Unsupported type specifier: {type_tag}"
        if declaration is not None:
            message += f" for config: {declaration}"
        super().__init__(message)


class ValueParseError(OverrideError):
    """A raw override value cannot be parsed as its declared type."""

    def __init__(self, type_tag: str, raw_value: str, reason: str) -> None:
        self.type_tag = type_tag
        self.raw_value = raw_value
        super().__init__(f"Cannot parse {raw_value!r} as {type_tag}: {reason}")


class UnexpectedProjectionError(OverrideError):
    """A tabular read does not have the exact (key, value) column shape."""

    def __init__(self, projection: _typing.Sequence[str] | None) -> None:
        self.projection = projection
        super().__init__(f"unexpected projection {list(projection) if projection is not None else None}")

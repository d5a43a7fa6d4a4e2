"""
Namespace directory: which namespaces belong to which package.

Declarations have the form ``package=alias1,alias2,...``. An alias that
starts with '.' is relative to the package (``.foo`` -> ``package.foo``).
Every package additionally owns its own name and the self-disambiguated
form ``package#package``, appended after the declared aliases.

Global declarations are processed before device declarations. A package
declared in both places simply accumulates aliases from both lines.
"""

from __future__ import annotations

import collections.abc as _abc
import dataclasses as _dataclasses
import logging as _logging
import typing as _typing

import pfhooks.constants as constants
import pfhooks.flags.errors as errors

_logger = _logging.getLogger(__name__)


@_dataclasses.dataclass(frozen=True)
class NamespaceDeclaration:
    """One parsed ``package=alias,...`` line."""

    package: str
    aliases: tuple[str, ...]

    @classmethod
    def parse(cls, declaration: str) -> NamespaceDeclaration:
        """
        Parse a namespace declaration line.

        Relative aliases are expanded here; the implicit self-aliases are
        not, since they belong to the package rather than to the line.

        Raises:
            MalformedDeclarationError: If the line has no '=' or no package.
        """
        package, sep, alias_csv = declaration.partition(constants.DECLARATION_SEPARATOR)
        if not sep:
            raise errors.MalformedDeclarationError(declaration, "missing '='")
        if not package:
            raise errors.MalformedDeclarationError(declaration, "empty package name")

        aliases = tuple(
            package + alias if alias.startswith(constants.RELATIVE_ALIAS_MARKER) else alias
            for alias in alias_csv.split(constants.ALIAS_SEPARATOR)
        )
        return cls(package=package, aliases=aliases)


@_dataclasses.dataclass(frozen=True)
class RequestTarget:
    """The package (and, in property-map mode, the file) a request addresses."""

    package: str
    file: str | None = None


class Directory(_abc.Mapping[str, list[str]]):
    """Read-only mapping of package -> ordered alias list."""

    def __init__(self, entries: dict[str, list[str]] | None = None) -> None:
        self._entries: dict[str, list[str]] = entries or {}

    def __getitem__(self, package: str) -> list[str]:
        return self._entries[package]

    def __iter__(self) -> _typing.Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def lookup(self, package: str) -> list[str] | None:
        """Aliases for a package, or None if the package declares nothing."""
        aliases = self._entries.get(package)
        return list(aliases) if aliases is not None else None

    def to_dict(self) -> dict[str, list[str]]:
        """Convert to a plain dict (for JSON output)."""
        return {package: list(aliases) for package, aliases in self._entries.items()}


def build_directory(
    global_declarations: _abc.Iterable[str],
    device_declarations: _abc.Iterable[str] = (),
) -> Directory:
    """
    Build the package -> alias directory.

    Args:
        global_declarations: Platform-wide namespace declarations.
        device_declarations: Device-specific namespace declarations,
            processed after the global ones.

    Returns:
        Directory with aliases in declaration order, each package's
        self-aliases following the aliases of every line that declares it.
        Malformed lines are logged and skipped.
    """
    entries: dict[str, list[str]] = {}

    for line in [*global_declarations, *device_declarations]:
        try:
            declaration = NamespaceDeclaration.parse(line)
        except errors.MalformedDeclarationError as e:
            _logger.debug("%s", e)
            continue

        aliases = entries.setdefault(declaration.package, [])
        aliases.extend(declaration.aliases)
        aliases.append(declaration.package)
        aliases.append(declaration.package + constants.OWNER_SEPARATOR + declaration.package)

    return Directory(entries)


def resolve_package_and_file(token: str, is_property_map: bool) -> RequestTarget:
    """
    Work out which package a request token belongs to.

    Property-map tokens are ``package/file``. Tabular tokens are either a
    bare namespace (which is also looked up as a package name) or
    ``namespace#package``, in which case the part after '#' is the package.
    """
    if is_property_map:
        segments = token.split(constants.PATH_SEPARATOR)
        file = segments[1] if len(segments) > 1 else None
        return RequestTarget(package=segments[0], file=file)

    if constants.OWNER_SEPARATOR in token:
        return RequestTarget(package=token.split(constants.OWNER_SEPARATOR)[1])
    return RequestTarget(package=token)


def lookup_aliases(directory: Directory, package: str) -> list[str] | None:
    """Return the aliases declared for package, or None when it has no declaration."""
    return directory.lookup(package)

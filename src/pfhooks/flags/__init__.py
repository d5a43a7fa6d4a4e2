"""
Flag override resolution.

Builds the namespace directory and the typed override table from raw
declarations and merges the applicable overrides into key/value
collections.
"""

from pfhooks.flags.coercion import FlagType, FlagValue, coerce
from pfhooks.flags.directory import (
    Directory,
    NamespaceDeclaration,
    RequestTarget,
    build_directory,
    lookup_aliases,
    resolve_package_and_file,
)
from pfhooks.flags.engine import DeclarationSource, MergeEngine, StaticDeclarations
from pfhooks.flags.errors import (
    MalformedDeclarationError,
    OverrideError,
    UnexpectedProjectionError,
    UnsupportedTypeTagError,
    ValueParseError,
)
from pfhooks.flags.overrides import OverrideEntry, OverrideTable, build_override_table
from pfhooks.flags.resolver import candidate_namespaces

__all__ = [
    "DeclarationSource",
    "Directory",
    "FlagType",
    "FlagValue",
    "MalformedDeclarationError",
    "MergeEngine",
    "NamespaceDeclaration",
    "OverrideEntry",
    "OverrideError",
    "OverrideTable",
    "RequestTarget",
    "StaticDeclarations",
    "UnexpectedProjectionError",
    "UnsupportedTypeTagError",
    "ValueParseError",
    "build_directory",
    "build_override_table",
    "candidate_namespaces",
    "coerce",
    "lookup_aliases",
    "resolve_package_and_file",
]

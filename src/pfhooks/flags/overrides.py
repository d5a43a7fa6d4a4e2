"""
Override table: namespace -> key -> typed value.

Declarations have the form ``namespace/key/type=value``. The value is
everything after the first '=' (empty when there is none). Later
declarations for the same namespace and key replace earlier ones.
"""

from __future__ import annotations

import collections.abc as _abc
import dataclasses as _dataclasses
import logging as _logging
import typing as _typing

import pfhooks.constants as constants
import pfhooks.flags.coercion as coercion
import pfhooks.flags.errors as errors

_logger = _logging.getLogger(__name__)


@_dataclasses.dataclass(frozen=True)
class OverrideEntry:
    """One parsed ``namespace/key/type=value`` line."""

    namespace: str
    key: str
    type_tag: str
    raw_value: str

    @classmethod
    def parse(cls, declaration: str) -> OverrideEntry:
        """
        Split an override declaration into its parts.

        Raises:
            MalformedDeclarationError: If the key path is not namespace/key/type.
        """
        full_key, _, raw_value = declaration.partition(constants.DECLARATION_SEPARATOR)
        segments = full_key.split(constants.PATH_SEPARATOR)
        if len(segments) != constants.OVERRIDE_KEY_SEGMENTS:
            raise errors.MalformedDeclarationError(
                declaration,
                f"expected namespace/key/type, got {len(segments)} segment(s)",
            )
        namespace, key, type_tag = segments
        return cls(namespace=namespace, key=key, type_tag=type_tag, raw_value=raw_value)

    def to_value(self) -> coercion.FlagValue:
        """
        Coerce the raw value according to the type tag.

        Raises:
            UnsupportedTypeTagError: Unknown type tag.
            ValueParseError: Value does not parse as the declared type.
        """
        return coercion.coerce(self.type_tag, self.raw_value)


class OverrideTable(_abc.Mapping[str, dict[str, coercion.FlagValue]]):
    """Read-only mapping of namespace -> {key -> FlagValue}."""

    def __init__(self, entries: dict[str, dict[str, coercion.FlagValue]] | None = None) -> None:
        self._entries: dict[str, dict[str, coercion.FlagValue]] = entries or {}

    def __getitem__(self, namespace: str) -> dict[str, coercion.FlagValue]:
        return self._entries[namespace]

    def __iter__(self) -> _typing.Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def flags_for(self, namespace: str) -> dict[str, coercion.FlagValue]:
        """Overrides filed under a namespace (empty dict if none)."""
        return dict(self._entries.get(namespace, {}))

    def to_dict(self) -> dict[str, dict[str, dict[str, _typing.Any]]]:
        """Convert to a JSON-friendly dict."""
        result: dict[str, dict[str, dict[str, _typing.Any]]] = {}
        for namespace, flags in self._entries.items():
            result[namespace] = {}
            for key, flag in flags.items():
                value = flag.value
                if isinstance(value, bytes):
                    value = value.hex()
                result[namespace][key] = {"type": flag.type.value, "value": value}
        return result


def build_override_table(declarations: _abc.Iterable[str]) -> OverrideTable:
    """
    Parse override declarations into a table.

    Malformed key paths, unsupported type tags and unparseable values are
    logged and skipped; they never affect other declarations.

    Args:
        declarations: Override lines, global declarations first.

    Returns:
        OverrideTable with last-write-wins semantics per namespace/key.
    """
    entries: dict[str, dict[str, coercion.FlagValue]] = {}

    for line in declarations:
        try:
            entry = OverrideEntry.parse(line)
            value = entry.to_value()
        except errors.UnsupportedTypeTagError as e:
            _logger.debug("Unsupported type specifier: %s for config: %s", e.type_tag, line)
            continue
        except errors.OverrideError as e:
            _logger.debug("%s", e)
            continue

        entries.setdefault(entry.namespace, {})[entry.key] = value

    return OverrideTable(entries)

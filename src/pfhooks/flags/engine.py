"""
Merge engine - decides which overrides apply to a request and merges them.

The engine builds the namespace directory and the override table from
the declaration source on every request; nothing is cached between calls.
The enable toggle is injected at construction so the engine never reads
process-wide state.

Two strategies:

- gservices prefix match: when the caller supplies selection prefixes for
  the reserved gservices namespace, every gservices override whose key
  starts with one of the prefixes is copied. Package aliasing is not used.
- General: candidate namespaces are resolved from the directory, their
  overrides are unioned in order (later namespaces win), then entries
  filed under the exact token are applied last.
"""

from __future__ import annotations

import collections.abc as _abc
import logging as _logging
import typing as _typing

import pfhooks.constants as constants
import pfhooks.flags.coercion as coercion
import pfhooks.flags.directory as directory
import pfhooks.flags.overrides as overrides
import pfhooks.flags.resolver as resolver

_logger = _logging.getLogger(__name__)


class DeclarationSource(_typing.Protocol):
    """Anything that can hand out the raw declaration sequences."""

    def namespace_declarations(self) -> tuple[list[str], list[str]]:
        """Return (global, device) namespace declarations."""
        ...

    def override_declarations(self) -> list[str]:
        """Return override declarations, global first then device."""
        ...


class StaticDeclarations:
    """In-memory declaration source (tests, CLI experiments)."""

    def __init__(
        self,
        package_namespaces: _abc.Iterable[str] = (),
        flags_override: _abc.Iterable[str] = (),
        *,
        device_package_namespaces: _abc.Iterable[str] = (),
        device_flags_override: _abc.Iterable[str] = (),
    ) -> None:
        self._global_namespaces = list(package_namespaces)
        self._device_namespaces = list(device_package_namespaces)
        self._overrides = [*flags_override, *device_flags_override]

    def namespace_declarations(self) -> tuple[list[str], list[str]]:
        return list(self._global_namespaces), list(self._device_namespaces)

    def override_declarations(self) -> list[str]:
        return list(self._overrides)


class MergeEngine:
    """
    Applies declared overrides to key/value collections.

    Never raises for declaration problems: malformed or untyped entries
    are skipped while the tables are built, and the worst outcome of any
    request is that nothing is merged.
    """

    def __init__(
        self,
        declarations: DeclarationSource,
        *,
        enabled: bool = True,
    ) -> None:
        """
        Initialize the engine.

        Args:
            declarations: Source of namespace and override declarations.
            enabled: Process-wide toggle; a disabled engine never merges.
        """
        self._declarations = declarations
        self._enabled = enabled

    @property
    def enabled(self) -> bool:
        """Whether the engine merges anything at all."""
        return self._enabled

    def build_directory(self) -> directory.Directory:
        """Build a fresh namespace directory from the declarations."""
        global_decls, device_decls = self._declarations.namespace_declarations()
        return directory.build_directory(global_decls, device_decls)

    def build_override_table(self) -> overrides.OverrideTable:
        """Build a fresh override table from the declarations."""
        return overrides.build_override_table(self._declarations.override_declarations())

    def resolve_overrides(
        self,
        token: str,
        is_property_map: bool,
    ) -> dict[str, coercion.FlagValue]:
        """
        Union of overrides that apply to a token, without merging anything.

        Returns:
            key -> FlagValue, in precedence order (later sources already
            applied over earlier ones). Empty when nothing applies.
        """
        namespaces = resolver.candidate_namespaces(
            self.build_directory(),
            token,
            is_property_map,
        )
        if namespaces is None:
            return {}

        table = self.build_override_table()
        resolved: dict[str, coercion.FlagValue] = {}
        for namespace in namespaces:
            resolved.update(table.flags_for(namespace))
        return resolved

    def apply_overrides(
        self,
        token: str | None,
        selection_prefixes: _abc.Sequence[str] | None,
        target: _abc.MutableMapping[str, _typing.Any] | None,
        is_property_map: bool = False,
    ) -> bool:
        """
        Merge applicable overrides into ``target`` in place.

        Args:
            token: Request token (namespace, namespace#package or package/file).
            selection_prefixes: Key prefixes for the gservices prefix match.
                None selects the general alias-based strategy.
            target: The collection to update.
            is_property_map: Whether the target is a property map; booleans
                are then stored as "1"/"0".

        Returns:
            True if at least one entry was written into ``target``.
        """
        if not self._enabled or token is None or target is None:
            return False

        if selection_prefixes is not None and token == constants.NAMESPACE_GSERVICES:
            return self._apply_prefix_overrides(selection_prefixes, target, is_property_map)

        resolved = self.resolve_overrides(token, is_property_map)
        if not resolved:
            return False

        _logger.debug("apply_overrides: %s (%d entries)", token, len(resolved))
        target.update(_materialize(resolved, is_property_map))
        return True

    def _apply_prefix_overrides(
        self,
        selection_prefixes: _abc.Sequence[str],
        target: _abc.MutableMapping[str, _typing.Any],
        is_property_map: bool,
    ) -> bool:
        gservices = self.build_override_table().flags_for(constants.NAMESPACE_GSERVICES)
        if not gservices:
            return False

        modified = False
        for prefix in selection_prefixes:
            for key, flag in gservices.items():
                if key.startswith(prefix):
                    _logger.debug("apply_overrides: %s/%s", constants.NAMESPACE_GSERVICES, prefix)
                    target[key] = _materialize_value(flag, is_property_map)
                    modified = True
        return modified


def _materialize_value(flag: coercion.FlagValue, is_property_map: bool) -> _typing.Any:
    if is_property_map:
        return flag.to_property_map_value()
    return flag.value


def _materialize(
    resolved: dict[str, coercion.FlagValue],
    is_property_map: bool,
) -> dict[str, _typing.Any]:
    return {key: _materialize_value(flag, is_property_map) for key, flag in resolved.items()}

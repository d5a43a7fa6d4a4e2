"""
Store adapter contract.

The merge engine only ever sees a mutable key/value mapping. Adapters own
the conversion between their native representation and that mapping:
they read existing entries out, let the engine merge, and write the
merged entries back in whatever shape their caller expects.
"""

from __future__ import annotations

import abc as _abc
import collections.abc as _collections_abc
import typing as _typing

import pfhooks.flags.engine as engine

SourceT = _typing.TypeVar("SourceT")
ResultT = _typing.TypeVar("ResultT")


class KeyValueStore(_abc.ABC, _typing.Generic[SourceT, ResultT]):
    """
    Base class for backing-store adapters.

    Subclasses implement read_entries/write_entries; merge() drives the
    engine between the two.
    """

    is_property_map: _typing.ClassVar[bool] = False
    """Whether the engine should use property-map value conventions."""

    def __init__(self, merge_engine: engine.MergeEngine) -> None:
        self._engine = merge_engine

    @property
    def engine(self) -> engine.MergeEngine:
        """The merge engine used by this adapter."""
        return self._engine

    @_abc.abstractmethod
    def read_entries(self, source: SourceT) -> _collections_abc.MutableMapping[str, _typing.Any]:
        """Materialize the existing entries as a mutable key/value mapping."""
        ...

    @_abc.abstractmethod
    def write_entries(
        self,
        source: SourceT,
        entries: _collections_abc.MutableMapping[str, _typing.Any],
        changed: bool,
    ) -> ResultT:
        """Re-materialize merged entries in the native shape."""
        ...

    def merge(
        self,
        token: str,
        source: SourceT,
        selection_prefixes: _collections_abc.Sequence[str] | None = None,
    ) -> tuple[bool, ResultT]:
        """
        Read, merge and write back.

        Returns:
            Tuple of (changed, native result).
        """
        entries = self.read_entries(source)
        changed = self._engine.apply_overrides(
            token,
            selection_prefixes,
            entries,
            self.is_property_map,
        )
        return changed, self.write_entries(source, entries, changed)

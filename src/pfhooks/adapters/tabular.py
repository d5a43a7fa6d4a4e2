"""
Tabular (two-column key/value) store adapter.

Phenotype and gservices content providers answer queries with rows of
``(key, value)``. This adapter drains an existing row source into a dict,
lets the merge engine update it, and returns a fresh in-memory row source
with the merged rows. Any other column shape is refused outright.
"""

from __future__ import annotations

import collections.abc as _abc
import contextlib as _contextlib
import logging as _logging
import typing as _typing

import pfhooks.adapters.base as base
import pfhooks.constants as constants
import pfhooks.flags.errors as errors

_logger = _logging.getLogger(__name__)

_KEY_INDEX = 0
_VALUE_INDEX = 1


@_typing.runtime_checkable
class RowSource(_typing.Protocol):
    """Minimal cursor-like interface: named columns, iterable rows, closeable."""

    @property
    def column_names(self) -> _abc.Sequence[str]: ...

    def __iter__(self) -> _typing.Iterator[_abc.Sequence[_typing.Any]]: ...

    def close(self) -> None: ...


class MatrixRows:
    """In-memory row source built from a list of rows."""

    def __init__(
        self,
        column_names: _abc.Sequence[str],
        rows: _abc.Iterable[_abc.Sequence[_typing.Any]] = (),
    ) -> None:
        self._column_names = tuple(column_names)
        self._rows: list[tuple[_typing.Any, ...]] = []
        self._closed = False
        for row in rows:
            self.add_row(row)

    @property
    def column_names(self) -> tuple[str, ...]:
        return self._column_names

    @property
    def closed(self) -> bool:
        return self._closed

    def add_row(self, row: _abc.Sequence[_typing.Any]) -> None:
        """Append a row; it must have one value per column."""
        if len(row) != len(self._column_names):
            raise ValueError(
                f"row has {len(row)} values, expected {len(self._column_names)}"
            )
        self._rows.append(tuple(row))

    def __iter__(self) -> _typing.Iterator[tuple[_typing.Any, ...]]:
        return iter(list(self._rows))

    def __len__(self) -> int:
        return len(self._rows)

    def close(self) -> None:
        self._closed = True

    def to_dict(self) -> dict[str, _typing.Any]:
        """Rows of a key/value source as a dict."""
        return {row[_KEY_INDEX]: row[_VALUE_INDEX] for row in self._rows}


def check_projection(projection: _abc.Sequence[str] | None) -> tuple[str, str]:
    """
    Require exactly the (key, value) projection.

    Raises:
        UnexpectedProjectionError: For any other shape, including None.
    """
    if projection is None or tuple(projection) != constants.KV_PROJECTION:
        raise errors.UnexpectedProjectionError(projection)
    return constants.KV_PROJECTION


class TabularAdapter(base.KeyValueStore["RowSource | None", MatrixRows]):
    """Adapter for two-column key/value row sources."""

    is_property_map = False

    def read_entries(self, source: RowSource | None) -> dict[str, _typing.Any]:
        """Drain (and close) the existing rows; no source means no rows."""
        entries: dict[str, _typing.Any] = {}
        if source is None:
            return entries
        with _contextlib.closing(source) as rows:
            for row in rows:
                entries[row[_KEY_INDEX]] = row[_VALUE_INDEX]
        return entries

    def write_entries(
        self,
        source: RowSource | None,  # noqa: ARG002 - rows are always rebuilt
        entries: _abc.MutableMapping[str, _typing.Any],
        changed: bool,  # noqa: ARG002
    ) -> MatrixRows:
        return MatrixRows(constants.KV_PROJECTION, entries.items())

    def modify_rows(
        self,
        token: str,
        source: RowSource | None,
        projection: _abc.Sequence[str] | None = None,
        selection_prefixes: _abc.Sequence[str] | None = None,
    ) -> MatrixRows | None:
        """
        Merge overrides into a key/value result.

        Args:
            token: Request token for the merge engine.
            source: Existing rows, or None if the provider returned nothing.
            projection: Requested columns; only used when there is no source.
            selection_prefixes: gservices key prefixes, if any.

        Returns:
            A new row source with the merged rows, or None when the column
            shape is not (key, value).
        """
        effective_projection = source.column_names if source is not None else projection
        try:
            check_projection(effective_projection)
        except errors.UnexpectedProjectionError as e:
            _logger.error("%s", e)
            return None

        _, result = self.merge(token, source, selection_prefixes)
        return result

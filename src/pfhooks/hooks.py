"""
Entry points called by the platform read paths.

Two hooks:

- maybe_modify_query_result: a content-provider query is about to return.
  gservices prefix queries and phenotype namespace queries get their
  key/value rows merged with overrides; any other URI passes through.
- maybe_modify_property_map: a shared-preferences file has been read into
  a map; declared preference files get overrides merged in place.

Example usage:
    hooks = OverrideHooks.from_settings()
    rows = hooks.maybe_modify_query_result(
        "content://com.google.android.gms.phenotype/com.example%23com.example",
        projection=None,
        query_args=None,
        original=None,
    )
    if rows is None:
        # Not ours: return whatever the provider produced
        ...
"""

from __future__ import annotations

import collections.abc as _abc
import logging as _logging
import typing as _typing
import urllib.parse as _urllib_parse

import pfhooks.adapters.property_map as property_map
import pfhooks.adapters.tabular as tabular
import pfhooks.config as config
import pfhooks.constants as constants
import pfhooks.flags.engine as engine

_logger = _logging.getLogger(__name__)


def _path_segments(uri: str) -> list[str]:
    # "#" must arrive percent-encoded; a literal one starts the fragment
    path = _urllib_parse.urlsplit(uri).path
    return [_urllib_parse.unquote(segment) for segment in path.split("/") if segment]


def selection_args_from(
    query_args: _abc.Mapping[str, _typing.Any] | None,
) -> list[str] | None:
    """Extract the SQL selection arguments from a query-args bundle."""
    if query_args is None:
        return None
    selection_args = query_args.get(constants.QUERY_ARG_SQL_SELECTION_ARGS)
    if selection_args is None:
        return None
    return [str(arg) for arg in selection_args]


class OverrideHooks:
    """
    Facade over the merge engine and both store adapters.

    Holds the settings snapshot the engine reads its declarations and
    toggle from. Call reload() to pick up changed configuration.
    """

    def __init__(self, settings: config.Settings) -> None:
        """
        Initialize the hooks.

        Args:
            settings: Loaded settings (toggle and declarations).
        """
        self._bind(settings)

    def _bind(self, settings: config.Settings) -> None:
        self._settings = settings
        self._engine = engine.MergeEngine(settings, enabled=settings.enabled)
        self._tabular = tabular.TabularAdapter(self._engine)
        self._property_map = property_map.PropertyMapAdapter(self._engine)

    @classmethod
    def from_settings(cls, settings: config.Settings | None = None) -> OverrideHooks:
        """Create hooks from the given settings, or load settings from the environment."""
        return cls(settings if settings is not None else config.Settings())

    @property
    def settings(self) -> config.Settings:
        return self._settings

    @property
    def engine(self) -> engine.MergeEngine:
        return self._engine

    @property
    def enabled(self) -> bool:
        return self._engine.enabled

    def reload(self, settings: config.Settings | None = None) -> None:
        """
        Replace the settings snapshot.

        Args:
            settings: New settings. If None, settings are reloaded from
                the environment and configuration files.
        """
        self._bind(settings if settings is not None else config.Settings())
        _logger.debug("Reloaded settings (enabled=%s)", self.enabled)

    def maybe_modify_query_result(
        self,
        uri: str,
        projection: _abc.Sequence[str] | None = None,
        query_args: _abc.Mapping[str, _typing.Any] | None = None,
        original: tabular.RowSource | None = None,
    ) -> tabular.MatrixRows | None:
        """
        Merge overrides into a content-provider query result.

        Args:
            uri: The queried content URI.
            projection: Requested columns (used when there is no original result).
            query_args: Query arguments; gservices queries read their
                selection arguments from here.
            original: The result the provider produced, if any.

        Returns:
            Replacement rows, or None to signal the caller should use the
            original result unchanged.
        """
        if not self.enabled:
            return None

        if uri == constants.GSERVICES_URI:
            selection_args = selection_args_from(query_args)
            if selection_args is None:
                return None
            return self._tabular.modify_rows(
                constants.NAMESPACE_GSERVICES,
                original,
                projection,
                selection_args,
            )

        if uri.startswith(constants.PHENOTYPE_URI_PREFIX):
            segments = _path_segments(uri)
            if len(segments) != 1:
                _logger.error("unknown phenotype uri %s", uri)
                return None
            return self._tabular.modify_rows(segments[0], original, projection)

        return None

    def maybe_modify_property_map(
        self,
        path: str | None,
        values: _abc.MutableMapping[str, _typing.Any] | None,
    ) -> bool:
        """
        Merge overrides into a property map read from ``path``, in place.

        Returns:
            True if the map was changed.
        """
        if not self.enabled:
            return False
        return self._property_map.modify_values(path, values)

"""
Property-map (shared preferences) store adapter.

Some flags are stored in per-app preference files instead of the
phenotype database. Such a file is addressed as ``package/file`` where
the package is taken from the file path, e.g.::

    /data/user/0/com.example.app/shared_prefs/flags.xml
                 ^ segment 4                  ^ file

Merged values are written straight into the caller's map.
"""

from __future__ import annotations

import collections.abc as _abc
import logging as _logging
import typing as _typing

import pfhooks.adapters.base as base
import pfhooks.constants as constants

_logger = _logging.getLogger(__name__)

PropertyMap = _abc.MutableMapping[str, _typing.Any]


def token_for_path(path: str | None) -> str | None:
    """
    Build the ``package/file`` request token for a property-map path.

    Returns:
        The token, or None if the path is not a property-map file or has
        no package segment.
    """
    if not path or not path.endswith(constants.PROPERTY_MAP_SUFFIX):
        return None

    segments = path.split(constants.PATH_SEPARATOR)
    if len(segments) <= constants.PROPERTY_MAP_PACKAGE_SEGMENT:
        _logger.debug("Property map path has no package segment: %s", path)
        return None

    package = segments[constants.PROPERTY_MAP_PACKAGE_SEGMENT]
    file_name = segments[-1]
    if not package:
        return None
    return package + constants.PATH_SEPARATOR + file_name


class PropertyMapAdapter(base.KeyValueStore[PropertyMap, None]):
    """Adapter for flat property maps read from preference files."""

    is_property_map = True

    def read_entries(self, source: PropertyMap) -> PropertyMap:
        """The caller's map is merged into directly."""
        return source

    def write_entries(
        self,
        source: PropertyMap,  # noqa: ARG002
        entries: PropertyMap,  # noqa: ARG002
        changed: bool,  # noqa: ARG002
    ) -> None:
        return None

    def modify_values(self, path: str | None, values: PropertyMap | None) -> bool:
        """
        Merge overrides into a property map loaded from ``path``.

        Args:
            path: Absolute path of the preference file.
            values: The map read from that file; updated in place.

        Returns:
            True if any entry was added or replaced.
        """
        if values is None:
            return False

        token = token_for_path(path)
        if token is None:
            return False

        changed, _ = self.merge(token, values)
        return changed

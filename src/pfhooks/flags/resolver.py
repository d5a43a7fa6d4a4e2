"""Namespace resolution: which override namespaces a request consults."""

from __future__ import annotations

import logging as _logging

import pfhooks.constants as constants
import pfhooks.flags.directory as directory

_logger = _logging.getLogger(__name__)


def _file_is_declared(file: str, aliases: list[str]) -> bool:
    if file in aliases:
        return True
    if file.endswith(constants.PROPERTY_MAP_SUFFIX):
        return file[: -len(constants.PROPERTY_MAP_SUFFIX)] in aliases
    return False


def candidate_namespaces(
    namespace_directory: directory.Directory,
    token: str,
    is_property_map: bool,
) -> list[str] | None:
    """
    Namespaces whose overrides apply to a request, in precedence order.

    The returned list is the owning package's aliases followed by the
    token itself, so entries filed under the exact token are applied last.

    In property-map mode the file must be declared as one of the package's
    aliases (either verbatim or without its ``.xml`` suffix); otherwise the
    file is not managed and None is returned. A tabular request for a
    package with no declarations still consults the token itself.

    Args:
        namespace_directory: Directory built from namespace declarations.
        token: The request token (namespace, namespace#package or package/file).
        is_property_map: Whether the request comes from a property map.

    Returns:
        Candidate namespaces, or None when nothing can apply.
    """
    target = directory.resolve_package_and_file(token, is_property_map)
    aliases = directory.lookup_aliases(namespace_directory, target.package)

    if is_property_map:
        if aliases is None:
            return None
        if target.file is None or not _file_is_declared(target.file, aliases):
            _logger.debug("Property map %s is not declared for %s", target.file, target.package)
            return None

    return [*(aliases or []), token]

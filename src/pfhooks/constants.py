"""
Shared constants for pfhooks.

This module provides a single source of truth for reserved namespaces,
content URIs and path conventions used across multiple modules.
"""

# Reserved namespaces / packages
NAMESPACE_GSERVICES = "gservices"
"""Namespace whose overrides are addressed by key prefix, not by package."""

PACKAGE_GMS = "com.google.android.gms"
"""Package that hosts the phenotype content provider."""

PACKAGE_GSF = "com.google.android.gsf"
"""Package that hosts the gservices content provider."""

# Content URIs
PHENOTYPE_URI_PREFIX = "content://" + PACKAGE_GMS + ".phenotype/"
"""Prefix of phenotype flag queries; the single path segment is the namespace."""

GSERVICES_URI = "content://" + PACKAGE_GSF + "." + NAMESPACE_GSERVICES + "/prefix"
"""Exact URI of gservices prefix queries."""

QUERY_ARG_SQL_SELECTION_ARGS = "android:query-arg-sql-selection-args"
"""Query-args key holding the selection arguments (gservices key prefixes)."""

# Tabular result shape
KEY_COLUMN = "key"
VALUE_COLUMN = "value"
KV_PROJECTION: tuple[str, str] = (KEY_COLUMN, VALUE_COLUMN)
"""The only accepted projection for tabular key/value results."""

# Property-map (shared preferences) path convention
PROPERTY_MAP_SUFFIX = ".xml"
"""Suffix every property-map file path must carry."""

PROPERTY_MAP_PACKAGE_SEGMENT = 4
"""Index of the owning package in a '/'-split property-map path.

e.g. /data/user/0/<package>/shared_prefs/<file>.xml
"""

# Declaration syntax
DECLARATION_SEPARATOR = "="
ALIAS_SEPARATOR = ","
RELATIVE_ALIAS_MARKER = "."
OWNER_SEPARATOR = "#"
PATH_SEPARATOR = "/"
OVERRIDE_KEY_SEGMENTS = 3
"""An override key path is exactly namespace/key/type."""

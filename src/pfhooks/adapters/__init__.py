"""
Backing-store adapters.

Each adapter converts its native representation to and from the
key/value mapping the merge engine works on.
"""

from pfhooks.adapters.base import KeyValueStore
from pfhooks.adapters.property_map import PropertyMapAdapter, token_for_path
from pfhooks.adapters.tabular import MatrixRows, RowSource, TabularAdapter, check_projection

__all__ = [
    "KeyValueStore",
    "MatrixRows",
    "PropertyMapAdapter",
    "RowSource",
    "TabularAdapter",
    "check_projection",
    "token_for_path",
]

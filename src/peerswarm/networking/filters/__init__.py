"""
Address filters.

Masks deny connections to or from whole network ranges. They are enforced by
a live table and persisted in the node configuration; FilterStore keeps both
in agreement.
"""

from .live import FilterAction, Filters
from .mask import FilterMask, canonical_filter
from .store import REMOVE_ALL_ARGS, FilterStore, LiveFilterSet

__all__ = [
    "FilterAction",
    "FilterMask",
    "FilterStore",
    "Filters",
    "LiveFilterSet",
    "REMOVE_ALL_ARGS",
    "canonical_filter",
]

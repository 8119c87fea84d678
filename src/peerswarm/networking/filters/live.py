"""
In-memory filter table consulted by the connection layer.

The table maps each mask to an action. Masks are unique: adding a mask that
is already present replaces its action. How a candidate address is matched
against the table is up to the connection layer.
"""

from __future__ import annotations

import logging
from enum import Enum

from .mask import FilterMask

logger = logging.getLogger(__name__)


class FilterAction(Enum):
    """What to do with a connection matching a mask."""

    ACCEPT = "accept"
    DENY = "deny"


class Filters:
    """Live mask table."""

    def __init__(self) -> None:
        self._masks: dict[FilterMask, FilterAction] = {}

    def __len__(self) -> int:
        return len(self._masks)

    def __contains__(self, mask: object) -> bool:
        return mask in self._masks

    def add_filter(self, mask: FilterMask, action: FilterAction) -> None:
        """Install `mask` with `action`."""
        self._masks[mask] = action
        logger.debug("Installed %s filter %s", action.value, mask)

    def remove_literal(self, mask: FilterMask) -> bool:
        """
        Remove exactly `mask`, regardless of its action.

        Returns:
            True if the mask was installed.
        """
        removed = self._masks.pop(mask, None) is not None
        if removed:
            logger.debug("Removed filter %s", mask)
        return removed

    def filters_for_action(self, action: FilterAction) -> list[FilterMask]:
        """Return installed masks with `action`, in installation order."""
        return [mask for mask, a in self._masks.items() if a is action]

"""
Deny-list management.

Filters exist twice:

- in the live table the connection layer consults on every dial and accept;
- in the persisted node configuration, so that they survive restarts.

FilterStore is the only mutation path for both. Every operation runs under
one lock and moves the pair from one consistent state to the next:

    1. Read the persisted list.
    2. Compute the new list.
    3. Write it. A failed write aborts the operation with nothing changed.
    4. Apply the same change to the live table. If that fails, the live
       table and the persisted list are restored before re-raising.

Ordering
--------

`add` writes newly added masks first, followed by the previous entries. The
order is a presentation detail that keeps output deterministic; matching does
not depend on it.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from pathlib import Path
from threading import Lock
from typing import Protocol

from peerswarm.repo import ConfigStore, NodeConfig
from peerswarm.types import InvalidFilterError

from .live import FilterAction
from .mask import FilterMask, canonical_filter

logger = logging.getLogger(__name__)

REMOVE_ALL_ARGS = frozenset({"all", "*"})
"""Arguments of `remove` that clear the whole deny-list."""


class LiveFilterSet(Protocol):
    """Live filter table used by the connection layer."""

    def add_filter(self, mask: FilterMask, action: FilterAction) -> None:
        """Install `mask` with `action`."""
        ...

    def remove_literal(self, mask: FilterMask) -> bool:
        """Remove exactly `mask`."""
        ...

    def filters_for_action(self, action: FilterAction) -> list[FilterMask]:
        """Return the masks installed with `action`."""
        ...


class FilterStore:
    """Keeps the live deny-list and the persisted filter list in lock-step."""

    def __init__(self, live: LiveFilterSet, config_store: ConfigStore, config_path: Path) -> None:
        """
        Args:
            live: Live table to keep in sync.
            config_store: Store holding the node configuration.
            config_path: Path of the node configuration inside the store.
        """
        self._live = live
        self._config_store = config_store
        self._config_path = Path(config_path)
        self._lock = Lock()

    @classmethod
    def open(
        cls,
        live: LiveFilterSet,
        config_store: ConfigStore,
        config_path: Path,
    ) -> FilterStore:
        """
        Create a store and install the persisted filters into the live table.

        Raises:
            PersistenceError: If the configuration cannot be read.
            InvalidFilterError: If a persisted filter does not parse.
        """
        store = cls(live, config_store, config_path)
        config = config_store.read(store._config_path)
        installed = set(live.filters_for_action(FilterAction.DENY))
        for text in config.swarm.addr_filters:
            mask = FilterMask.from_string(text)
            if mask not in installed:
                live.add_filter(mask, FilterAction.DENY)
                installed.add(mask)
        logger.info("Loaded %d address filter(s) from %s", len(installed), store._config_path)
        return store

    def list(self) -> list[FilterMask]:
        """Return the masks currently enforced."""
        with self._lock:
            return self._live.filters_for_action(FilterAction.DENY)

    def persisted(self) -> list[str]:
        """Return the persisted filter list, in stored order."""
        with self._lock:
            return list(self._read().swarm.addr_filters)

    def add(self, filters: Sequence[str]) -> list[str]:
        """
        Add deny filters.

        Filters already persisted, or repeated within `filters`, are skipped.

        Returns:
            Canonical text of the filters actually added, in input order.

        Raises:
            InvalidFilterError: If no filter is given or any filter does not
                parse. Nothing is changed in that case.
            PersistenceError: If the configuration cannot be read or written.
        """
        if not filters:
            raise InvalidFilterError("", "no filters to add")
        masks = [FilterMask.from_string(f) for f in filters]

        with self._lock:
            config = self._read()
            existing = _unique(config.swarm.addr_filters)
            present = {canonical_filter(entry) for entry in existing}

            added: dict[str, FilterMask] = {}
            for mask in masks:
                text = str(mask)
                if text not in present and text not in added:
                    added[text] = mask

            if not added:
                return []

            self._commit(
                config,
                config.with_addr_filters([*added, *existing]),
                install=list(added.values()),
                uninstall=[],
            )

        logger.info("Added %d address filter(s): %s", len(added), ", ".join(added))
        return list(added)

    def remove(self, filters: Sequence[str]) -> list[str]:
        """
        Remove deny filters.

        If the first argument is `all` or `*`, every filter is removed instead
        (see `remove_all`). Anywhere else those words are parsed as masks and
        rejected. Filters that are not persisted are ignored.

        Returns:
            The persisted entries that were removed, in stored order.

        Raises:
            InvalidFilterError: If no filter is given or any filter does not parse.
            PersistenceError: If the configuration cannot be read or written.
        """
        if not filters:
            raise InvalidFilterError("", "no filters to remove")
        if filters[0] in REMOVE_ALL_ARGS:
            return self.remove_all()

        targets = {str(mask): mask for mask in map(FilterMask.from_string, filters)}

        with self._lock:
            config = self._read()
            removed: list[str] = []
            keep: list[str] = []
            for entry in config.swarm.addr_filters:
                if canonical_filter(entry) in targets:
                    if entry not in removed:
                        removed.append(entry)
                else:
                    keep.append(entry)

            # Live masks are removed by value even when they were not
            # persisted; they would otherwise outlive the operation.
            stale = [
                m for m in self._live.filters_for_action(FilterAction.DENY) if str(m) in targets
            ]
            if not removed and not stale:
                return []

            self._commit(
                config,
                config.with_addr_filters(keep) if removed else config,
                install=[],
                uninstall=stale,
            )

        logger.info("Removed %d address filter(s)", len(removed))
        return removed

    def remove_all(self) -> list[str]:
        """
        Remove every deny filter.

        Returns:
            The full persisted list before removal.

        Raises:
            PersistenceError: If the configuration cannot be read or written.
        """
        with self._lock:
            config = self._read()
            removed = list(config.swarm.addr_filters)
            self._commit(
                config,
                config.with_addr_filters([]),
                install=[],
                uninstall=self._live.filters_for_action(FilterAction.DENY),
            )

        logger.info("Removed all %d address filter(s)", len(removed))
        return removed

    def is_consistent(self) -> bool:
        """Check that the live deny-list and the persisted list hold the same masks."""
        with self._lock:
            live = {str(m) for m in self._live.filters_for_action(FilterAction.DENY)}
            persisted = {canonical_filter(e) for e in self._read().swarm.addr_filters}
            return live == persisted

    def _read(self) -> NodeConfig:
        return self._config_store.read(self._config_path)

    def _commit(
        self,
        old: NodeConfig,
        new: NodeConfig,
        *,
        install: Iterable[FilterMask],
        uninstall: Iterable[FilterMask],
    ) -> None:
        """Persist `new`, then mirror the change in the live table."""
        if new is not old:
            self._config_store.write(self._config_path, new)

        installed: list[FilterMask] = []
        uninstalled: list[FilterMask] = []
        try:
            for mask in uninstall:
                if self._live.remove_literal(mask):
                    uninstalled.append(mask)
            for mask in install:
                self._live.add_filter(mask, FilterAction.DENY)
                installed.append(mask)
        except Exception:
            logger.error("Live filter update failed, restoring previous state")
            for mask in installed:
                self._live.remove_literal(mask)
            for mask in uninstalled:
                self._live.add_filter(mask, FilterAction.DENY)
            if new is not old:
                self._config_store.write(self._config_path, old)
            raise


def _unique(entries: Iterable[str]) -> list[str]:
    """Drop repeated entries (by canonical value), keeping the first."""
    seen: set[str] = set()
    out: list[str] = []
    for entry in entries:
        key = canonical_filter(entry)
        if key not in seen:
            seen.add(key)
            out.append(entry)
    return out

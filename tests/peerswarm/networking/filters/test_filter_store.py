"""Tests for keeping the live deny-list and the persisted filter list in sync."""

from __future__ import annotations

import json
import threading
from pathlib import Path

import pytest
from hypothesis import given
from hypothesis import strategies as st

from peerswarm.networking.filters import (
    FilterAction,
    FilterMask,
    Filters,
    FilterStore,
    canonical_filter,
)
from peerswarm.repo import FileConfigStore, NodeConfig
from peerswarm.types import InvalidFilterError, PersistenceError
from tests.peerswarm.helpers import FailingFilters, MemoryConfigStore

CONFIG_PATH = Path("/node/config")

TEN = "/ip4/10.0.0.0/ipcidr/8"
PRIVATE = "/ip4/192.168.0.0/ipcidr/16"
LINK_LOCAL = "/ip6/fe80::/ipcidr/10"
LINK_LOCAL_LONG = "/ip6/FE80:0:0:0:0:0:0:0/ipcidr/10"
HOST = "/ip4/1.2.3.4/ipcidr/32"


def _open(
    persisted: list[str] | None = None,
    live: Filters | None = None,
) -> tuple[FilterStore, Filters, MemoryConfigStore]:
    config_store = MemoryConfigStore(
        {CONFIG_PATH: NodeConfig().with_addr_filters(persisted or [])}
    )
    live = live if live is not None else Filters()
    return FilterStore.open(live, config_store, CONFIG_PATH), live, config_store


def _live(live: Filters) -> list[str]:
    return [str(m) for m in live.filters_for_action(FilterAction.DENY)]


class TestOpen:
    """Tests for FilterStore.open."""

    def test_installs_persisted_filters(self) -> None:
        """Persisted filters are enforced from the start."""
        store, live, _ = _open([TEN, LINK_LOCAL_LONG])
        assert _live(live) == [TEN, LINK_LOCAL]
        assert store.is_consistent()

    def test_missing_config_starts_empty(self) -> None:
        """A store with nothing persisted starts with an empty deny-list."""
        store = FilterStore.open(Filters(), MemoryConfigStore(), CONFIG_PATH)
        assert store.list() == []
        assert store.persisted() == []

    def test_null_list_on_disk(self, tmp_path: Path) -> None:
        """A config file whose filter list is null opens with no filters."""
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"Swarm": {"AddrFilters": None}}))

        store = FilterStore.open(Filters(), FileConfigStore(), path)
        assert store.list() == []
        assert store.add([TEN]) == [TEN]
        assert json.loads(path.read_text()) == {"Swarm": {"AddrFilters": [TEN]}}

    def test_invalid_persisted_filter_raises(self) -> None:
        """A corrupt persisted entry is reported, not skipped."""
        with pytest.raises(InvalidFilterError, match="garbage"):
            _open([TEN, "garbage"])


class TestAdd:
    """Tests for FilterStore.add."""

    def test_add_persists_and_installs(self) -> None:
        """Added filters are both persisted and enforced."""
        store, live, config_store = _open()

        assert store.add([TEN, LINK_LOCAL]) == [TEN, LINK_LOCAL]
        assert config_store.filters_at(CONFIG_PATH) == [TEN, LINK_LOCAL]
        assert _live(live) == [TEN, LINK_LOCAL]
        assert store.list() == [FilterMask.from_string(TEN), FilterMask.from_string(LINK_LOCAL)]

    def test_new_filters_written_first(self) -> None:
        """New entries precede the previously persisted ones."""
        store, _, config_store = _open([TEN])
        store.add([PRIVATE, HOST])
        assert config_store.filters_at(CONFIG_PATH) == [PRIVATE, HOST, TEN]

    def test_duplicate_add_is_noop(self) -> None:
        """Adding a persisted filter again changes nothing."""
        store, live, config_store = _open()
        store.add([TEN])
        writes = config_store.writes

        assert store.add([TEN]) == []
        assert config_store.writes == writes
        assert config_store.filters_at(CONFIG_PATH) == [TEN]
        assert _live(live) == [TEN]

    def test_duplicates_within_call_collapse(self) -> None:
        """Equivalent spellings in one call are added once, canonically."""
        store, _, config_store = _open()
        assert store.add([LINK_LOCAL_LONG, LINK_LOCAL, LINK_LOCAL_LONG]) == [LINK_LOCAL]
        assert config_store.filters_at(CONFIG_PATH) == [LINK_LOCAL]

    def test_only_new_filters_reported(self) -> None:
        """The result lists what was actually added."""
        store, _, _ = _open([TEN])
        assert store.add([TEN, PRIVATE]) == [PRIVATE]

    def test_empty_raises(self) -> None:
        """At least one filter is required."""
        store, _, _ = _open()
        with pytest.raises(InvalidFilterError, match="no filters to add"):
            store.add([])

    def test_invalid_changes_nothing(self) -> None:
        """One malformed filter rejects the whole call."""
        store, live, config_store = _open([TEN])

        with pytest.raises(InvalidFilterError):
            store.add([PRIVATE, "/ip4/10.1.2.3/ipcidr/8"])
        assert config_store.filters_at(CONFIG_PATH) == [TEN]
        assert _live(live) == [TEN]

    def test_persisted_duplicates_cleaned_on_write(self) -> None:
        """Repeated persisted entries collapse on the next rewrite."""
        store, _, config_store = _open([TEN, TEN])
        store.add([PRIVATE])
        assert config_store.filters_at(CONFIG_PATH) == [PRIVATE, TEN]

    def test_failed_write_leaves_live_untouched(self) -> None:
        """Nothing is enforced when persisting fails."""
        store, live, config_store = _open([TEN])
        config_store.fail_writes = True

        with pytest.raises(PersistenceError, match="disk full"):
            store.add([PRIVATE])
        assert _live(live) == [TEN]
        assert config_store.filters_at(CONFIG_PATH) == [TEN]

    def test_failed_live_update_restores_config(self) -> None:
        """A live table failure rolls the persisted list back."""
        store, live, config_store = _open([TEN], live=FailingFilters())
        assert isinstance(live, FailingFilters)
        live.fail_adds = True

        with pytest.raises(RuntimeError, match="cannot install"):
            store.add([PRIVATE])
        assert config_store.filters_at(CONFIG_PATH) == [TEN]
        assert _live(live) == [TEN]
        assert store.is_consistent()


class TestRemove:
    """Tests for FilterStore.remove and remove_all."""

    def test_remove_persisted(self) -> None:
        """Removed filters disappear from both places."""
        store, live, config_store = _open([TEN, PRIVATE, LINK_LOCAL])

        assert store.remove([PRIVATE]) == [PRIVATE]
        assert config_store.filters_at(CONFIG_PATH) == [TEN, LINK_LOCAL]
        assert _live(live) == [TEN, LINK_LOCAL]

    def test_remove_matches_by_value(self) -> None:
        """A different spelling removes the stored entry, reported as stored."""
        store, live, config_store = _open([LINK_LOCAL_LONG, TEN])

        assert store.remove([LINK_LOCAL]) == [LINK_LOCAL_LONG]
        assert config_store.filters_at(CONFIG_PATH) == [TEN]
        assert _live(live) == [TEN]

    def test_remove_reports_stored_order(self) -> None:
        """Removed entries are listed in persisted order."""
        store, _, _ = _open([TEN, PRIVATE, HOST])
        assert store.remove([HOST, TEN]) == [TEN, HOST]

    def test_remove_absent_is_noop(self) -> None:
        """Removing an unknown filter writes nothing."""
        store, _, config_store = _open([TEN])
        writes = config_store.writes

        assert store.remove([PRIVATE]) == []
        assert config_store.writes == writes
        assert config_store.filters_at(CONFIG_PATH) == [TEN]

    def test_remove_live_only_mask(self) -> None:
        """A mask enforced but never persisted is still uninstalled."""
        store, live, config_store = _open([TEN])
        live.add_filter(FilterMask.from_string(PRIVATE), FilterAction.DENY)
        writes = config_store.writes

        assert store.remove([PRIVATE]) == []
        assert _live(live) == [TEN]
        assert config_store.writes == writes

    def test_remove_all(self) -> None:
        """remove_all returns the full list and clears both places."""
        store, live, config_store = _open([TEN, PRIVATE])

        assert store.remove_all() == [TEN, PRIVATE]
        assert config_store.filters_at(CONFIG_PATH) == []
        assert _live(live) == []

    @pytest.mark.parametrize("keyword", ["all", "*"])
    def test_leading_keyword_removes_everything(self, keyword: str) -> None:
        """'all' or '*' as the first argument clears the list."""
        store, live, config_store = _open([TEN, PRIVATE])

        assert store.remove([keyword]) == [TEN, PRIVATE]
        assert config_store.filters_at(CONFIG_PATH) == []
        assert _live(live) == []

    @pytest.mark.parametrize("keyword", ["all", "*"])
    def test_keyword_after_a_mask_is_rejected(self, keyword: str) -> None:
        """Later in the list the keyword is an invalid mask and nothing changes."""
        store, live, config_store = _open([TEN, PRIVATE])

        with pytest.raises(InvalidFilterError, match=r"invalid filter"):
            store.remove([PRIVATE, keyword])
        assert config_store.filters_at(CONFIG_PATH) == [TEN, PRIVATE]
        assert _live(live) == [TEN, PRIVATE]
        assert config_store.writes == 0

    def test_empty_raises(self) -> None:
        """At least one filter is required."""
        store, _, _ = _open([TEN])
        with pytest.raises(InvalidFilterError, match="no filters to remove"):
            store.remove([])

    def test_invalid_changes_nothing(self) -> None:
        """One malformed filter rejects the whole call."""
        store, live, config_store = _open([TEN, PRIVATE])

        with pytest.raises(InvalidFilterError):
            store.remove([TEN, "/ip4/300.0.0.0/ipcidr/8"])
        assert config_store.filters_at(CONFIG_PATH) == [TEN, PRIVATE]
        assert _live(live) == [TEN, PRIVATE]

    def test_failed_write_leaves_live_untouched(self) -> None:
        """Nothing is uninstalled when persisting fails."""
        store, live, config_store = _open([TEN, PRIVATE])
        config_store.fail_writes = True

        with pytest.raises(PersistenceError):
            store.remove_all()
        assert _live(live) == [TEN, PRIVATE]


POOL = [TEN, PRIVATE, LINK_LOCAL, LINK_LOCAL_LONG, HOST]

operations = st.lists(
    st.one_of(
        st.tuples(st.just("add"), st.lists(st.sampled_from(POOL), min_size=1, max_size=3)),
        st.tuples(st.just("rm"), st.lists(st.sampled_from(POOL), min_size=1, max_size=3)),
        st.tuples(st.just("rm"), st.just(["all"])),
    ),
    max_size=25,
)


@given(operations)
def test_store_tracks_set_model(ops: list[tuple[str, list[str]]]) -> None:
    """Any sequence of operations keeps both sides equal to a set model."""
    store, live, config_store = _open()
    expected: set[str] = set()

    for op, args in ops:
        canonical = {canonical_filter(a) for a in args if a != "all"}
        if op == "add":
            added = store.add(args)
            assert set(added) == canonical - expected
            expected |= canonical
        elif args == ["all"]:
            store.remove(args)
            expected.clear()
        else:
            store.remove(args)
            expected -= canonical

        persisted = config_store.filters_at(CONFIG_PATH)
        assert len(persisted) == len(set(persisted))
        assert set(persisted) == expected
        assert set(_live(live)) == expected
        assert store.is_consistent()


def test_concurrent_operations_stay_consistent() -> None:
    """Interleaved operations from many threads never diverge."""
    store, _, config_store = _open()
    masks = [f"/ip4/10.{i}.0.0/ipcidr/16" for i in range(16)]
    errors: list[Exception] = []

    def worker(index: int) -> None:
        try:
            for _ in range(20):
                store.add([masks[index]])
                if index % 2:
                    store.remove([masks[index]])
        except Exception as e:
            errors.append(e)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(len(masks))]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert store.is_consistent()
    assert set(config_store.filters_at(CONFIG_PATH)) == set(masks[::2])

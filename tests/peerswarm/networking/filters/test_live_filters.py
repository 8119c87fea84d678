"""Tests for the in-memory filter table."""

from __future__ import annotations

from peerswarm.networking.filters import FilterAction, FilterMask, Filters

TEN = FilterMask.from_string("/ip4/10.0.0.0/ipcidr/8")
LINK_LOCAL = FilterMask.from_string("/ip6/fe80::/ipcidr/10")


class TestFilters:
    """Tests for Filters."""

    def test_add_and_list(self) -> None:
        """Masks are listed per action in installation order."""
        table = Filters()
        table.add_filter(LINK_LOCAL, FilterAction.DENY)
        table.add_filter(TEN, FilterAction.DENY)

        assert table.filters_for_action(FilterAction.DENY) == [LINK_LOCAL, TEN]
        assert table.filters_for_action(FilterAction.ACCEPT) == []
        assert len(table) == 2
        assert TEN in table

    def test_masks_are_unique(self) -> None:
        """Re-adding a mask replaces its action."""
        table = Filters()
        table.add_filter(TEN, FilterAction.DENY)
        table.add_filter(TEN, FilterAction.DENY)
        assert len(table) == 1

        table.add_filter(TEN, FilterAction.ACCEPT)
        assert table.filters_for_action(FilterAction.DENY) == []
        assert table.filters_for_action(FilterAction.ACCEPT) == [TEN]

    def test_remove_literal(self) -> None:
        """Only the exact mask is removed."""
        table = Filters()
        table.add_filter(TEN, FilterAction.DENY)
        table.add_filter(LINK_LOCAL, FilterAction.DENY)

        assert table.remove_literal(TEN) is True
        assert table.remove_literal(TEN) is False
        assert table.filters_for_action(FilterAction.DENY) == [LINK_LOCAL]

    def test_remove_literal_ignores_overlap(self) -> None:
        """A covering network is not removed by a narrower one."""
        table = Filters()
        table.add_filter(TEN, FilterAction.DENY)
        assert table.remove_literal(FilterMask.from_string("/ip4/10.1.0.0/ipcidr/16")) is False
        assert TEN in table

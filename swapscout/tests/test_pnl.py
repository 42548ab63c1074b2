"""
Tests for average-cost realized PnL.
"""

import math

from hypothesis import given, strategies as st

from swapscout.core.models import TradeAction
from swapscout.core.pnl import PnLAccountant, compute_pnl

from .conftest import make_swap

BUY = TradeAction.BUY
SELL = TradeAction.SELL


class TestPnLAccountant:

    def test_round_trip(self):
        swaps = [
            make_swap(BUY, "X", "10", "5"),
            make_swap(SELL, "X", "5", "12"),
        ]
        assert compute_pnl(swaps) == 2.0

    def test_sell_without_position_is_ignored(self):
        assert compute_pnl([make_swap(SELL, "X", "5", "12")]) == 0.0

    def test_weighted_average_cost(self):
        swaps = [
            make_swap(BUY, "X", "10", "5"),   # 2 per unit
            make_swap(BUY, "X", "30", "5"),   # 6 per unit -> avg 4
            make_swap(SELL, "X", "10", "50"),
        ]
        assert compute_pnl(swaps) == 10.0

    def test_partial_sells(self):
        swaps = [
            make_swap(BUY, "X", "20", "10"),
            make_swap(SELL, "X", "4", "10"),
            make_swap(SELL, "X", "6", "9"),
        ]
        assert compute_pnl(swaps) == (10 - 8) + (9 - 12)

    def test_over_sell_truncates_holdings(self):
        swaps = [
            make_swap(BUY, "X", "10", "5"),
            make_swap(SELL, "X", "10", "30"),  # sells more than tracked
            make_swap(SELL, "X", "1", "100"),  # nothing left
        ]
        assert compute_pnl(swaps) == 30 - 10 * 2

    def test_rebuy_after_flat_resets_cost(self):
        swaps = [
            make_swap(BUY, "X", "10", "5"),
            make_swap(SELL, "X", "5", "10"),
            make_swap(BUY, "X", "5", "5"),
            make_swap(SELL, "X", "5", "10"),
        ]
        assert compute_pnl(swaps) == 0 + 5

    def test_tokens_are_tracked_separately(self):
        swaps = [
            make_swap(BUY, "X", "10", "5"),
            make_swap(BUY, "Y", "10", "10"),
            make_swap(SELL, "Y", "10", "15"),
            make_swap(SELL, "X", "5", "5"),
        ]
        assert compute_pnl(swaps) == 5 + (5 - 10)

    def test_zero_received_buy_poisons_cost_with_nan(self):
        swaps = [
            make_swap(BUY, "X", "10", "5"),
            make_swap(BUY, "X", "0", "0"),
            make_swap(SELL, "X", "5", "12"),
        ]
        assert math.isnan(compute_pnl(swaps))

    def test_unparseable_amounts_count_as_zero(self):
        swaps = [
            make_swap(BUY, "X", "10", "5"),
            make_swap(SELL, "X", "5", "abc"),
        ]
        assert compute_pnl(swaps) == -10.0

    def test_fresh_ledger_per_call(self):
        accountant = PnLAccountant()
        assert accountant.compute_pnl([make_swap(BUY, "X", "10", "5")]) == 0.0
        assert accountant.compute_pnl([make_swap(SELL, "X", "5", "12")]) == 0.0

    def test_empty(self):
        assert compute_pnl([]) == 0.0


class TestPnLProperties:

    @given(
        spent=st.integers(min_value=1, max_value=10 ** 6),
        received=st.integers(min_value=1, max_value=10 ** 6),
    )
    def test_selling_at_cost_is_flat(self, spent, received):
        swaps = [
            make_swap(BUY, "X", str(spent), str(received)),
            make_swap(SELL, "X", str(received), str(spent)),
        ]
        assert math.isclose(compute_pnl(swaps), 0.0, abs_tol=1e-6)

    @given(st.lists(st.integers(min_value=1, max_value=1000), max_size=10))
    def test_sells_only_is_zero(self, amounts):
        swaps = [make_swap(SELL, "X", str(a), str(a)) for a in amounts]
        assert compute_pnl(swaps) == 0.0

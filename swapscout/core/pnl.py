"""
Average-cost realized PnL accounting.

One leg of every swap is assumed to be the settlement asset, so a Buy converts
``from_amount`` of settlement into ``to_amount`` of the token, and a Sell
converts ``from_amount`` of the token into ``to_amount`` of settlement.
"""

from typing import Dict, Iterable

from .decimal_utils import ieee_divide, parse_amount
from .models import LedgerEntry, SwapTransaction, TradeAction


class PnLAccountant:
    """
    Replays swaps against a per-token cost-basis ledger.

    The input MUST be ordered oldest-first; the order is not checked here.
    Each call owns a fresh ledger, so instances can be shared freely.
    """

    def compute_pnl(self, swaps: Iterable[SwapTransaction]) -> float:
        ledger: Dict[str, LedgerEntry] = {}
        total_pnl = 0.0

        for swap in swaps:
            from_amount = parse_amount(swap.from_amount)
            to_amount = parse_amount(swap.to_amount)

            if swap.action == TradeAction.BUY:
                self._apply_buy(ledger, swap.to_token, spent=from_amount, received=to_amount)
            elif swap.action == TradeAction.SELL:
                total_pnl += self._apply_sell(ledger, swap.from_token, sold=from_amount, received=to_amount)

        return total_pnl

    @staticmethod
    def _apply_buy(ledger: Dict[str, LedgerEntry], token: str, spent: float, received: float) -> None:
        # Settlement units paid per unit of token; inf/nan when nothing was received.
        unit_price = ieee_divide(spent, received)
        entry = ledger.setdefault(token, LedgerEntry())

        new_amount = entry.held_amount + received
        if entry.held_amount > 0:
            entry.average_cost = ieee_divide(
                entry.held_amount * entry.average_cost + received * unit_price,
                new_amount,
            )
        else:
            entry.average_cost = unit_price
        entry.held_amount = new_amount

    @staticmethod
    def _apply_sell(ledger: Dict[str, LedgerEntry], token: str, sold: float, received: float) -> float:
        entry = ledger.get(token)
        if entry is None or not entry.held_amount > 0:
            # Never bought inside the observed window
            return 0.0

        cost_basis = sold * entry.average_cost
        pnl = received - cost_basis

        # Over-selling relative to tracked history is truncated, not carried negative.
        entry.held_amount = max(0.0, entry.held_amount - sold)
        return pnl


_default_accountant = PnLAccountant()


def compute_pnl(swaps: Iterable[SwapTransaction]) -> float:
    """Realized PnL of an oldest-first swap sequence."""
    return _default_accountant.compute_pnl(swaps)

"""
Trader statistics and per-token trade analysis.

Metrics computed:
- Trade counts (total / buy / sell)
- Volume in settlement units (Buy: from_amount, Sell: to_amount)
- Estimated realized PnL (average cost, see pnl.py)
- Win rate (known-degenerate, see StatsAggregator.aggregate)
- Average trade size, last trade time, top 5 tokens by trade count
"""

from typing import Dict, List, Optional, Sequence

from .decimal_utils import parse_amount
from .models import (
    NOT_AVAILABLE,
    SwapTransaction,
    TopToken,
    TradeAction,
    TradeAnalysis,
    TraderStats,
)
from .pnl import PnLAccountant

TOP_TOKENS_LIMIT = 5


def settlement_volume(swap: SwapTransaction) -> float:
    """Settlement-asset side of a swap."""
    if swap.action == TradeAction.BUY:
        return parse_amount(swap.from_amount)
    return parse_amount(swap.to_amount)


def top_tokens(swaps: Sequence[SwapTransaction], limit: int = TOP_TOKENS_LIMIT) -> List[TopToken]:
    """Most traded subject tokens; ties keep first-encountered order."""
    counts: Dict[str, int] = {}
    for swap in swaps:
        counts[swap.subject_token] = counts.get(swap.subject_token, 0) + 1

    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [TopToken(token=token, trades=trades) for token, trades in ranked[:limit]]


def empty_stats(address: str) -> TraderStats:
    """Zero-valued placeholder used when an address could not be analyzed."""
    return TraderStats(
        address=address,
        total_trades=0,
        buy_trades=0,
        sell_trades=0,
        total_volume=0.0,
        estimated_pnl=0.0,
        win_rate=0.0,
        avg_trade_size=0.0,
        last_trade_time=NOT_AVAILABLE,
        top_tokens=[],
    )


class StatsAggregator:
    """
    Folds a most-recent-first swap list into TraderStats / TradeAnalysis.

    Args:
        accountant: PnL engine (a fresh ledger is used per replay)
        chronological_pnl: Reverse the list to oldest-first before replaying
            it through the accountant. ``False`` replays the most-recent-first
            list as-is, reproducing the legacy dashboard numbers.
    """

    def __init__(self, accountant: Optional[PnLAccountant] = None, chronological_pnl: bool = True):
        self.accountant = accountant or PnLAccountant()
        self.chronological_pnl = chronological_pnl

    def _replay(self, swaps: Sequence[SwapTransaction]) -> float:
        ordered = list(reversed(swaps)) if self.chronological_pnl else list(swaps)
        return self.accountant.compute_pnl(ordered)

    def aggregate(self, address: str, swaps: Sequence[SwapTransaction]) -> TraderStats:
        buy_trades = 0
        sell_trades = 0
        total_volume = 0.0
        for swap in swaps:
            if swap.action == TradeAction.BUY:
                buy_trades += 1
            else:
                sell_trades += 1
            total_volume += settlement_volume(swap)

        total_trades = len(swaps)

        # Every swap is either a Buy or a Sell, so this is 100 whenever
        # total_trades > 0. It does not measure profitability.
        win_rate = (buy_trades + sell_trades) / total_trades * 100 if total_trades > 0 else 0.0

        return TraderStats(
            address=address,
            total_trades=total_trades,
            buy_trades=buy_trades,
            sell_trades=sell_trades,
            total_volume=total_volume,
            estimated_pnl=self._replay(swaps),
            win_rate=win_rate,
            avg_trade_size=total_volume / total_trades if total_trades > 0 else 0.0,
            last_trade_time=swaps[0].timestamp if swaps else NOT_AVAILABLE,
            top_tokens=top_tokens(swaps),
        )

    def analyze_by_token(self, swaps: Sequence[SwapTransaction]) -> List[TradeAnalysis]:
        """
        Per-token breakdown, sorted by trade count descending (stable).

        Each group keeps the input's most-recent-first order, so the first
        trade is the group's last element and vice versa.
        """
        groups: Dict[str, List[SwapTransaction]] = {}
        for swap in swaps:
            groups.setdefault(swap.subject_token, []).append(swap)

        analysis = []
        for token, trades in groups.items():
            volume = sum(settlement_volume(t) for t in trades)
            analysis.append(TradeAnalysis(
                token=token,
                total_trades=len(trades),
                total_volume=volume,
                avg_price=volume / len(trades),
                first_trade=trades[-1].timestamp,
                last_trade=trades[0].timestamp,
                estimated_pnl=self._replay(trades),
            ))

        analysis.sort(key=lambda a: a.total_trades, reverse=True)
        return analysis

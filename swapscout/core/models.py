"""
Data models for Scout swap extraction and trader analytics.

This module defines the core data structures used throughout the Scout
for representing extracted swaps, trader statistics and per-token analysis.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List


# Placeholder for any field that could not be resolved from the raw record.
NOT_AVAILABLE = "N/A"


class TradeAction(Enum):
    """Trade action type."""
    BUY = "Buy"
    SELL = "Sell"


@dataclass
class SwapInfo:
    """
    Economics of a single swap candidate as read from a raw transaction.

    Every field may still hold the NOT_AVAILABLE sentinel; the pipeline decides
    whether the candidate becomes a SwapTransaction.
    """
    from_token: str = NOT_AVAILABLE
    to_token: str = NOT_AVAILABLE
    from_amount: str = NOT_AVAILABLE
    to_amount: str = NOT_AVAILABLE
    action: TradeAction = TradeAction.BUY

    @property
    def is_complete(self) -> bool:
        return NOT_AVAILABLE not in (
            self.from_token,
            self.to_token,
            self.from_amount,
            self.to_amount,
        )

    def __post_init__(self):
        """Convert string action to enum if needed."""
        if isinstance(self.action, str):
            self.action = TradeAction(self.action.capitalize())


@dataclass(frozen=True)
class SwapTransaction:
    """
    A resolved swap made by a wallet.

    Amounts are decimal strings already scaled by the token's assumed precision.
    """
    hash: str
    timestamp: str  # Human-readable UTC time, or "N/A"
    from_token: str
    to_token: str
    from_amount: str
    to_amount: str
    action: TradeAction
    contract: str  # Invoked entry function identifier

    @property
    def subject_token(self) -> str:
        """Token acquired on a Buy, disposed of on a Sell."""
        return self.to_token if self.action == TradeAction.BUY else self.from_token


@dataclass(frozen=True)
class TopToken:
    """Trade count for one token in a trader's history."""
    token: str
    trades: int


@dataclass(frozen=True)
class TraderStats:
    """
    Summary statistics for one wallet over one fetched window.

    Volume, average size and PnL are denominated in the settlement asset.
    """
    address: str
    total_trades: int
    buy_trades: int
    sell_trades: int
    total_volume: float
    estimated_pnl: float  # May be NaN when a unit price divided by zero
    win_rate: float  # (buy + sell) / total * 100, see StatsAggregator
    avg_trade_size: float
    last_trade_time: str
    top_tokens: List[TopToken] = field(default_factory=list)


@dataclass(frozen=True)
class TradeAnalysis:
    """Per-token slice of a trader's swap history."""
    token: str
    total_trades: int
    total_volume: float
    avg_price: float
    first_trade: str
    last_trade: str
    estimated_pnl: float


@dataclass(frozen=True)
class TraderAnalysis:
    """Full detail view for a single trader."""
    stats: TraderStats
    transactions: List[SwapTransaction]
    token_analysis: List[TradeAnalysis]


@dataclass
class LedgerEntry:
    """Running cost basis for one token during a PnL replay."""
    held_amount: float = 0.0
    average_cost: float = 0.0

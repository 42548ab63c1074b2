"""
Swap Scout Core Module

Provides swap extraction, token resolution, PnL accounting, trader statistics
and leaderboard ranking over Aptos account transaction history.
"""

from .analyzer import TraderAnalyzer
from .aptos_client import (
    AddressNotFoundError,
    AptosClient,
    NetworkError,
    ServerError,
    TransportError,
)
from .decimal_utils import AmountNormalizer, ieee_divide, normalize_amount, parse_amount
from .leaderboard import LeaderboardRanker, filter_valid_traders, is_valid_trader
from .models import (
    NOT_AVAILABLE,
    LedgerEntry,
    SwapInfo,
    SwapTransaction,
    TopToken,
    TradeAction,
    TradeAnalysis,
    TraderAnalysis,
    TraderStats,
)
from .pipeline import TransactionPipeline, format_timestamp
from .pnl import PnLAccountant, compute_pnl
from .stats import StatsAggregator, empty_stats
from .swap_extractor import SwapExtractor, is_swap
from .tokens import DEFAULT_REGISTRY, TokenRegistry, TokenResolver, resolve_token

__all__ = [
    # Analyzer
    "TraderAnalyzer",
    # Transport
    "AptosClient",
    "TransportError",
    "AddressNotFoundError",
    "ServerError",
    "NetworkError",
    # Amounts
    "AmountNormalizer",
    "normalize_amount",
    "parse_amount",
    "ieee_divide",
    # Leaderboard
    "LeaderboardRanker",
    "is_valid_trader",
    "filter_valid_traders",
    # Models
    "NOT_AVAILABLE",
    "LedgerEntry",
    "SwapInfo",
    "SwapTransaction",
    "TopToken",
    "TradeAction",
    "TradeAnalysis",
    "TraderAnalysis",
    "TraderStats",
    # Pipeline
    "TransactionPipeline",
    "format_timestamp",
    "SwapExtractor",
    "is_swap",
    # Accounting & stats
    "PnLAccountant",
    "compute_pnl",
    "StatsAggregator",
    "empty_stats",
    # Tokens
    "TokenRegistry",
    "TokenResolver",
    "DEFAULT_REGISTRY",
    "resolve_token",
]

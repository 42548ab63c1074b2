"""
Multi-address ranking.

Addresses are fetched and aggregated with bounded fan-out. A failure for one
address never fails the batch: that entry degrades to zero-valued stats.
"""

import asyncio
import logging
import math
from typing import Awaitable, Callable, Iterable, List, Optional

from .aptos_client import AddressNotFoundError, NetworkError, ServerError, TransportError
from .models import NOT_AVAILABLE, TraderStats
from .stats import empty_stats

logger = logging.getLogger(__name__)

MIN_ADDRESS_LENGTH = 10

FetchAndAggregate = Callable[[str], Awaitable[TraderStats]]


def failure_reason(error: BaseException) -> str:
    """Metric label for a per-address failure."""
    if isinstance(error, AddressNotFoundError):
        return "not_found"
    if isinstance(error, ServerError):
        return "server"
    if isinstance(error, NetworkError):
        return "network"
    if isinstance(error, TransportError):
        return "transport"
    return "internal"


def pnl_sort_key(stats: TraderStats):
    """Descending PnL with NaN after every number (ascending key)."""
    pnl = stats.estimated_pnl
    if math.isnan(pnl):
        return (1, 0.0)
    return (0, -pnl)


def is_valid_trader(stats: TraderStats) -> bool:
    """Whether an entry is worth displaying on a leaderboard."""
    return (
        stats.total_trades > 0
        and bool(stats.address)
        and stats.address != NOT_AVAILABLE
        and len(stats.address) > MIN_ADDRESS_LENGTH
        and not math.isnan(stats.estimated_pnl)
    )


def filter_valid_traders(entries: Iterable[TraderStats]) -> List[TraderStats]:
    """Drop invalid entries, keeping the ranked order."""
    return [entry for entry in entries if is_valid_trader(entry)]


class LeaderboardRanker:
    """
    Ranks traders by estimated realized PnL.

    Args:
        fetch_and_aggregate: Coroutine function address -> TraderStats
        max_concurrency: Cap on in-flight fetches (>= 1)
        metrics: Optional ScoutMetrics for failure counts and leaderboard size
    """

    def __init__(self, fetch_and_aggregate: FetchAndAggregate, max_concurrency: int = 4, metrics=None):
        self.fetch_and_aggregate = fetch_and_aggregate
        self.max_concurrency = max(1, int(max_concurrency))
        self.metrics = metrics

    async def rank_traders(self, addresses: Iterable[str]) -> List[TraderStats]:
        addresses = list(addresses)
        if not addresses:
            return []

        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def run_one(address: str) -> TraderStats:
            async with semaphore:
                try:
                    return await self.fetch_and_aggregate(address)
                except Exception as e:
                    logger.warning(f"[Leaderboard] {address[:8]}... failed, using zero stats: {e}")
                    if self.metrics:
                        self.metrics.record_fetch_failure(failure_reason(e))
                    return empty_stats(address)

        # gather keeps input order, so the stable sort below resolves ties by it.
        results = await asyncio.gather(*(run_one(address) for address in addresses))
        ranked = sorted(results, key=pnl_sort_key)

        if self.metrics:
            self.metrics.set_leaderboard_size(len(ranked))
        return ranked

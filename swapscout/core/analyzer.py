"""
Trader Analyzer - public entry points for swap history and trader analytics.

Composes the transport (AptosClient), the extraction pipeline and the stats
aggregator. Presentation layers and the CLI depend only on this class:

    async with TraderAnalyzer() as analyzer:
        swaps = await analyzer.build_swap_history("0xabc...")
        stats = analyzer.aggregate("0xabc...", swaps)
        board = await analyzer.rank_traders(["0xabc...", "0xdef..."])
        detail = await analyzer.analyze_trader("0xabc...")
"""

import logging
import time
from typing import Iterable, List, Optional, Sequence

from ..config import ScoutConfig
from .aptos_client import AptosClient
from .leaderboard import LeaderboardRanker
from .models import SwapTransaction, TraderAnalysis, TraderStats
from .pipeline import TransactionPipeline
from .stats import StatsAggregator
from .swap_extractor import SwapExtractor
from .tokens import DEFAULT_REGISTRY, TokenResolver

logger = logging.getLogger(__name__)


class TraderAnalyzer:
    """
    Trader analyzer for fetching and computing swap statistics.

    Every collaborator is injectable; anything omitted is built from
    ScoutConfig (RPC URL, limits, PnL ordering, token label overrides).
    """

    def __init__(
        self,
        client: Optional[AptosClient] = None,
        pipeline: Optional[TransactionPipeline] = None,
        aggregator: Optional[StatsAggregator] = None,
        max_concurrency: Optional[int] = None,
        analysis_limit: Optional[int] = None,
        chronological_pnl: Optional[bool] = None,
        metrics=None,
    ):
        """
        Initialize the trader analyzer.

        Args:
            client: Transport collaborator exposing fetch_account_transactions
            pipeline: Raw transactions -> swap records
            aggregator: Swap records -> TraderStats / TradeAnalysis
            max_concurrency: Leaderboard fan-out cap
            analysis_limit: Transactions fetched per trader by rank_traders/analyze_trader
            chronological_pnl: PnL replay order (ignored when aggregator is given)
            metrics: Optional ScoutMetrics
        """
        self.metrics = metrics
        self.client = client or AptosClient()

        if pipeline is None:
            registry = DEFAULT_REGISTRY.with_overrides(ScoutConfig.get_token_labels())
            pipeline = TransactionPipeline(
                extractor=SwapExtractor(resolver=TokenResolver(registry)),
                metrics=metrics,
            )
        self.pipeline = pipeline

        if aggregator is None:
            if chronological_pnl is None:
                chronological_pnl = ScoutConfig.get_chronological_pnl()
            aggregator = StatsAggregator(chronological_pnl=chronological_pnl)
        self.aggregator = aggregator

        self.analysis_limit = analysis_limit if analysis_limit is not None else ScoutConfig.get_analysis_tx_limit()
        self.ranker = LeaderboardRanker(
            self._fetch_and_aggregate,
            max_concurrency=max_concurrency if max_concurrency is not None else ScoutConfig.get_max_concurrent_fetches(),
            metrics=metrics,
        )

    async def __aenter__(self) -> "TraderAnalyzer":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self):
        await self.client.close()

    async def build_swap_history(self, address: str, limit: Optional[int] = None) -> List[SwapTransaction]:
        """
        Fetch an address's transactions and extract its swaps, most recent first.

        Transport errors propagate to the caller.
        """
        if limit is None:
            limit = ScoutConfig.get_tx_limit()
        raw_transactions = await self.client.fetch_account_transactions(address, limit)
        swaps = self.pipeline.build_swap_history(raw_transactions)
        logger.debug(f"{address[:8]}...: {len(swaps)} swaps from {len(raw_transactions)} transactions")
        return swaps

    def aggregate(self, address: str, swaps: Sequence[SwapTransaction]) -> TraderStats:
        stats = self.aggregator.aggregate(address, swaps)
        if self.metrics:
            self.metrics.increment_traders_analyzed()
        return stats

    async def _fetch_and_aggregate(self, address: str) -> TraderStats:
        swaps = await self.build_swap_history(address, self.analysis_limit)
        return self.aggregate(address, swaps)

    async def rank_traders(self, addresses: Iterable[str]) -> List[TraderStats]:
        """Rank addresses by estimated PnL; failed addresses appear as zero stats."""
        start = time.monotonic()
        ranked = await self.ranker.rank_traders(addresses)
        if self.metrics:
            self.metrics.record_analysis_duration(time.monotonic() - start)
        return ranked

    async def analyze_trader(self, address: str) -> TraderAnalysis:
        """
        Detail view: stats, swap list and per-token analysis for one address.

        Transport errors propagate to the caller.
        """
        start = time.monotonic()
        swaps = await self.build_swap_history(address, self.analysis_limit)
        analysis = TraderAnalysis(
            stats=self.aggregate(address, swaps),
            transactions=swaps,
            token_analysis=self.aggregator.analyze_by_token(swaps),
        )
        if self.metrics:
            self.metrics.record_analysis_duration(time.monotonic() - start)
        return analysis

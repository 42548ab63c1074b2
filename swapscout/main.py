#!/usr/bin/env python3
"""
Swap Scout - Aptos trader analytics

Fetches an account's transactions from an Aptos fullnode, extracts DEX swaps
and derives trader statistics (volume, estimated realized PnL, top tokens).

Usage:
    swapscout swaps 0xabc...                 # Most-recent-first swap history
    swapscout stats 0xabc... --limit 200     # Trader summary
    swapscout analyze 0xabc...               # Stats + per-token breakdown + swaps
    swapscout leaderboard 0xabc... 0xdef...  # Rank by estimated PnL
    swapscout leaderboard --all --json       # Default address set, unfiltered
    swapscout --check-config                 # Print configuration and exit
"""

import argparse
import asyncio
import dataclasses
import json
import logging
import math
import sys
from enum import Enum
from typing import Any, List, Optional, Sequence

from .config import ScoutConfig
from .core.aptos_client import AptosClient, TransportError
from .core.analyzer import TraderAnalyzer
from .core.leaderboard import filter_valid_traders
from .core.metrics import get_metrics
from .core.models import SwapTransaction, TradeAnalysis, TraderAnalysis, TraderStats


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--json",
        action="store_true",
        help="Print machine-readable JSON instead of text"
    )
    common.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging"
    )
    common.add_argument(
        "--rpc-url",
        default=None,
        help="Aptos fullnode base URL (default: APTOS_RPC_URL or public mainnet)"
    )
    common.add_argument(
        "--max-concurrency",
        type=int,
        default=None,
        help="Max in-flight fetches for the leaderboard (default: SCOUT_MAX_CONCURRENT_FETCHES or 4)"
    )
    common.add_argument(
        "--legacy-pnl-order",
        action="store_true",
        help="Replay PnL over the most-recent-first list (reproduces legacy dashboard numbers)"
    )

    parser = argparse.ArgumentParser(
        prog="swapscout",
        description="Swap Scout - Aptos trader analytics",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--check-config",
        action="store_true",
        help="Print configuration summary and exit"
    )

    subparsers = parser.add_subparsers(dest="command")

    swaps_parser = subparsers.add_parser("swaps", parents=[common], help="Show an address's swap history")
    swaps_parser.add_argument("address")
    swaps_parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Transactions to fetch (default: SCOUT_TX_LIMIT or 50)"
    )

    stats_parser = subparsers.add_parser("stats", parents=[common], help="Show trader statistics")
    stats_parser.add_argument("address")
    stats_parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Transactions to fetch (default: SCOUT_TX_LIMIT or 50)"
    )

    analyze_parser = subparsers.add_parser("analyze", parents=[common], help="Full trader analysis")
    analyze_parser.add_argument("address")

    leaderboard_parser = subparsers.add_parser("leaderboard", parents=[common], help="Rank traders by estimated PnL")
    leaderboard_parser.add_argument(
        "addresses",
        nargs="*",
        help="Addresses to rank (default: SCOUT_LEADERBOARD_ADDRESSES / SCOUT_LEADERBOARD_FILE)"
    )
    leaderboard_parser.add_argument(
        "--all",
        action="store_true",
        help="Include entries that fail the validity filter (zero trades, NaN PnL)"
    )

    args = parser.parse_args(argv)
    if not args.check_config and not args.command:
        parser.error("a command is required (swaps, stats, analyze, leaderboard)")
    return args


def configure_logging(verbose: bool = False):
    level = logging.DEBUG if verbose else getattr(logging, ScoutConfig.get_log_level(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _json_default(value: Any):
    if isinstance(value, Enum):
        return value.value
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def to_json(payload: Any) -> str:
    """Serialize dataclasses (or lists of them) for --json output."""
    if isinstance(payload, list):
        data = [dataclasses.asdict(item) for item in payload]
    else:
        data = dataclasses.asdict(payload)
    return json.dumps(data, indent=2, default=_json_default)


def _fmt_number(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    return f"{value:,.4f}"


def print_swaps(swaps: List[SwapTransaction]):
    if not swaps:
        print("[Scout] No swaps found")
        return
    print(f"{'Time (UTC)':<20} {'Action':<5} {'From':>24} {'To':>24}  Hash")
    for swap in swaps:
        from_leg = f"{swap.from_amount} {swap.from_token}"
        to_leg = f"{swap.to_amount} {swap.to_token}"
        print(f"{swap.timestamp:<20} {swap.action.value:<5} {from_leg:>24} {to_leg:>24}  {swap.hash[:12]}...")


def print_stats(stats: TraderStats):
    print(f"Address:        {stats.address}")
    print(f"Total trades:   {stats.total_trades} (buy {stats.buy_trades} / sell {stats.sell_trades})")
    print(f"Total volume:   {_fmt_number(stats.total_volume)}")
    print(f"Estimated PnL:  {_fmt_number(stats.estimated_pnl)}")
    print(f"Win rate:       {stats.win_rate:.1f}%")
    print(f"Avg trade size: {_fmt_number(stats.avg_trade_size)}")
    print(f"Last trade:     {stats.last_trade_time}")
    if stats.top_tokens:
        print("Top tokens:     " + ", ".join(f"{t.token} ({t.trades})" for t in stats.top_tokens))


def print_token_analysis(rows: List[TradeAnalysis]):
    if not rows:
        return
    print(f"{'Token':<12} {'Trades':>6} {'Volume':>16} {'Avg':>14} {'PnL':>14}  First / Last")
    for row in rows:
        print(
            f"{row.token:<12} {row.total_trades:>6} {_fmt_number(row.total_volume):>16} "
            f"{_fmt_number(row.avg_price):>14} {_fmt_number(row.estimated_pnl):>14}  "
            f"{row.first_trade} / {row.last_trade}"
        )


def print_leaderboard(entries: List[TraderStats]):
    if not entries:
        print("[Scout] No traders to show")
        return
    print(f"{'#':>3} {'Address':<20} {'Trades':>6} {'Volume':>16} {'Est. PnL':>16}  Last trade")
    for rank, entry in enumerate(entries, 1):
        address = entry.address if len(entry.address) <= 20 else f"{entry.address[:8]}...{entry.address[-6:]}"
        print(
            f"{rank:>3} {address:<20} {entry.total_trades:>6} "
            f"{_fmt_number(entry.total_volume):>16} {_fmt_number(entry.estimated_pnl):>16}  {entry.last_trade_time}"
        )


async def run_command(args: argparse.Namespace, analyzer: TraderAnalyzer) -> int:
    """Execute one subcommand and print its result. Returns the exit code."""
    if args.command == "swaps":
        swaps = await analyzer.build_swap_history(args.address, args.limit)
        if args.json:
            print(to_json(swaps))
        else:
            print_swaps(swaps)
        return 0

    if args.command == "stats":
        swaps = await analyzer.build_swap_history(args.address, args.limit)
        stats = analyzer.aggregate(args.address, swaps)
        if args.json:
            print(to_json(stats))
        else:
            print_stats(stats)
        return 0

    if args.command == "analyze":
        analysis: TraderAnalysis = await analyzer.analyze_trader(args.address)
        if args.json:
            print(to_json(analysis))
        else:
            print_stats(analysis.stats)
            print()
            print_token_analysis(analysis.token_analysis)
            print()
            print_swaps(analysis.transactions)
        return 0

    if args.command == "leaderboard":
        addresses = args.addresses
        if not addresses:
            try:
                addresses = ScoutConfig.get_leaderboard_addresses()
            except OSError as e:
                print(f"[Scout] ERROR: Cannot read leaderboard file: {e}", file=sys.stderr)
                return 2
        if not addresses:
            print("[Scout] ERROR: No addresses given and none configured "
                  "(SCOUT_LEADERBOARD_ADDRESSES / SCOUT_LEADERBOARD_FILE)", file=sys.stderr)
            return 2
        if not args.json:
            print(f"[Scout] Ranking {len(addresses)} traders...")
        ranked = await analyzer.rank_traders(addresses)
        if not args.all:
            ranked = filter_valid_traders(ranked)
        if args.json:
            print(to_json(ranked))
        else:
            print_leaderboard(ranked)
        return 0

    raise ValueError(f"Unknown command: {args.command}")


async def _run(args: argparse.Namespace) -> int:
    analyzer = TraderAnalyzer(
        client=AptosClient(rpc_url=args.rpc_url),
        max_concurrency=args.max_concurrency,
        chronological_pnl=False if args.legacy_pnl_order else None,
        metrics=get_metrics(),
    )
    async with analyzer:
        return await run_command(args, analyzer)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for the Scout CLI."""
    args = parse_args(argv)

    if args.check_config:
        return 0 if ScoutConfig.print_config_summary() else 1

    configure_logging(args.verbose)

    try:
        return asyncio.run(_run(args))
    except TransportError as e:
        print(f"[Scout] ERROR: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())

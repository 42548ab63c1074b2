"""
Scout Configuration Module

Centralized configuration management for Scout module.
Loads from environment variables with sensible defaults.
"""

import os
from typing import Dict, Optional
from pathlib import Path
from urllib.parse import urlparse

DEFAULT_RPC_URL = "https://fullnode.mainnet.aptoslabs.com"


class ScoutConfig:
    """Centralized Scout configuration."""

    # ========================================================================
    # Node access
    # ========================================================================

    @staticmethod
    def get_rpc_url() -> str:
        """Get Aptos fullnode base URL (APTOS_RPC_URL, then VITE_APTOS_RPC)."""
        url = os.getenv("APTOS_RPC_URL") or os.getenv("VITE_APTOS_RPC") or DEFAULT_RPC_URL
        return url.strip().rstrip("/")

    @staticmethod
    def get_api_key() -> Optional[str]:
        """Get optional node provider API key."""
        return os.getenv("APTOS_API_KEY") or None

    @staticmethod
    def get_request_timeout() -> float:
        """Get total request timeout in seconds."""
        return float(os.getenv("SCOUT_REQUEST_TIMEOUT_SECONDS", "30"))

    @staticmethod
    def get_rate_limit_delay() -> float:
        """Get minimum spacing between node requests in seconds."""
        return float(os.getenv("SCOUT_RATE_LIMIT_DELAY_SECONDS", "0.1"))

    # ========================================================================
    # Fetch sizes & concurrency
    # ========================================================================

    @staticmethod
    def get_tx_limit() -> int:
        """Get default number of transactions fetched for a swap history."""
        return int(os.getenv("SCOUT_TX_LIMIT", "50"))

    @staticmethod
    def get_analysis_tx_limit() -> int:
        """Get number of transactions fetched per trader for ranking and detail views."""
        return int(os.getenv("SCOUT_ANALYSIS_TX_LIMIT", "100"))

    @staticmethod
    def get_max_concurrent_fetches() -> int:
        """Get maximum number of in-flight fetches during leaderboard ranking."""
        return max(1, int(os.getenv("SCOUT_MAX_CONCURRENT_FETCHES", "4")))

    # ========================================================================
    # Analytics
    # ========================================================================

    @staticmethod
    def get_chronological_pnl() -> bool:
        """Get whether PnL is replayed oldest-first (False keeps legacy order)."""
        return os.getenv("SCOUT_CHRONOLOGICAL_PNL", "true").lower() == "true"

    @staticmethod
    def get_token_labels() -> Dict[str, str]:
        """Get extra exact-match token labels (type=SYMBOL;type=SYMBOL)."""
        from .core.tokens import parse_token_labels

        return parse_token_labels(os.getenv("SCOUT_TOKEN_LABELS", ""))

    # ========================================================================
    # Leaderboard address set
    # ========================================================================

    @staticmethod
    def get_leaderboard_file() -> Optional[str]:
        """Get path of the leaderboard address file, if configured."""
        return os.getenv("SCOUT_LEADERBOARD_FILE") or None

    @staticmethod
    def get_leaderboard_addresses() -> list[str]:
        """
        Get default leaderboard addresses.

        SCOUT_LEADERBOARD_ADDRESSES (comma-separated) wins over
        SCOUT_LEADERBOARD_FILE (one address per line, '#' starts a comment).
        """
        env_val = os.getenv("SCOUT_LEADERBOARD_ADDRESSES")
        if env_val:
            return [x.strip() for x in env_val.split(",") if x.strip()]

        path = ScoutConfig.get_leaderboard_file()
        if not path:
            return []

        addresses = []
        with open(path, "r", encoding="utf-8") as f:
            for line in f:
                line = line.split("#", 1)[0].strip()
                if line:
                    addresses.append(line)
        return addresses

    # ========================================================================
    # Observability
    # ========================================================================

    @staticmethod
    def get_metrics_enabled() -> bool:
        """Get whether the Prometheus exporter should be started."""
        return os.getenv("SCOUT_METRICS_ENABLED", "false").lower() == "true"

    @staticmethod
    def get_metrics_port() -> int:
        """Get Prometheus exporter port."""
        return int(os.getenv("SCOUT_METRICS_PORT", "8081"))

    @staticmethod
    def get_log_level() -> str:
        """Get root log level name."""
        return os.getenv("SCOUT_LOG_LEVEL", "INFO").upper()

    # ========================================================================
    # Configuration Validation
    # ========================================================================

    @staticmethod
    def validate_config() -> tuple[bool, list[str]]:
        """
        Validate the current configuration.

        Returns:
            Tuple of (is_valid, list_of_warnings)
        """
        warnings = []
        is_valid = True

        rpc_url = ScoutConfig.get_rpc_url()
        parsed = urlparse(rpc_url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            warnings.append(f"ERROR: APTOS_RPC_URL is not an http(s) URL: {rpc_url!r}")
            is_valid = False

        for name, getter in (
            ("SCOUT_TX_LIMIT", ScoutConfig.get_tx_limit),
            ("SCOUT_ANALYSIS_TX_LIMIT", ScoutConfig.get_analysis_tx_limit),
            ("SCOUT_REQUEST_TIMEOUT_SECONDS", ScoutConfig.get_request_timeout),
        ):
            try:
                value = getter()
            except ValueError:
                warnings.append(f"ERROR: {name} is not a number")
                is_valid = False
                continue
            if value <= 0:
                warnings.append(f"ERROR: {name} must be positive (got {value})")
                is_valid = False

        try:
            if ScoutConfig.get_rate_limit_delay() < 0:
                warnings.append("WARNING: SCOUT_RATE_LIMIT_DELAY_SECONDS is negative, treated as no delay")
        except ValueError:
            warnings.append("ERROR: SCOUT_RATE_LIMIT_DELAY_SECONDS is not a number")
            is_valid = False

        if not ScoutConfig.get_chronological_pnl():
            warnings.append("WARNING: SCOUT_CHRONOLOGICAL_PNL=false - PnL is replayed most-recent-first (legacy numbers)")

        leaderboard_file = ScoutConfig.get_leaderboard_file()
        if leaderboard_file and not os.getenv("SCOUT_LEADERBOARD_ADDRESSES"):
            if not Path(leaderboard_file).is_file():
                warnings.append(f"WARNING: Leaderboard file does not exist: {leaderboard_file}")
        elif not leaderboard_file and not os.getenv("SCOUT_LEADERBOARD_ADDRESSES"):
            warnings.append("No default leaderboard addresses configured; pass them on the command line")

        return is_valid, warnings

    @staticmethod
    def print_config_summary():
        """Print a summary of current configuration."""
        print("=" * 70)
        print("Scout Configuration Summary")
        print("=" * 70)
        print(f"RPC URL: {ScoutConfig.get_rpc_url()}")
        print(f"API Key: {'Set' if ScoutConfig.get_api_key() else 'Not set'}")
        print(f"Tx Limit: {os.getenv('SCOUT_TX_LIMIT', '50')}")
        print(f"Analysis Tx Limit: {os.getenv('SCOUT_ANALYSIS_TX_LIMIT', '100')}")
        print(f"Max Concurrent Fetches: {os.getenv('SCOUT_MAX_CONCURRENT_FETCHES', '4')}")
        print(f"Chronological PnL: {ScoutConfig.get_chronological_pnl()}")
        print(f"Token Label Overrides: {len(ScoutConfig.get_token_labels())}")
        print(f"Metrics: {'enabled' if ScoutConfig.get_metrics_enabled() else 'disabled'}")
        print("=" * 70)

        is_valid, warnings = ScoutConfig.validate_config()
        if warnings:
            print("\nConfiguration Warnings:")
            for warning in warnings:
                print(f"  ⚠️  {warning}")
        else:
            print("\n✓ Configuration looks good!")
        return is_valid

"""
Pytest configuration and fixtures for Scout tests.
"""

from typing import Any, Dict, List, Optional

import pytest

from swapscout.core.models import SwapTransaction, TradeAction

APT_TYPE = "0x1::aptos_coin::AptosCoin"
USDC_TYPE = "0xf22bede237a07e121b56d91a491eb7bcdfd1f5907926a9e58338f964a01b17fa::asset::USDC"
MOON_TYPE = "0x7e5d0a4b9c1f2e3d4c5b6a798877665544332211ffeeddccbbaa998877665544::meme::MOON"

ROUTER_SWAP = "0x190d44266241744264b964a37b8f09863167a12d3e70cda39376cfb4e3561e12::scripts_v2::swap"


def make_raw_tx(
    tx_hash: Optional[str] = "0xhash",
    timestamp: Optional[str] = "1700000000000000",
    function: Optional[str] = ROUTER_SWAP,
    type_arguments: Optional[List[Any]] = None,
    arguments: Optional[List[Any]] = None,
    events: Optional[List[Dict[str, Any]]] = None,
) -> Dict[str, Any]:
    """Build a raw transaction shaped like GET /v1/accounts/{address}/transactions output."""
    tx: Dict[str, Any] = {
        "type": "user_transaction",
        "version": "123456789",
        "success": True,
        "events": events or [],
        "payload": {
            "type": "entry_function_payload",
            "type_arguments": type_arguments or [],
            "arguments": arguments or [],
        },
    }
    if function is not None:
        tx["payload"]["function"] = function
    if tx_hash is not None:
        tx["hash"] = tx_hash
    if timestamp is not None:
        tx["timestamp"] = timestamp
    return tx


def make_swap(
    action: TradeAction,
    token: str,
    from_amount: str,
    to_amount: str,
    tx_hash: str = "0xswap",
    timestamp: str = "2023-11-14 22:13:20",
    settlement: str = "AptosCoin",
) -> SwapTransaction:
    """Resolved swap: a Buy spends settlement for ``token``, a Sell the reverse."""
    if action == TradeAction.BUY:
        from_token, to_token = settlement, token
    else:
        from_token, to_token = token, settlement
    return SwapTransaction(
        hash=tx_hash,
        timestamp=timestamp,
        from_token=from_token,
        to_token=to_token,
        from_amount=from_amount,
        to_amount=to_amount,
        action=action,
        contract=ROUTER_SWAP,
    )


@pytest.fixture
def trader_address():
    """Sample Aptos account address for testing."""
    return "0x" + "a1" * 32


@pytest.fixture
def buy_moon_tx():
    """APT -> MOON via positional arguments and type arguments."""
    return make_raw_tx(
        tx_hash="0xbuy",
        timestamp="1700000000000000",
        type_arguments=[APT_TYPE, MOON_TYPE],
        arguments=["1000000000", "500000000"],
    )


@pytest.fixture
def sell_moon_tx():
    """MOON -> APT reported through a swap event."""
    return make_raw_tx(
        tx_hash="0xsell",
        timestamp="1700000600000000",
        type_arguments=[MOON_TYPE, APT_TYPE],
        arguments=["1", "2"],
        events=[
            {
                "type": "0x190d44266241744264b964a37b8f09863167a12d3e70cda39376cfb4e3561e12::swap::SwapEvent",
                "data": {
                    "from_token": MOON_TYPE,
                    "to_token": APT_TYPE,
                    "from_amount": "500000000",
                    "to_amount": "1200000000",
                },
            }
        ],
    )


@pytest.fixture
def transfer_tx():
    """A plain coin transfer, never a swap candidate."""
    return make_raw_tx(
        tx_hash="0xtransfer",
        function="0x1::aptos_account::transfer",
        arguments=["0x" + "b2" * 32, "100000000"],
    )


@pytest.fixture
def raw_feed(buy_moon_tx, transfer_tx, sell_moon_tx):
    """Oldest-first node response: buy, transfer, sell."""
    return [buy_moon_tx, transfer_tx, sell_moon_tx]


@pytest.fixture
def round_trip_swaps():
    """Most-recent-first: sell 5 MOON for 12 APT after buying 5 MOON for 10 APT."""
    return [
        make_swap(TradeAction.SELL, "MOON", "5", "12", tx_hash="0xsell", timestamp="2023-11-14 22:23:20"),
        make_swap(TradeAction.BUY, "MOON", "10", "5", tx_hash="0xbuy", timestamp="2023-11-14 22:13:20"),
    ]


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every Scout-related environment variable."""
    for name in (
        "APTOS_RPC_URL",
        "VITE_APTOS_RPC",
        "APTOS_API_KEY",
        "SCOUT_TX_LIMIT",
        "SCOUT_ANALYSIS_TX_LIMIT",
        "SCOUT_MAX_CONCURRENT_FETCHES",
        "SCOUT_REQUEST_TIMEOUT_SECONDS",
        "SCOUT_RATE_LIMIT_DELAY_SECONDS",
        "SCOUT_CHRONOLOGICAL_PNL",
        "SCOUT_TOKEN_LABELS",
        "SCOUT_LEADERBOARD_ADDRESSES",
        "SCOUT_LEADERBOARD_FILE",
        "SCOUT_METRICS_ENABLED",
        "SCOUT_METRICS_PORT",
        "SCOUT_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch

"""
Swap detection and field extraction for raw Aptos transactions.

A raw transaction (as returned by ``GET /v1/accounts/{address}/transactions``)
is a loosely-typed dict. Swap economics are read from, in order of preference:

1. Emitted events whose type mentions ``Swap``/``swap`` (``from_amount``,
   ``to_amount``, ``from_token``, ``to_token`` in the event data).
2. Positional entry-function arguments (first two become the amounts).
3. Generic type arguments (first two become the tokens).
"""

import logging
from typing import Any, Callable, Dict, Optional

from .decimal_utils import AmountNormalizer
from .models import NOT_AVAILABLE, SwapInfo, TradeAction
from .tokens import TokenResolver

logger = logging.getLogger(__name__)

# Matched against the last ``::`` segment of the entry function.
SWAP_SEGMENT_KEYWORDS = ("swap", "exchange", "trade")
# Matched against the whole entry function identifier.
SWAP_FUNCTION_KEYWORDS = ("swap", "router", "aggregator")

SETTLEMENT_FRAGMENTS = ("aptos", "apt")
SELL_TARGET_FRAGMENTS = ("aptos", "apt", "usdc")


def _payload(tx: Any) -> Dict[str, Any]:
    if not isinstance(tx, dict):
        return {}
    payload = tx.get("payload")
    return payload if isinstance(payload, dict) else {}


def entry_function(tx: Any) -> str:
    """Invoked function identifier, or an empty string."""
    function = _payload(tx).get("function")
    return function if isinstance(function, str) else ""


def is_swap(tx: Any) -> bool:
    """
    Whether a raw transaction is a swap candidate.

    Matching is case-sensitive on the identifier as emitted by the node.
    """
    function = entry_function(tx)
    if not function:
        return False
    last_segment = function.split("::")[-1]
    if any(keyword in last_segment for keyword in SWAP_SEGMENT_KEYWORDS):
        return True
    return any(keyword in function for keyword in SWAP_FUNCTION_KEYWORDS)


def _as_amount(value: Any) -> Optional[str]:
    """Render a scalar amount as a string; anything else is unresolved."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float):
        text = str(int(value)) if value.is_integer() else repr(value)
    elif isinstance(value, (int, str)):
        text = str(value)
    else:
        return None
    return text or None


def classify_action(from_token: str, to_token: str) -> TradeAction:
    """
    Buy/Sell from the settlement-asset pivot.

    Spending the settlement asset is a Buy; receiving it (or USDC) is a Sell.
    Anything else stays a Buy.
    """
    from_lower = from_token.lower()
    to_lower = to_token.lower()
    if any(fragment in from_lower for fragment in SETTLEMENT_FRAGMENTS):
        return TradeAction.BUY
    if any(fragment in to_lower for fragment in SELL_TARGET_FRAGMENTS):
        return TradeAction.SELL
    return TradeAction.BUY


class SwapExtractor:
    """Reads swap economics out of a raw transaction. Never raises."""

    def __init__(
        self,
        resolver: Optional[TokenResolver] = None,
        normalizer: Optional[Callable[[Any, str], Any]] = None,
    ):
        self.resolver = resolver or TokenResolver()
        self.normalizer = normalizer or AmountNormalizer()

    def extract(self, tx: Any) -> SwapInfo:
        try:
            return self._extract(tx)
        except Exception as e:
            logger.debug(f"Swap extraction failed for {self._hash(tx)}: {e}")
            return SwapInfo()

    def _extract(self, tx: Dict[str, Any]) -> SwapInfo:
        info = SwapInfo()

        # 1) Swap events; a later matching event overrides an earlier one.
        for event in tx.get("events") or []:
            event_type = event.get("type")
            data = event.get("data")
            if not event_type or not data:
                continue
            if "Swap" not in event_type and "swap" not in event_type:
                continue
            if data.get("from_amount") and data.get("to_amount"):
                info.from_amount = _as_amount(data["from_amount"]) or NOT_AVAILABLE
                info.to_amount = _as_amount(data["to_amount"]) or NOT_AVAILABLE
            if data.get("from_token") and data.get("to_token"):
                info.from_token = self._token(data["from_token"])
                info.to_token = self._token(data["to_token"])

        payload = _payload(tx)

        # 2) Positional arguments
        arguments = payload.get("arguments") or []
        if arguments:
            if info.from_amount == NOT_AVAILABLE:
                info.from_amount = _as_amount(arguments[0]) or NOT_AVAILABLE
            if info.to_amount == NOT_AVAILABLE and len(arguments) > 1:
                info.to_amount = _as_amount(arguments[1]) or NOT_AVAILABLE

        # 3) Type arguments
        type_arguments = payload.get("type_arguments") or []
        if type_arguments:
            if info.from_token == NOT_AVAILABLE:
                info.from_token = self._token(type_arguments[0])
            if info.to_token == NOT_AVAILABLE and len(type_arguments) > 1:
                info.to_token = self._token(type_arguments[1])

        if info.from_amount != NOT_AVAILABLE and info.from_token != NOT_AVAILABLE:
            info.from_amount = self.normalizer(info.from_amount, info.from_token)
        if info.to_amount != NOT_AVAILABLE and info.to_token != NOT_AVAILABLE:
            info.to_amount = self.normalizer(info.to_amount, info.to_token)

        info.action = classify_action(info.from_token, info.to_token)
        return info

    def _token(self, type_identifier: Any) -> str:
        # Struct-shaped token fields (e.g. {"inner": "0x..."}) invalidate the whole record.
        if not isinstance(type_identifier, str):
            raise TypeError(f"token field is {type(type_identifier).__name__}, not a type string")
        return self.resolver.resolve(type_identifier)

    @staticmethod
    def _hash(tx: Any) -> str:
        if isinstance(tx, dict) and tx.get("hash"):
            return str(tx["hash"])[:10]
        return "<unknown>"

"""
Raw transaction feed -> ordered list of resolved swaps.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Iterable, List, Optional

from .models import NOT_AVAILABLE, SwapTransaction
from .swap_extractor import SwapExtractor, entry_function, is_swap

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def format_timestamp(raw_timestamp: Any) -> str:
    """
    Render a node timestamp (microseconds since epoch) as UTC wall-clock time.

    Returns "N/A" when the value is missing or not numeric.
    """
    if raw_timestamp is None or raw_timestamp == "":
        return NOT_AVAILABLE
    try:
        millis = float(raw_timestamp) / 1000
        dt = datetime.fromtimestamp(millis / 1000, tz=timezone.utc)
    except (ValueError, TypeError, OverflowError, OSError):
        return NOT_AVAILABLE
    return dt.strftime(TIMESTAMP_FORMAT)


class TransactionPipeline:
    """
    Filters, extracts and orders swaps for one address.

    The node returns transactions oldest-first; the output is most-recent-first
    and no reordering happens after the initial reversal.
    """

    def __init__(self, extractor: Optional[SwapExtractor] = None, metrics=None):
        self.extractor = extractor or SwapExtractor()
        self.metrics = metrics

    def build_swap_history(self, raw_transactions: Iterable[Any]) -> List[SwapTransaction]:
        candidates = [tx for tx in (raw_transactions or []) if is_swap(tx)]
        candidates.reverse()

        swaps: List[SwapTransaction] = []
        dropped = 0
        for tx in candidates:
            swap = self._build(tx)
            if swap is None:
                dropped += 1
                continue
            swaps.append(swap)

        if dropped:
            logger.debug(f"Dropped {dropped} incomplete swap candidate(s) of {len(candidates)}")
        if self.metrics:
            self.metrics.record_swaps(extracted=len(swaps), dropped=dropped)
        return swaps

    def _build(self, tx: dict) -> Optional[SwapTransaction]:
        info = self.extractor.extract(tx)
        tx_hash = tx.get("hash") or NOT_AVAILABLE
        if not info.is_complete or tx_hash == NOT_AVAILABLE:
            return None

        return SwapTransaction(
            hash=str(tx_hash),
            timestamp=format_timestamp(tx.get("timestamp")),
            from_token=info.from_token,
            to_token=info.to_token,
            from_amount=info.from_amount,
            to_amount=info.to_amount,
            action=info.action,
            contract=entry_function(tx) or NOT_AVAILABLE,
        )

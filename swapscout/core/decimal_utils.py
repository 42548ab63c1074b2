"""
Utility functions for amount conversions at boundaries.

Raw on-chain amounts arrive as integer strings in the token's smallest unit.
This module scales them to human units using an assumed per-token precision,
and provides the float helpers used by PnL and statistics code.
"""

import math
import re
from decimal import Decimal, InvalidOperation, localcontext
from typing import Optional, Tuple, Union

DEFAULT_DECIMALS = 8

# Leading decimal literal; trailing junk is ignored, so "0x1f" reads as 0.
_NUMERIC_PREFIX = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")

# Checked in order against the lowercased symbol; first hit wins.
DECIMALS_BY_FRAGMENT: Tuple[Tuple[Tuple[str, ...], int], ...] = (
    (("usdc",), 6),
    (("aptos", "apt"), 8),
    (("usdt",), 6),
    (("weth",), 18),
)


def decimals_for_symbol(symbol: Optional[str]) -> int:
    """
    Assumed decimal precision for a resolved token symbol.

    This is a heuristic, not a metadata lookup: anything unmatched defaults
    to 8 decimals even if the asset's real precision differs.
    """
    lowered = (symbol or "").lower()
    for fragments, decimals in DECIMALS_BY_FRAGMENT:
        if any(fragment in lowered for fragment in fragments):
            return decimals
    return DEFAULT_DECIMALS


def normalize_amount(raw_amount: Union[str, int, float], symbol: Optional[str]) -> Union[str, int, float]:
    """
    Scale a raw integer amount to a fixed-point decimal string.

    Args:
        raw_amount: Amount in the token's smallest unit (string or number)
        symbol: Resolved token symbol, used as the decimals hint

    Returns:
        Decimal string with exactly ``decimals`` fractional digits, or
        ``raw_amount`` unchanged when it has no leading numeric part.
        Trailing garbage after a numeric prefix is ignored ("12abc" scales 12).
    """
    match = _NUMERIC_PREFIX.match(str(raw_amount))
    if match is None:
        return raw_amount
    try:
        value = Decimal(match.group(1))
    except InvalidOperation:
        return raw_amount

    if not value.is_finite():
        return raw_amount

    decimals = decimals_for_symbol(symbol)
    with localcontext() as ctx:
        ctx.prec = 96
        scaled = value / (Decimal(10) ** decimals)
        return f"{scaled:.{decimals}f}"


class AmountNormalizer:
    """Callable wrapper around normalize_amount for injection into the extractor."""

    def normalize(self, raw_amount, symbol):
        return normalize_amount(raw_amount, symbol)

    __call__ = normalize


def parse_amount(value) -> float:
    """
    Parse a decimal string to float, treating anything unparseable as 0.

    NaN also maps to 0 so that a malformed amount cannot poison a running sum.
    """
    if value is None:
        return 0.0
    try:
        result = float(value)
    except (ValueError, TypeError):
        return 0.0
    if math.isnan(result):
        return 0.0
    return result


def ieee_divide(numerator: float, denominator: float) -> float:
    """
    Divide with IEEE-754 semantics instead of raising ZeroDivisionError.

    ``x / 0`` gives a signed infinity and ``0 / 0`` gives NaN, so callers
    can surface a degenerate price as an explicit non-finite result.
    """
    if denominator == 0:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)
    return numerator / denominator

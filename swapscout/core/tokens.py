"""
Token identity resolution.

Aptos coin and fungible-asset type identifiers (``0x1::aptos_coin::AptosCoin``,
``0xf22b...::asset::USDC``) carry no metadata, so symbols are resolved from an
exact-match registry first and then from ordered substring heuristics:

1. Exact registry lookup.
2. Case-insensitive match of the full identifier against PRIMARY_FRAGMENTS.
3. A short (<= 20 chars) final ``::`` segment is returned verbatim.
4. A long final segment is scanned (case-sensitive) against TICKER_FRAGMENTS;
   if it is a bare hex address the full lowercased identifier is scanned with
   the same table, falling back to ``"Token"``.

Resolution is approximate by nature; symbol collisions are accepted.
"""

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple

UNKNOWN_SYMBOL = "Unknown"
GENERIC_SYMBOL = "Token"
SHORT_SEGMENT_MAX_LENGTH = 20

_HEX_ADDRESS = re.compile(r"^0x[a-fA-F0-9]+$")

FragmentTable = Tuple[Tuple[str, str], ...]


KNOWN_TOKENS: Dict[str, str] = {
    # Native settlement asset
    "0x1::aptos_coin::AptosCoin": "AptosCoin",
    "0x1::coin::CoinInfo": "AptosCoin",
    # Stablecoins
    "0xf22bede237a07e121b56d91a491eb7bcdfd1f5907926a9e58338f964a01b17fa::asset::USDC": "USDC",
    "0x5e156f1207d0ebfa19a9eeff00d62a282278fb8719f4fab3a586a0a2c0fffbea::coin::T": "USDT",
    "0x6f986d146e4a90b828d8c12c14b6f4e003fdff11a8eecfce5b93b6931b01b4d::coin::T": "USDT",
    # Wrapped assets (bridged)
    "0xcc8a89c8dce9693d354449f1f73e60e14e347417854f029db5bc8e7454008abb::coin::T": "WETH",
    "0xae478ff7d83ed072dbc5e264250e67ef58fa57e12b0f63e327451fdc453f1541::coin::T": "WBTC",
    "0xdd89c0e695df0692205912fb69fc290418bed0dbe6e4573d744a6d5e6bab6c13::coin::T": "WAVAX",
    "0x2c7bccf7b31beafd791975b82e3d880fa5aa8b8d2d8d82b4fcc2a1c30823e5ea::coin::T": "WMATIC",
    "0x5c738a5dfa343bee927c39ebe85b0ceb95fdb5ee5b323c95559614f5a77c47ca::coin::T": "WFTM",
    "0x8d87a65ba30e09357fa2edea2c80dbac296e5dec2b18287113500b902942929d::coin::T": "WBNB",
    # DeFi
    "0x159df6b7689437016108a019fd5bef736bac692b6d4a1f10c941f6fbb9a74ca6::oft::CakeOFT": "CAKE",
    "0x8c805723ebc0a7c1658ac894c87940e51051dca92b1217b5d8b15fcc3b36f368::coin::T": "SUSHI",
}

# Matched against the lowercased full identifier. Order matters: first hit wins.
PRIMARY_FRAGMENTS: FragmentTable = (
    ("aptos_coin", "AptosCoin"),
    ("aptoscoin", "AptosCoin"),
    ("usdc", "USDC"),
    ("usdt", "USDT"),
    ("weth", "WETH"),
    ("btc", "BTC"),
    ("eth", "ETH"),
    ("sol", "SOL"),
    ("dai", "DAI"),
    ("wbtc", "WBTC"),
)

# Matched case-sensitively against a long final segment, then lowercased
# against the full identifier when that segment is a bare hex address.
TICKER_FRAGMENTS: FragmentTable = (
    ("USDC", "USDC"),
    ("USDT", "USDT"),
    ("APT", "AptosCoin"),
    ("ETH", "ETH"),
    ("BTC", "BTC"),
    ("SOL", "SOL"),
    ("DAI", "DAI"),
    ("WBTC", "WBTC"),
    ("MATIC", "MATIC"),
    ("AVAX", "AVAX"),
    ("DOT", "DOT"),
    ("LINK", "LINK"),
    ("UNI", "UNI"),
    ("AAVE", "AAVE"),
    ("COMP", "COMP"),
    ("MKR", "MKR"),
    ("SNX", "SNX"),
    ("YFI", "YFI"),
    ("CRV", "CRV"),
    ("SUSHI", "SUSHI"),
    ("1INCH", "1INCH"),
    ("BAL", "BAL"),
    ("LDO", "LDO"),
    ("APE", "APE"),
    ("SHIB", "SHIB"),
    ("DOGE", "DOGE"),
    ("ADA", "ADA"),
    ("XRP", "XRP"),
    ("LTC", "LTC"),
    ("BCH", "BCH"),
    ("EOS", "EOS"),
    ("TRX", "TRX"),
    ("XLM", "XLM"),
    ("VET", "VET"),
    ("FIL", "FIL"),
    ("ATOM", "ATOM"),
    ("NEAR", "NEAR"),
    ("FTM", "FTM"),
    ("ALGO", "ALGO"),
    ("ICP", "ICP"),
    ("FLOW", "FLOW"),
    ("HBAR", "HBAR"),
    ("XTZ", "XTZ"),
    ("EGLD", "EGLD"),
    ("THETA", "THETA"),
    ("ZEC", "ZEC"),
    ("DASH", "DASH"),
    ("NEO", "NEO"),
    ("IOTA", "IOTA"),
    ("ZIL", "ZIL"),
    ("ONT", "ONT"),
    ("QTUM", "QTUM"),
    ("WAVES", "WAVES"),
    ("KSM", "KSM"),
    ("DCR", "DCR"),
    ("BAT", "BAT"),
    ("ZRX", "ZRX"),
    ("REP", "REP"),
    ("KNC", "KNC"),
    ("LRC", "LRC"),
    ("OMG", "OMG"),
    ("STORJ", "STORJ"),
    ("GNT", "GNT"),
    ("FUN", "FUN"),
    ("REQ", "REQ"),
    ("CVC", "CVC"),
    ("TNT", "TNT"),
    ("ADX", "ADX"),
    ("MTL", "MTL"),
    ("DNT", "DNT"),
    ("VIB", "VIB"),
    ("TRST", "TRST"),
    ("POWR", "POWR"),
    ("BNT", "BNT"),
    ("MANA", "MANA"),
    ("SALT", "SALT"),
    ("EDG", "EDG"),
    ("BNB", "BNB"),
    ("CAKE", "CAKE"),
    ("BUSD", "BUSD"),
    ("USDD", "USDD"),
    ("TUSD", "TUSD"),
    ("FRAX", "FRAX"),
    ("LUSD", "LUSD"),
    ("SUSD", "SUSD"),
    ("GUSD", "GUSD"),
    ("PAX", "PAX"),
    ("USDP", "USDP"),
    ("RAI", "RAI"),
    ("FEI", "FEI"),
    ("TRIBE", "TRIBE"),
    ("LQTY", "LQTY"),
    ("CVX", "CVX"),
    ("FXS", "FXS"),
    ("SPELL", "SPELL"),
    ("MIM", "MIM"),
    ("UST", "UST"),
    ("LUNA", "LUNA"),
    ("ANC", "ANC"),
    ("MIR", "MIR"),
    ("ORION", "ORION"),
    ("ORCA", "ORCA"),
    ("RAY", "RAY"),
    ("SRM", "SRM"),
    ("MSOL", "MSOL"),
    ("STSOL", "STSOL"),
)


def match_fragment(text: str, table: FragmentTable, case_sensitive: bool = True) -> Optional[str]:
    """Return the symbol of the first fragment contained in ``text``, or None."""
    for fragment, symbol in table:
        needle = fragment if case_sensitive else fragment.lower()
        if needle in text:
            return symbol
    return None


def parse_token_labels(raw: str) -> Dict[str, str]:
    """
    Parse ``type=SYMBOL`` pairs separated by semicolons.

    Generic type identifiers may contain commas, so pairs are split on ``;``.
    Malformed pairs are skipped.
    """
    labels: Dict[str, str] = {}
    for pair in (raw or "").split(";"):
        if "=" not in pair:
            continue
        type_id, symbol = pair.split("=", 1)
        type_id, symbol = type_id.strip(), symbol.strip()
        if type_id and symbol:
            labels[type_id] = symbol
    return labels


@dataclass(frozen=True)
class TokenRegistry:
    """Immutable resolution tables used by TokenResolver."""
    exact: Mapping[str, str] = field(default_factory=lambda: MappingProxyType(dict(KNOWN_TOKENS)))
    primary_fragments: FragmentTable = PRIMARY_FRAGMENTS
    ticker_fragments: FragmentTable = TICKER_FRAGMENTS

    def __post_init__(self):
        # Freeze whatever mapping/iterables the caller handed in.
        object.__setattr__(self, "exact", MappingProxyType(dict(self.exact)))
        object.__setattr__(self, "primary_fragments", tuple(tuple(p) for p in self.primary_fragments))
        object.__setattr__(self, "ticker_fragments", tuple(tuple(p) for p in self.ticker_fragments))

    def with_overrides(self, labels: Mapping[str, str]) -> "TokenRegistry":
        """Return a copy whose exact-match table also contains ``labels``."""
        if not labels:
            return self
        merged = dict(self.exact)
        merged.update(labels)
        return TokenRegistry(
            exact=merged,
            primary_fragments=self.primary_fragments,
            ticker_fragments=self.ticker_fragments,
        )


DEFAULT_REGISTRY = TokenRegistry()


class TokenResolver:
    """
    Maps an opaque on-chain type identifier to a display symbol.

    Total function: never raises. Results are cached per instance since
    resolution depends only on the identifier and the (immutable) registry.
    """

    def __init__(self, registry: Optional[TokenRegistry] = None):
        self.registry = registry or DEFAULT_REGISTRY
        self._cache: Dict[str, str] = {}

    def resolve(self, type_identifier) -> str:
        if not type_identifier:
            return UNKNOWN_SYMBOL
        if not isinstance(type_identifier, str):
            type_identifier = str(type_identifier)

        cached = self._cache.get(type_identifier)
        if cached is not None:
            return cached

        symbol = self._resolve_uncached(type_identifier)
        self._cache[type_identifier] = symbol
        return symbol

    __call__ = resolve

    def _resolve_uncached(self, type_identifier: str) -> str:
        exact = self.registry.exact.get(type_identifier)
        if exact:
            return exact

        lowered = type_identifier.lower()
        symbol = match_fragment(lowered, self.registry.primary_fragments)
        if symbol:
            return symbol

        last_segment = type_identifier.split("::")[-1] or type_identifier
        if len(last_segment) <= SHORT_SEGMENT_MAX_LENGTH:
            return last_segment

        symbol = match_fragment(last_segment, self.registry.ticker_fragments)
        if symbol:
            return symbol

        if _HEX_ADDRESS.match(last_segment):
            symbol = match_fragment(lowered, self.registry.ticker_fragments, case_sensitive=False)
            return symbol or GENERIC_SYMBOL

        return last_segment


_default_resolver = TokenResolver()


def resolve_token(type_identifier) -> str:
    """Resolve with the default registry."""
    return _default_resolver.resolve(type_identifier)

"""
Tests for amount normalization and float helpers.
"""

import math

import pytest
from hypothesis import given, strategies as st

from swapscout.core.decimal_utils import (
    DEFAULT_DECIMALS,
    AmountNormalizer,
    decimals_for_symbol,
    ieee_divide,
    normalize_amount,
    parse_amount,
)


class TestDecimalsForSymbol:

    @pytest.mark.parametrize("symbol,decimals", [
        ("USDC", 6),
        ("AptosCoin", 8),
        ("APT", 8),
        ("USDT", 6),
        ("WETH", 18),
        ("MOON", DEFAULT_DECIMALS),
        ("", DEFAULT_DECIMALS),
        (None, DEFAULT_DECIMALS),
    ])
    def test_symbol_heuristic(self, symbol, decimals):
        assert decimals_for_symbol(symbol) == decimals

    def test_usdc_checked_before_apt(self):
        assert decimals_for_symbol("aptUSDC") == 6


class TestNormalizeAmount:

    def test_usdc_six_decimals(self):
        assert normalize_amount("1000000", "USDC") == "1.000000"

    def test_apt_eight_decimals(self):
        assert normalize_amount("100000000", "AptosCoin") == "1.00000000"

    def test_weth_keeps_all_eighteen_digits(self):
        assert normalize_amount("1", "WETH") == "0.000000000000000001"

    def test_numeric_input(self):
        assert normalize_amount(123456789, "MOON") == "1.23456789"

    def test_large_u64_amount_is_exact(self):
        assert normalize_amount("18446744073709551615", "AptosCoin") == "184467440737.09551615"

    @pytest.mark.parametrize("raw", ["abc", "N/A", "", "NaN", "Infinity", "-", "."])
    def test_unparseable_returned_unchanged(self, raw):
        assert normalize_amount(raw, "USDC") == raw

    @pytest.mark.parametrize("raw, symbol, expected", [
        ("12abc", "MOON", "0.00000012"),
        ("0x1f", "MOON", "0.00000000"),
        ("1.5e8xyz", "AptosCoin", "1.50000000"),
        ("  2500000 units", "USDC", "2.500000"),
    ])
    def test_leading_numeric_part_is_scaled(self, raw, symbol, expected):
        assert normalize_amount(raw, symbol) == expected

    def test_callable_wrapper(self):
        normalizer = AmountNormalizer()
        assert normalizer("1000000", "USDT") == "1.000000"
        assert normalizer.normalize("x", "USDT") == "x"

    @given(st.integers(min_value=0, max_value=2 ** 128))
    def test_integer_amounts_scale_exactly(self, raw):
        result = normalize_amount(str(raw), "USDC")
        whole, frac = result.split(".")
        assert len(frac) == 6
        assert int(whole + frac) == raw

    @given(st.text(alphabet="abcdefghijklmnopqrstuvwxyz/ -", max_size=20))
    def test_never_raises_on_garbage(self, raw):
        result = normalize_amount(raw, "AptosCoin")
        assert result == raw or result.count(".") == 1


class TestParseAmount:

    @pytest.mark.parametrize("value,expected", [
        ("1.5", 1.5),
        ("10.00000000", 10.0),
        (3, 3.0),
        ("N/A", 0.0),
        ("", 0.0),
        (None, 0.0),
        ("nan", 0.0),
        ([1], 0.0),
    ])
    def test_parse(self, value, expected):
        assert parse_amount(value) == expected

    def test_infinity_is_kept(self):
        assert parse_amount("inf") == math.inf


class TestIeeeDivide:

    def test_regular_division(self):
        assert ieee_divide(6.0, 3.0) == 2.0

    def test_signed_infinity(self):
        assert ieee_divide(1.0, 0.0) == math.inf
        assert ieee_divide(-1.0, 0.0) == -math.inf
        assert ieee_divide(1.0, -0.0) == -math.inf

    def test_zero_over_zero_is_nan(self):
        assert math.isnan(ieee_divide(0.0, 0.0))
        assert math.isnan(ieee_divide(math.nan, 0.0))

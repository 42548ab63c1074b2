"""
Tests for the raw-feed -> swap history pipeline.
"""

from unittest.mock import MagicMock

import pytest

from swapscout.core.models import NOT_AVAILABLE, TradeAction
from swapscout.core.pipeline import TransactionPipeline, format_timestamp

from .conftest import APT_TYPE, MOON_TYPE, ROUTER_SWAP, make_raw_tx


class TestFormatTimestamp:

    def test_microseconds_rendered_in_utc(self):
        assert format_timestamp("1700000000000000") == "2023-11-14 22:13:20"
        assert format_timestamp(1700000000000000) == "2023-11-14 22:13:20"

    @pytest.mark.parametrize("raw", [None, "", "yesterday", [1]])
    def test_unusable_timestamp(self, raw):
        assert format_timestamp(raw) == NOT_AVAILABLE


class TestTransactionPipeline:

    @pytest.fixture
    def pipeline(self):
        return TransactionPipeline()

    def test_filters_and_reverses(self, pipeline, raw_feed):
        swaps = pipeline.build_swap_history(raw_feed)
        assert [s.hash for s in swaps] == ["0xsell", "0xbuy"]
        assert [s.action for s in swaps] == [TradeAction.SELL, TradeAction.BUY]

    def test_output_length_is_number_of_complete_swaps(self, pipeline):
        raw = []
        for i in range(7):
            if i % 3 == 0:
                raw.append(make_raw_tx(tx_hash=f"0xt{i}", function="0x1::aptos_account::transfer"))
            else:
                raw.append(make_raw_tx(
                    tx_hash=f"0xs{i}",
                    type_arguments=[APT_TYPE, MOON_TYPE],
                    arguments=[str(100000000 * i), "1"],
                ))
        swaps = pipeline.build_swap_history(raw)
        assert [s.hash for s in swaps] == ["0xs5", "0xs4", "0xs2", "0xs1"]

    def test_record_fields(self, pipeline, buy_moon_tx):
        (swap,) = pipeline.build_swap_history([buy_moon_tx])
        assert swap.hash == "0xbuy"
        assert swap.timestamp == "2023-11-14 22:13:20"
        assert swap.from_token == "AptosCoin"
        assert swap.to_token == "MOON"
        assert swap.from_amount == "10.00000000"
        assert swap.to_amount == "5.00000000"
        assert swap.contract == ROUTER_SWAP
        assert swap.subject_token == "MOON"

    def test_incomplete_candidates_dropped(self, pipeline, buy_moon_tx):
        incomplete = make_raw_tx(tx_hash="0xhalf", type_arguments=[APT_TYPE], arguments=["1", "2"])
        swaps = pipeline.build_swap_history([buy_moon_tx, incomplete])
        assert [s.hash for s in swaps] == ["0xbuy"]

    def test_struct_token_field_dropped(self, pipeline, buy_moon_tx):
        wrapped = make_raw_tx(tx_hash="0xwrapped", events=[{"type": "0xdex::swap::SwapEvent", "data": {
            "from_token": {"inner": "0x" + "ab" * 32}, "to_token": APT_TYPE,
            "from_amount": "100", "to_amount": "200"}}])
        assert pipeline.build_swap_history([wrapped]) == []
        assert [s.hash for s in pipeline.build_swap_history([buy_moon_tx, wrapped])] == ["0xbuy"]

    def test_missing_hash_dropped(self, pipeline):
        tx = make_raw_tx(tx_hash=None, type_arguments=[APT_TYPE, MOON_TYPE], arguments=["1", "2"])
        assert pipeline.build_swap_history([tx]) == []

    def test_missing_timestamp_kept(self, pipeline):
        tx = make_raw_tx(tx_hash="0xnots", timestamp=None, type_arguments=[APT_TYPE, MOON_TYPE], arguments=["1", "2"])
        (swap,) = pipeline.build_swap_history([tx])
        assert swap.timestamp == NOT_AVAILABLE

    def test_empty_and_none_input(self, pipeline):
        assert pipeline.build_swap_history([]) == []
        assert pipeline.build_swap_history(None) == []

    def test_metrics_recorded(self, buy_moon_tx, sell_moon_tx):
        metrics = MagicMock()
        pipeline = TransactionPipeline(metrics=metrics)
        incomplete = make_raw_tx(tx_hash="0xhalf", arguments=["1", "2"])
        pipeline.build_swap_history([buy_moon_tx, incomplete, sell_moon_tx])
        metrics.record_swaps.assert_called_once_with(extracted=2, dropped=1)

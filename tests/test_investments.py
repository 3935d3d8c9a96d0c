"""Tests for investment tracking."""

import logging
import math
from datetime import date

import pytest

from ratechart.exceptions import DataSourceError, InputError
from ratechart.investments import (LEDGER_COLUMNS, InvestmentTracker,
                                   compute_investment, format_profit,
                                   format_record, profit_percent, recommend)
from ratechart.types import Recommendation


class FakeCryptoSource:
    """Crypto source stand-in with fixed prices."""

    def __init__(self, spot: float, closes: dict[date, float] | None = None) -> None:
        self.spot = spot
        self.closes = closes or {}
        self.spot_calls: list[str] = []

    async def fetch_spot_price(self, asset: str) -> float:
        self.spot_calls.append(asset)
        return self.spot

    async def fetch_daily_close(self, asset: str, day: date) -> float | None:
        return self.closes.get(day)


class TestRecommend:
    """Tests for recommendation thresholds."""

    @pytest.mark.parametrize(
        ("percent", "expected"),
        [
            (50.0, Recommendation.SELL),
            (20.01, Recommendation.SELL),
            (20.0, Recommendation.HOLD),
            (0.0, Recommendation.HOLD),
            (-10.0, Recommendation.HOLD),
            (-10.01, Recommendation.BUY_MORE),
            (math.nan, Recommendation.HOLD),
            (math.inf, Recommendation.SELL),
            (-math.inf, Recommendation.BUY_MORE),
        ],
    )
    def test_thresholds(self, percent: float, expected: Recommendation) -> None:
        assert recommend(percent) is expected


class TestProfitPercent:
    """Tests for profit_percent."""

    def test_regular(self) -> None:
        assert profit_percent(100.0, 200.0) == 50.0

    def test_zero_buy_value_and_zero_profit_is_nan(self) -> None:
        assert math.isnan(profit_percent(0.0, 0.0))

    def test_zero_buy_value_with_profit_is_signed_infinity(self) -> None:
        assert profit_percent(5.0, 0.0) == math.inf
        assert profit_percent(-5.0, 0.0) == -math.inf


class TestComputeInvestment:
    """Tests for compute_investment."""

    def test_profitable_purchase(self) -> None:
        record = compute_investment("bitcoin", date(2024, 1, 1), 2, 100.0, 150.0)

        assert record.buy_value == 200.0
        assert record.current_value == 300.0
        assert record.profit == 100.0
        assert record.profit_percent == "50.00"
        assert record.recommendation is Recommendation.SELL

    def test_loss_recommends_buy_more(self) -> None:
        record = compute_investment("ethereum", date(2024, 1, 1), 1, 100.0, 85.0)

        assert record.profit_percent == "-15.00"
        assert record.recommendation is Recommendation.BUY_MORE

    def test_recommendation_uses_rounded_percent(self) -> None:
        """20.004% displays as 20.00 and is therefore a Hold."""
        record = compute_investment("bitcoin", date(2024, 1, 1), 1, 100000.0, 120004.0)

        assert record.profit_percent == "20.00"
        assert record.recommendation is Recommendation.HOLD

    def test_zero_buy_price_does_not_crash(self) -> None:
        record = compute_investment("dogecoin", date(2024, 1, 1), 10, 0.0, 0.1)

        assert record.profit_percent == "inf"
        assert record.recommendation is Recommendation.SELL


def test_format_record_matches_columns() -> None:
    record = compute_investment("bitcoin", date(2024, 1, 1), 2, 1000.0, 1500.0)

    cells = format_record(record)

    assert len(cells) == len(LEDGER_COLUMNS)
    assert cells == [
        "bitcoin",
        "2024-01-01",
        "2",
        "$1,500.00",
        "$3,000.00",
        "+1000.00 USD (50.00%)",
        "Sell",
    ]


def test_format_profit_negative() -> None:
    record = compute_investment("bitcoin", date(2024, 1, 1), 1, 100.0, 95.0)
    assert format_profit(record) == "-5.00 USD (-5.00%)"


class TestInvestmentTracker:
    """Tests for InvestmentTracker."""

    async def test_record_purchase_appends_to_ledger(self) -> None:
        source = FakeCryptoSource(spot=150.0, closes={date(2024, 1, 1): 100.0})
        tracker = InvestmentTracker(source)

        record = await tracker.record_purchase("bitcoin", date(2024, 1, 1), 2)

        assert record.buy_price == 100.0
        assert record.current_price == 150.0
        assert record.recommendation is Recommendation.SELL
        assert record.used_fallback_price is False
        assert tracker.ledger == (record,)

    async def test_missing_candle_falls_back_to_current_price(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Without a purchase-day candle the profit is zero and a warning is logged."""
        tracker = InvestmentTracker(FakeCryptoSource(spot=150.0))

        with caplog.at_level(logging.WARNING, logger="ratechart.investments"):
            record = await tracker.record_purchase("bitcoin", date(2030, 1, 1), 2)

        assert record.buy_price == 150.0
        assert record.profit == 0.0
        assert record.profit_percent == "0.00"
        assert record.recommendation is Recommendation.HOLD
        assert record.used_fallback_price is True
        assert "No candle" in caplog.text

    async def test_ledger_is_append_only(self) -> None:
        source = FakeCryptoSource(spot=100.0, closes={date(2024, 1, 1): 100.0})
        tracker = InvestmentTracker(source)

        first = await tracker.record_purchase("bitcoin", date(2024, 1, 1), 1)
        source.spot = 200.0
        second = await tracker.record_purchase("bitcoin", date(2024, 1, 1), 1)

        assert tracker.ledger == (first, second)
        assert first.recommendation is Recommendation.HOLD
        assert second.recommendation is Recommendation.SELL

    @pytest.mark.parametrize(
        ("asset", "purchase_date", "quantity"),
        [
            ("", date(2024, 1, 1), 1.0),
            ("bitcoin", None, 1.0),
            ("bitcoin", date(2024, 1, 1), None),
            ("bitcoin", date(2024, 1, 1), 0),
            ("bitcoin", date(2024, 1, 1), -1.0),
            ("bitcoin", date(2024, 1, 1), math.nan),
        ],
    )
    async def test_invalid_input_rejected(self, asset, purchase_date, quantity) -> None:
        source = FakeCryptoSource(spot=100.0)
        tracker = InvestmentTracker(source)

        with pytest.raises(InputError):
            await tracker.record_purchase(asset, purchase_date, quantity)

        assert tracker.ledger == ()
        assert source.spot_calls == []

    async def test_unsupported_asset_rejected(self) -> None:
        tracker = InvestmentTracker(FakeCryptoSource(spot=100.0))

        with pytest.raises(InputError, match="Unsupported"):
            await tracker.record_purchase("EUR", date(2024, 1, 1), 1.0)

    async def test_source_failure_leaves_ledger_empty(self) -> None:
        class FailingSource(FakeCryptoSource):
            async def fetch_spot_price(self, asset: str) -> float:
                raise DataSourceError("exchange unavailable")

        tracker = InvestmentTracker(FailingSource(spot=0.0))

        with pytest.raises(DataSourceError):
            await tracker.record_purchase("bitcoin", date(2024, 1, 1), 1.0)

        assert tracker.ledger == ()

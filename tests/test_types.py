"""Tests for core type definitions."""

from datetime import date, datetime, timezone

import pytest
from pydantic import ValidationError

from ratechart.types import (AxisPolicy, Candle, ChartDataset, ChartRequest,
                             ChartSpec, CompareConfig, ContainerId, DateRange,
                             DownsampledSeries, InvestmentRecord,
                             Recommendation, SourceSettings)

# ---------------------------------------------------------------------------
# Date Range
# ---------------------------------------------------------------------------


def test_date_range_accepts_single_day() -> None:
    """A range whose start equals its end is valid."""
    dr = DateRange(start=date(2024, 1, 1), end=date(2024, 1, 1))
    assert dr.start == dr.end


def test_date_range_rejects_reversed_bounds() -> None:
    """start after end should fail validation."""
    with pytest.raises(ValidationError, match="after end"):
        DateRange(start=date(2024, 2, 1), end=date(2024, 1, 1))


def test_date_range_is_frozen() -> None:
    """Models are immutable."""
    dr = DateRange(start=date(2024, 1, 1), end=date(2024, 1, 2))
    with pytest.raises(ValidationError):
        dr.start = date(2023, 1, 1)  # type: ignore[misc]


# ---------------------------------------------------------------------------
# Market Data
# ---------------------------------------------------------------------------


def test_candle_creation_and_attributes() -> None:
    """Candle should store all OHLCV fields correctly."""
    ts = datetime(2024, 1, 1, tzinfo=timezone.utc)
    candle = Candle(open_time=ts, open=1.0, high=2.0, low=0.5, close=1.5, volume=1234.0)

    assert candle.open_time == ts
    assert candle.close == 1.5
    assert candle.volume == 1234.0


def test_downsampled_series_requires_equal_lengths() -> None:
    """Labels and values must be parallel."""
    with pytest.raises(ValidationError, match="equal length"):
        DownsampledSeries(labels=["2024-01-01"], values=[])


def test_downsampled_series_len() -> None:
    """len() reports the number of points."""
    series = DownsampledSeries(labels=["2024-01-01", "2024-01-02"], values=[1.0, None])
    assert len(series) == 2


# ---------------------------------------------------------------------------
# Chart Types
# ---------------------------------------------------------------------------


@pytest.fixture
def date_range() -> DateRange:
    return DateRange(start=date(2024, 1, 1), end=date(2024, 1, 31))


class TestChartRequest:
    """Tests for ChartRequest validation."""

    def test_defaults(self, date_range: DateRange) -> None:
        """Container, max points and axis policy have defaults."""
        request = ChartRequest(
            base="USD", targets=["EUR"], colors=["red"], date_range=date_range
        )

        assert request.container == ContainerId("chart-1")
        assert request.max_points == 20
        assert request.axis_policy is AxisPolicy.UNION

    def test_rejects_empty_targets(self, date_range: DateRange) -> None:
        """At least one target is required."""
        with pytest.raises(ValidationError, match="at least one target"):
            ChartRequest(base="USD", targets=[], colors=[], date_range=date_range)

    def test_rejects_color_count_mismatch(self, date_range: DateRange) -> None:
        """There must be exactly one color per target."""
        with pytest.raises(ValidationError, match="expected 2 colors"):
            ChartRequest(
                base="USD",
                targets=["EUR", "bitcoin"],
                colors=["red"],
                date_range=date_range,
            )

    def test_rejects_non_positive_max_points(self, date_range: DateRange) -> None:
        """max_points must be at least 1."""
        with pytest.raises(ValidationError):
            ChartRequest(
                base="USD",
                targets=["EUR"],
                colors=["red"],
                date_range=date_range,
                max_points=0,
            )

    def test_axis_policy_from_string(self, date_range: DateRange) -> None:
        """Axis policy accepts its string value."""
        request = ChartRequest(
            base="USD",
            targets=["EUR"],
            colors=["red"],
            date_range=date_range,
            axis_policy="first-series",
        )
        assert request.axis_policy is AxisPolicy.FIRST_SERIES


def test_chart_spec_defaults() -> None:
    """ChartSpec defaults to an empty union chart."""
    spec = ChartSpec(title="USD → EUR")
    assert spec.labels == []
    assert spec.datasets == []
    assert spec.axis_policy is AxisPolicy.UNION


def test_chart_dataset_render_type_defaults_to_line() -> None:
    dataset = ChartDataset(name="USD/EUR", color="red", values=[1.0, None])
    assert dataset.render_type == "line"


# ---------------------------------------------------------------------------
# Investments and Configuration
# ---------------------------------------------------------------------------


def test_recommendation_values() -> None:
    """Recommendation values are the displayed labels."""
    assert Recommendation.SELL.value == "Sell"
    assert Recommendation.HOLD.value == "Hold"
    assert Recommendation.BUY_MORE.value == "Buy More"


def test_investment_record_fallback_flag_defaults_false() -> None:
    record = InvestmentRecord(
        asset="bitcoin",
        purchase_date=date(2024, 1, 1),
        quantity=1.0,
        buy_price=100.0,
        current_price=100.0,
        buy_value=100.0,
        current_value=100.0,
        profit=0.0,
        profit_percent="0.00",
        recommendation=Recommendation.HOLD,
    )
    assert record.used_fallback_price is False


class TestSourceSettings:
    """Tests for SourceSettings."""

    def test_defaults(self) -> None:
        settings = SourceSettings()

        assert settings.crypto_base_url == "https://api.binance.com"
        assert settings.fiat_base_url == "https://api.frankfurter.app"
        assert settings.candle_limit == 1000
        assert settings.spot_quote == "USDT"

    def test_candle_limit_capped_at_exchange_maximum(self) -> None:
        with pytest.raises(ValidationError):
            SourceSettings(candle_limit=1001)

    def test_timeout_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            SourceSettings(timeout=0)


def test_compare_config_default_sources(date_range: DateRange) -> None:
    """CompareConfig fills in default source settings."""
    config = CompareConfig(
        request=ChartRequest(
            base="USD", targets=["EUR"], colors=["red"], date_range=date_range
        )
    )
    assert config.output is None
    assert config.sources == SourceSettings()

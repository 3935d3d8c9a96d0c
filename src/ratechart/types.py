"""Core type definitions for the rate chart system.

All data models use Pydantic BaseModel for automatic validation, JSON
serialization, and better error messages.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import NewType

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Type aliases for domain-specific identifiers
AssetId = NewType("AssetId", str)
ContainerId = NewType("ContainerId", str)

# Raw per-date payload: {"2024-01-01": {"BTC": 42000.0}}
RateTable = dict[str, dict[str, float]]

# Canonical per-asset series: {"2024-01-01": 42000.0}
CanonicalSeries = dict[str, float]


# ---------------------------------------------------------------------------
# Base Configuration
# ---------------------------------------------------------------------------


class FrozenModel(BaseModel):
    """Base model with frozen (immutable) configuration."""

    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# Date/Time Types
# ---------------------------------------------------------------------------


class DateRange(FrozenModel):
    """Calendar date range, inclusive on both ends.

    The same range is sent verbatim to the crypto and the fiat source.

    :param start: First calendar day (inclusive).
    :param end: Last calendar day (inclusive).
    """

    start: date
    end: date

    @model_validator(mode="after")
    def _check_order(self) -> DateRange:
        if self.start > self.end:
            raise ValueError(
                f"start {self.start.isoformat()} is after end {self.end.isoformat()}"
            )
        return self


# ---------------------------------------------------------------------------
# Market Data Types
# ---------------------------------------------------------------------------


class Candle(FrozenModel):
    """Daily candle (kline) returned by the crypto exchange.

    :param open_time: Candle open time (timezone-aware, UTC).
    :param open: Opening price.
    :param high: Highest price during the day.
    :param low: Lowest price during the day.
    :param close: Closing price.
    :param volume: Traded volume during the day.
    """

    open_time: datetime
    open: float
    high: float
    low: float
    close: float
    volume: float


class DownsampledSeries(FrozenModel):
    """Parallel label/value sequences ready for a chart renderer.

    :param labels: ISO dates in ascending order.
    :param values: Value per label, or None where the source had no data.
    """

    labels: list[str] = Field(default_factory=list)
    values: list[float | None] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_lengths(self) -> DownsampledSeries:
        if len(self.labels) != len(self.values):
            raise ValueError(
                f"labels ({len(self.labels)}) and values ({len(self.values)}) "
                "must have equal length"
            )
        return self

    def __len__(self) -> int:
        return len(self.labels)


# ---------------------------------------------------------------------------
# Chart Types
# ---------------------------------------------------------------------------


class AxisPolicy(str, Enum):
    """How the shared label axis of a multi-series chart is chosen."""

    FIRST_SERIES = "first-series"
    UNION = "union"


class ChartDataset(FrozenModel):
    """One named series of a chart.

    :param name: Legend name, e.g. ``"USD/EUR"``.
    :param color: Display color understood by the renderer.
    :param values: Values aligned index-wise with the chart labels.
    :param render_type: Render type of the dataset.
    """

    name: str
    color: str
    values: list[float | None] = Field(default_factory=list)
    render_type: str = "line"


class ChartSpec(FrozenModel):
    """Everything a renderer needs to draw one chart.

    :param title: Chart title.
    :param labels: Shared label axis.
    :param datasets: Datasets in caller-supplied target order.
    :param axis_policy: Policy that produced ``labels``.
    """

    title: str
    labels: list[str] = Field(default_factory=list)
    datasets: list[ChartDataset] = Field(default_factory=list)
    axis_policy: AxisPolicy = AxisPolicy.UNION


class ChartRequest(FrozenModel):
    """Request to build one multi-series chart.

    :param base: Denominating currency or asset.
    :param targets: Compared currencies/assets, in display order.
    :param colors: One color per target.
    :param date_range: Range queried for every target.
    :param container: Identifier of the container the chart is bound to.
    :param max_points: Upper bound on plotted points per series.
    :param axis_policy: Label axis policy.
    """

    base: str
    targets: list[str]
    colors: list[str]
    date_range: DateRange
    container: ContainerId = ContainerId("chart-1")
    max_points: int = Field(default=20, ge=1)
    axis_policy: AxisPolicy = AxisPolicy.UNION

    @model_validator(mode="after")
    def _check_targets(self) -> ChartRequest:
        if not self.targets:
            raise ValueError("at least one target is required")
        if len(self.colors) != len(self.targets):
            raise ValueError(
                f"expected {len(self.targets)} colors, got {len(self.colors)}"
            )
        return self


# ---------------------------------------------------------------------------
# Investment Types
# ---------------------------------------------------------------------------


class Recommendation(str, Enum):
    """Action suggested for a tracked investment."""

    SELL = "Sell"
    HOLD = "Hold"
    BUY_MORE = "Buy More"


class InvestmentRecord(FrozenModel):
    """One row of the investment ledger.

    :param asset: Crypto asset identifier (e.g. ``"bitcoin"``).
    :param purchase_date: Day of purchase.
    :param quantity: Units purchased.
    :param buy_price: Close price on the purchase day (or fallback price).
    :param current_price: Latest spot price.
    :param buy_value: ``quantity * buy_price``.
    :param current_value: ``quantity * current_price``.
    :param profit: ``current_value - buy_value``.
    :param profit_percent: Profit over buy value in percent, two decimals.
    :param recommendation: Suggested action.
    :param used_fallback_price: True when no candle existed for the purchase
        day and the current price was used as buy price.
    """

    asset: AssetId
    purchase_date: date
    quantity: float
    buy_price: float
    current_price: float
    buy_value: float
    current_value: float
    profit: float
    profit_percent: str
    recommendation: Recommendation
    used_fallback_price: bool = False


# ---------------------------------------------------------------------------
# Configuration Types
# ---------------------------------------------------------------------------


class SourceSettings(FrozenModel):
    """Endpoints and limits for the external sources.

    :param crypto_base_url: Base URL of the crypto exchange REST API.
    :param fiat_base_url: Base URL of the fiat exchange-rate API.
    :param timeout: Request timeout in seconds.
    :param candle_limit: Maximum candles per kline request (exchange cap 1000).
    :param spot_quote: Quote asset used for spot and purchase-day prices.
    """

    crypto_base_url: str = "https://api.binance.com"
    fiat_base_url: str = "https://api.frankfurter.app"
    timeout: float = Field(default=30.0, gt=0)
    candle_limit: int = Field(default=1000, ge=1, le=1000)
    spot_quote: str = "USDT"


class CompareConfig(FrozenModel):
    """Configuration for one ``compare`` run.

    :param request: Chart request built from the configuration.
    :param output: Optional PNG path the chart is exported to.
    :param sources: Source endpoints and limits.
    """

    request: ChartRequest
    output: str | None = None
    sources: SourceSettings = Field(default_factory=SourceSettings)


# ---------------------------------------------------------------------------
# Exports
# ---------------------------------------------------------------------------

__all__ = [
    # Type aliases
    "AssetId",
    "ContainerId",
    "RateTable",
    "CanonicalSeries",
    # Base models
    "FrozenModel",
    # Date/Time
    "DateRange",
    # Market data
    "Candle",
    "DownsampledSeries",
    # Charts
    "AxisPolicy",
    "ChartDataset",
    "ChartSpec",
    "ChartRequest",
    # Investments
    "Recommendation",
    "InvestmentRecord",
    # Configuration
    "SourceSettings",
    "CompareConfig",
]

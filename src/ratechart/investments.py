"""Buy-and-hold investment tracking for crypto assets.

Each recorded purchase is priced against the close of its purchase day and
the latest spot price, and appended to an in-memory ledger. Records are
immutable; earlier rows are never recomputed.
"""

from __future__ import annotations

import logging
import math
from datetime import date

from ratechart.data.sources import CryptoSeriesSource
from ratechart.exceptions import InputError
from ratechart.symbols import is_crypto
from ratechart.types import AssetId, InvestmentRecord, Recommendation

logger = logging.getLogger(__name__)

# Thresholds on the profit percentage
SELL_ABOVE = 20.0
BUY_MORE_BELOW = -10.0

LEDGER_COLUMNS = [
    "Asset",
    "Date",
    "Quantity",
    "Current Price",
    "Current Value",
    "Profit",
    "Recommendation",
]


def profit_percent(profit: float, buy_value: float) -> float:
    """Return ``profit / buy_value * 100``.

    A zero buy value does not raise: the result is NaN when the profit is
    zero as well, otherwise an infinity carrying the sign of the profit.
    """
    if buy_value == 0:
        if profit == 0:
            return math.nan
        return math.copysign(math.inf, profit)
    return profit / buy_value * 100


def recommend(percent: float) -> Recommendation:
    """Map a profit percentage to a recommendation.

    Above 20% is Sell, below -10% is Buy More, anything else (including NaN)
    is Hold.
    """
    if percent > SELL_ABOVE:
        return Recommendation.SELL
    if percent < BUY_MORE_BELOW:
        return Recommendation.BUY_MORE
    return Recommendation.HOLD


def compute_investment(
    asset: str,
    purchase_date: date,
    quantity: float,
    buy_price: float,
    current_price: float,
    used_fallback_price: bool = False,
) -> InvestmentRecord:
    """Compute the ledger record of one purchase.

    The recommendation is taken from the percentage as displayed, rounded to
    two decimals.

    :param asset: Crypto asset identifier.
    :param purchase_date: Day of purchase.
    :param quantity: Units purchased.
    :param buy_price: Price per unit at purchase.
    :param current_price: Current price per unit.
    :param used_fallback_price: Whether ``buy_price`` is the fallback price.
    :returns: Immutable investment record.
    """
    buy_value = quantity * buy_price
    current_value = quantity * current_price
    profit = current_value - buy_value
    percent = f"{profit_percent(profit, buy_value):.2f}"

    return InvestmentRecord(
        asset=AssetId(asset),
        purchase_date=purchase_date,
        quantity=quantity,
        buy_price=buy_price,
        current_price=current_price,
        buy_value=buy_value,
        current_value=current_value,
        profit=profit,
        profit_percent=percent,
        recommendation=recommend(float(percent)),
        used_fallback_price=used_fallback_price,
    )


def format_profit(record: InvestmentRecord) -> str:
    """Format the profit cell, e.g. ``"+100.00 USD (50.00%)"``."""
    sign = "+" if record.profit >= 0 else ""
    return f"{sign}{record.profit:.2f} USD ({record.profit_percent}%)"


def format_record(record: InvestmentRecord) -> list[str]:
    """Format one record as ledger cells matching :data:`LEDGER_COLUMNS`."""
    return [
        record.asset,
        record.purchase_date.isoformat(),
        f"{record.quantity:g}",
        f"${record.current_price:,.2f}",
        f"${record.current_value:,.2f}",
        format_profit(record),
        record.recommendation.value,
    ]


class InvestmentTracker:
    """Records purchases and keeps an append-only ledger.

    :param source: Crypto source used for spot and purchase-day prices.
    """

    def __init__(self, source: CryptoSeriesSource) -> None:
        self.source = source
        self._ledger: list[InvestmentRecord] = []

    @property
    def ledger(self) -> tuple[InvestmentRecord, ...]:
        """Recorded purchases, oldest first."""
        return tuple(self._ledger)

    async def record_purchase(
        self,
        asset: str,
        purchase_date: date | None,
        quantity: float | None,
    ) -> InvestmentRecord:
        """Price a purchase and append it to the ledger.

        If the exchange has no candle for the purchase day, the current price
        is used as buy price and the profit comes out as zero.

        :param asset: Crypto asset identifier.
        :param purchase_date: Day of purchase.
        :param quantity: Units purchased.
        :returns: The appended record.
        :raises InputError: If a field is missing or the asset is not supported.
        """
        if not asset or purchase_date is None or not quantity:
            raise InputError("Asset, purchase date and quantity are required")
        if not math.isfinite(quantity) or quantity < 0:
            raise InputError(f"Quantity must be a positive number, got {quantity}")
        if not is_crypto(asset):
            raise InputError(f"Unsupported crypto asset: '{asset}'")

        current_price = await self.source.fetch_spot_price(asset)
        buy_price = await self.source.fetch_daily_close(asset, purchase_date)

        used_fallback = buy_price is None
        if buy_price is None:
            logger.warning(
                "No candle for %s on %s; using current price %.8g as buy price",
                asset,
                purchase_date.isoformat(),
                current_price,
            )
            buy_price = current_price

        record = compute_investment(
            asset,
            purchase_date,
            quantity,
            buy_price,
            current_price,
            used_fallback_price=used_fallback,
        )
        self._ledger.append(record)
        return record


__all__ = [
    "SELL_ABOVE",
    "BUY_MORE_BELOW",
    "LEDGER_COLUMNS",
    "profit_percent",
    "recommend",
    "compute_investment",
    "format_profit",
    "format_record",
    "InvestmentTracker",
]

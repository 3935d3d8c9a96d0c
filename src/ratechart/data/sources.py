"""Source adapters for fetching daily price and exchange-rate series.

This module provides an abstract interface for series sources and concrete
implementations for the crypto exchange (Binance klines) and the fiat
exchange-rate service (Frankfurter). Both produce a
:data:`~ratechart.types.RateTable`.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import date
from typing import Any

import httpx

from ratechart.data.normalize import (
    candles_to_rates,
    parse_kline,
    parse_price,
    to_epoch_ms,
    validate_rate_table,
)
from ratechart.exceptions import DataSourceError, DataValidationError
from ratechart.symbols import is_crypto, resolve_symbol
from ratechart.types import Candle, DateRange, RateTable, SourceSettings

logger = logging.getLogger(__name__)

DAY_MS = 24 * 60 * 60 * 1000


class SeriesSource(ABC):
    """Abstract base class for series sources.

    Sources own an ``httpx.AsyncClient``; pass ``client`` to share or stub one.
    Instances are async context managers and close an owned client on exit.

    :param settings: Endpoint and limit configuration.
    :param client: Optional pre-built HTTP client.
    """

    def __init__(
        self,
        settings: SourceSettings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.settings = settings or SourceSettings()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.settings.timeout,
            follow_redirects=True,
        )

    @property
    @abstractmethod
    def base_url(self) -> str:
        """Base URL of the remote API."""
        ...

    @abstractmethod
    async def fetch_series(
        self,
        base: str,
        target: str,
        date_range: DateRange,
    ) -> RateTable:
        """Fetch a daily series of ``target`` priced in ``base``.

        :param base: Denominating currency or asset.
        :param target: Asset or currency whose price is fetched.
        :param date_range: Inclusive calendar range.
        :returns: Rate table ``date -> {key: value}``.
        :raises DataSourceError: If the request fails.
        :raises DataValidationError: If the payload is malformed.
        """
        ...

    async def _get_json(self, path: str, params: dict[str, Any]) -> Any:
        try:
            response = await self._client.get(path, params=params)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise DataSourceError(f"Request to {path} failed: {e}") from e

        try:
            return response.json()
        except ValueError as e:
            raise DataValidationError(f"Invalid JSON from {path}: {e}") from e

    async def aclose(self) -> None:
        """Close the HTTP client if this source created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> SeriesSource:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


class CryptoSeriesSource(SeriesSource):
    """Daily crypto prices from the Binance kline API.

    A single kline request returns at most ``settings.candle_limit`` (1000)
    daily candles, roughly 2.7 years. Longer ranges are truncated to the
    window the exchange returns; no pagination is attempted.
    """

    KLINES_PATH = "/api/v3/klines"
    TICKER_PATH = "/api/v3/ticker/price"
    INTERVAL = "1d"

    @property
    def base_url(self) -> str:
        return self.settings.crypto_base_url

    async def fetch_candles(
        self,
        pair: str,
        start_ms: int,
        end_ms: int,
        limit: int | None = None,
    ) -> list[Candle]:
        """Fetch daily candles for a trading pair.

        :param pair: Exchange trading pair, e.g. ``"BTCUSDT"``.
        :param start_ms: Range start in epoch milliseconds.
        :param end_ms: Range end in epoch milliseconds.
        :param limit: Candle cap, defaults to ``settings.candle_limit``.
        :returns: Candles in exchange order.
        """
        limit = limit or self.settings.candle_limit
        payload = await self._get_json(
            self.KLINES_PATH,
            {
                "symbol": pair,
                "interval": self.INTERVAL,
                "startTime": start_ms,
                "endTime": end_ms,
                "limit": limit,
            },
        )
        if not isinstance(payload, list):
            raise DataValidationError(f"Expected a list of klines for {pair}, got {payload!r}")

        candles = [parse_kline(record) for record in payload]
        if len(candles) >= limit > 1:
            logger.warning(
                "Kline response for %s hit the %d candle cap; range is truncated",
                pair,
                limit,
            )
        return candles

    async def fetch_series(
        self,
        base: str,
        target: str,
        date_range: DateRange,
    ) -> RateTable:
        """Fetch daily closes of crypto ``target`` quoted in ``base``.

        :param base: Quote currency (e.g. ``"USD"``).
        :param target: Crypto asset identifier (e.g. ``"bitcoin"``).
        :param date_range: Inclusive calendar range.
        :returns: Rate table ``date -> {symbol: close}``.
        """
        symbol = resolve_symbol(target)
        pair = f"{symbol}{resolve_symbol(base)}"
        logger.debug("Fetching klines for %s from %s to %s", pair, date_range.start, date_range.end)

        candles = await self.fetch_candles(
            pair,
            to_epoch_ms(date_range.start),
            to_epoch_ms(date_range.end),
        )
        return candles_to_rates(candles, symbol)

    async def fetch_spot_price(self, asset: str) -> float:
        """Fetch the latest price of ``asset`` in the spot quote asset.

        :param asset: Crypto asset identifier.
        :returns: Latest price.
        """
        pair = f"{resolve_symbol(asset)}{self.settings.spot_quote}"
        payload = await self._get_json(self.TICKER_PATH, {"symbol": pair})
        if not isinstance(payload, dict) or "price" not in payload:
            raise DataValidationError(f"Missing price in ticker response for {pair}: {payload!r}")
        return parse_price(payload["price"], f"{pair} price")

    async def fetch_daily_close(self, asset: str, day: date) -> float | None:
        """Fetch the close of the daily candle opening on ``day``.

        :param asset: Crypto asset identifier.
        :param day: Calendar day (UTC).
        :returns: Close price, or None if the exchange returned no candle.
        """
        pair = f"{resolve_symbol(asset)}{self.settings.spot_quote}"
        start_ms = to_epoch_ms(day)
        candles = await self.fetch_candles(pair, start_ms, start_ms + DAY_MS, limit=1)
        if not candles:
            return None
        return candles[0].close


class FiatSeriesSource(SeriesSource):
    """Daily exchange rates from the Frankfurter API."""

    @property
    def base_url(self) -> str:
        return self.settings.fiat_base_url

    async def fetch_rates(
        self,
        base: str,
        date_range: DateRange,
        target: str = "USD",
    ) -> RateTable:
        """Fetch daily ``base -> target`` rates.

        The payload's ``rates`` mapping is returned as-is after numeric
        validation; keys are the upper-cased target codes.

        :param base: Base currency code.
        :param date_range: Inclusive calendar range.
        :param target: Target currency code.
        :returns: Rate table ``date -> {TARGET: rate}``.
        """
        path = f"/{date_range.start.isoformat()}..{date_range.end.isoformat()}"
        payload = await self._get_json(
            path,
            {"base": resolve_symbol(base), "symbols": resolve_symbol(target)},
        )
        if not isinstance(payload, dict) or "rates" not in payload:
            raise DataValidationError(f"Missing 'rates' in response for {base}/{target}")
        return validate_rate_table(payload["rates"])

    async def fetch_series(
        self,
        base: str,
        target: str,
        date_range: DateRange,
    ) -> RateTable:
        return await self.fetch_rates(base, date_range, target)


def resolve_series_source(
    target: str,
    crypto: SeriesSource,
    fiat: SeriesSource,
) -> SeriesSource:
    """Pick the source responsible for ``target``.

    :param target: Asset or currency identifier.
    :param crypto: Source used for crypto identifiers.
    :param fiat: Source used for everything else.
    :returns: The matching source.
    """
    return crypto if is_crypto(target) else fiat


__all__ = [
    "DAY_MS",
    "SeriesSource",
    "CryptoSeriesSource",
    "FiatSeriesSource",
    "resolve_series_source",
]

"""Reshaping of source payloads into canonical date-keyed series.

Both sources end up as a :data:`~ratechart.types.RateTable`
(``date -> {key: value}``); :func:`extract_series` turns a table into the
canonical ``date -> price`` mapping for one key.
"""

from __future__ import annotations

import math
from datetime import date, datetime, timezone
from typing import Any, Iterable

from ratechart.exceptions import DataValidationError
from ratechart.types import CanonicalSeries, Candle, RateTable


def parse_price(value: Any, field: str = "price") -> float:
    """Parse a numeric value coming from an external payload.

    Sources send prices as numeric strings or numbers. Anything that does not
    parse to a finite float is rejected instead of leaking NaN downstream.

    :param value: Raw value from the payload.
    :param field: Field name used in the error message.
    :returns: Parsed float.
    :raises DataValidationError: If the value is missing, non-numeric or not finite.
    """
    if isinstance(value, bool) or value is None:
        raise DataValidationError(f"Invalid {field}: {value!r}")
    if isinstance(value, str):
        value = value.strip()
        if not value:
            raise DataValidationError(f"Invalid {field}: empty string")
    try:
        parsed = float(value)
    except (TypeError, ValueError) as e:
        raise DataValidationError(f"Invalid {field}: {value!r}") from e
    if not math.isfinite(parsed):
        raise DataValidationError(f"Invalid {field}: {value!r} is not finite")
    return parsed


def to_epoch_ms(day: date) -> int:
    """Return the UTC midnight of ``day`` as milliseconds since the epoch."""
    midnight = datetime(day.year, day.month, day.day, tzinfo=timezone.utc)
    return int(midnight.timestamp() * 1000)


def parse_kline(record: Any) -> Candle:
    """Parse one raw kline record into a :class:`Candle`.

    Kline records are positional: open time (ms), open, high, low, close,
    volume, followed by fields that are ignored here.

    :param record: Raw kline list from the exchange.
    :returns: Validated candle.
    :raises DataValidationError: If the record is too short or malformed.
    """
    if not isinstance(record, (list, tuple)) or len(record) < 6:
        raise DataValidationError(f"Malformed kline record: {record!r}")

    open_time = record[0]
    if isinstance(open_time, bool) or not isinstance(open_time, int):
        raise DataValidationError(f"Invalid kline open time: {open_time!r}")

    return Candle(
        open_time=datetime.fromtimestamp(open_time / 1000, tz=timezone.utc),
        open=parse_price(record[1], "open"),
        high=parse_price(record[2], "high"),
        low=parse_price(record[3], "low"),
        close=parse_price(record[4], "close"),
        volume=parse_price(record[5], "volume"),
    )


def candles_to_rates(candles: Iterable[Candle], symbol: str) -> RateTable:
    """Reshape candles into a rate table keyed by ``symbol``.

    Each candle contributes ``{iso_date: {symbol: close}}``. A later candle for
    the same day replaces an earlier one.

    :param candles: Candles in any order.
    :param symbol: Series key, normally the resolved ticker symbol.
    :returns: Rate table with one entry per candle day.
    """
    rates: RateTable = {}
    for candle in candles:
        rates[candle.open_time.date().isoformat()] = {symbol: candle.close}
    return rates


def validate_rate_table(raw: Any) -> RateTable:
    """Validate a raw ``date -> {code: rate}`` mapping from the fiat source.

    :param raw: Decoded ``rates`` field of the payload.
    :returns: Rate table with float values.
    :raises DataValidationError: If the mapping or any rate is malformed.
    """
    if not isinstance(raw, dict):
        raise DataValidationError(f"Expected a mapping of rates, got {type(raw).__name__}")

    rates: RateTable = {}
    for day, entry in raw.items():
        if not isinstance(entry, dict):
            raise DataValidationError(f"Malformed rate entry for {day}: {entry!r}")
        rates[str(day)] = {
            str(code): parse_price(value, f"rate {code} on {day}")
            for code, value in entry.items()
        }
    return rates


def extract_series(rates: RateTable, key: str) -> CanonicalSeries:
    """Extract the canonical ``date -> price`` series for one key.

    Dates without an entry for ``key`` are left out; nothing is interpolated.

    :param rates: Rate table from either source.
    :param key: Series key (ticker symbol or currency code).
    :returns: Canonical series.
    """
    return {
        day: entry[key]
        for day, entry in rates.items()
        if entry is not None and key in entry
    }


__all__ = [
    "parse_price",
    "to_epoch_ms",
    "parse_kline",
    "candles_to_rates",
    "validate_rate_table",
    "extract_series",
]

"""Series fetching and normalization module."""

from ratechart.data.normalize import (candles_to_rates, extract_series,
                                      parse_price)
from ratechart.data.sources import (CryptoSeriesSource, FiatSeriesSource,
                                    SeriesSource, resolve_series_source)

__all__ = [
    "SeriesSource",
    "CryptoSeriesSource",
    "FiatSeriesSource",
    "resolve_series_source",
    "candles_to_rates",
    "extract_series",
    "parse_price",
]

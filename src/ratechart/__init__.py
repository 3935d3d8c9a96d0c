"""Rate chart package root."""

from ratechart.exceptions import DataSourceError, RateChartError

__all__ = ["DataSourceError", "RateChartError"]

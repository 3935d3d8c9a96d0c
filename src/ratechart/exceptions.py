"""Rate chart exception hierarchy.

All package-specific exceptions derive from :class:`RateChartError` so callers
can catch every chart or tracker failure uniformly.
"""

from __future__ import annotations


class RateChartError(Exception):
    """Base class for rate chart exceptions.

    Derived exceptions should extend this class so that callers can catch all
    package-specific errors uniformly.
    """


class ConfigError(RateChartError):
    """Raised when configuration files or parameters are invalid."""


class DataSourceError(RateChartError):
    """Raised when a request to a price or rate source fails."""


class DataValidationError(RateChartError):
    """Raised when a source payload fails validation checks.

    Named DataValidationError to avoid conflict with pydantic's ValidationError.
    """


class InputError(RateChartError):
    """Raised when user-supplied input is missing or unusable."""


class ChartNotFoundError(RateChartError):
    """Raised when a chart operation targets a container without a chart."""


__all__ = [
    "RateChartError",
    "ConfigError",
    "DataSourceError",
    "DataValidationError",
    "InputError",
    "ChartNotFoundError",
]

"""Fixed-stride downsampling of date-keyed series.

Dates are ISO formatted, so sorting them lexically sorts them
chronologically. The walk starts at the earliest date and advances by
``ceil(total / max_points)``; the latest date is only included when the
stride happens to land on it.
"""

from __future__ import annotations

import math
from typing import Iterable, Mapping

from ratechart.types import CanonicalSeries, DownsampledSeries, RateTable

DEFAULT_MAX_POINTS = 20


def sample_dates(dates: Iterable[str], max_points: int = DEFAULT_MAX_POINTS) -> list[str]:
    """Sort ISO dates and keep at most ``max_points`` of them at a fixed stride.

    :param dates: ISO date strings, in any order, without duplicates.
    :param max_points: Upper bound on returned dates.
    :returns: Sampled dates in ascending order, starting with the earliest.
    :raises ValueError: If ``max_points`` is less than 1.
    """
    if max_points < 1:
        raise ValueError(f"max_points must be at least 1, got {max_points}")

    ordered = sorted(dates)
    if not ordered:
        return []

    stride = math.ceil(len(ordered) / max_points)
    return ordered[::stride]


def downsample_rates(
    rates: Mapping[str, Mapping[str, float] | None],
    key: str,
    max_points: int = DEFAULT_MAX_POINTS,
) -> DownsampledSeries:
    """Downsample one key of a rate table into parallel labels and values.

    Example::

        >>> downsample_rates(
        ...     {"2024-01-01": {"BTC": 100.0},
        ...      "2024-01-02": {"BTC": 105.0},
        ...      "2024-01-03": {"BTC": 98.0}},
        ...     "BTC",
        ...     max_points=2,
        ... ).labels
        ['2024-01-01', '2024-01-03']

    :param rates: Rate table ``date -> {key: value}``.
    :param key: Key extracted for every sampled date.
    :param max_points: Upper bound on returned points.
    :returns: Series whose value is None where the date lacks ``key``.
    """
    labels = sample_dates(rates.keys(), max_points)
    values: list[float | None] = []
    for day in labels:
        entry = rates.get(day)
        values.append(entry.get(key) if entry else None)
    return DownsampledSeries(labels=labels, values=values)


def align_to_labels(series: CanonicalSeries, labels: list[str]) -> list[float | None]:
    """Look up ``series`` at every label, None where the series has no entry."""
    return [series.get(day) for day in labels]


def merge_dates(tables: Iterable[RateTable | CanonicalSeries]) -> set[str]:
    """Return the union of date keys across several tables."""
    dates: set[str] = set()
    for table in tables:
        dates.update(table.keys())
    return dates


__all__ = [
    "DEFAULT_MAX_POINTS",
    "sample_dates",
    "downsample_rates",
    "align_to_labels",
    "merge_dates",
]

"""Multi-series alignment onto one shared label axis.

Targets are fetched one at a time in caller order, reduced to canonical
series and placed on a common axis chosen by :class:`AxisPolicy`:

- ``UNION``: the union of every series' dates is downsampled once and each
  series is looked up per label, with None where it has no data.
- ``FIRST_SERIES``: every series is downsampled on its own and the labels
  of the first target with any data become the axis. Series are matched to
  it by position only; when their date coverage differs the values end up
  under the wrong dates. Series longer than the axis are truncated
  and shorter ones padded with None.
"""

from __future__ import annotations

import logging

from ratechart.data.normalize import extract_series
from ratechart.data.sources import SeriesSource, resolve_series_source
from ratechart.downsample import (align_to_labels, downsample_rates,
                                  merge_dates, sample_dates)
from ratechart.symbols import resolve_symbol
from ratechart.types import (AxisPolicy, ChartDataset, ChartRequest,
                             ChartSpec, DateRange, RateTable)

logger = logging.getLogger(__name__)


def chart_title(base: str, targets: list[str]) -> str:
    """Return the chart title, e.g. ``"USD → EUR, bitcoin"``."""
    return f"{base} → {', '.join(targets)}"


def align_first_series(
    tables: list[tuple[RateTable, str]],
    max_points: int,
) -> tuple[list[str], list[list[float | None]]]:
    """Align series on the labels of the first non-empty one.

    :param tables: ``(rates, key)`` pairs in target order.
    :param max_points: Upper bound on points per series.
    :returns: Shared labels and one value list per table.
    """
    refined = [downsample_rates(rates, key, max_points) for rates, key in tables]

    labels: list[str] = []
    for series in refined:
        if not labels:
            labels = series.labels

    columns: list[list[float | None]] = []
    for series in refined:
        values = series.values[: len(labels)]
        values += [None] * (len(labels) - len(values))
        columns.append(values)
    return labels, columns


def align_union(
    tables: list[tuple[RateTable, str]],
    max_points: int,
) -> tuple[list[str], list[list[float | None]]]:
    """Align series on the downsampled union of their dates.

    :param tables: ``(rates, key)`` pairs in target order.
    :param max_points: Upper bound on points on the shared axis.
    :returns: Shared labels and one value list per table.
    """
    series = [extract_series(rates, key) for rates, key in tables]
    labels = sample_dates(merge_dates(series), max_points)
    return labels, [align_to_labels(s, labels) for s in series]


class SeriesAligner:
    """Fetches every target of a chart request and aligns the results.

    :param crypto: Source used for crypto targets.
    :param fiat: Source used for fiat targets.
    """

    def __init__(self, crypto: SeriesSource, fiat: SeriesSource) -> None:
        self.crypto = crypto
        self.fiat = fiat

    async def fetch_target(
        self,
        base: str,
        target: str,
        date_range: DateRange,
    ) -> tuple[RateTable, str]:
        """Fetch one target and return its rate table with its series key."""
        source = resolve_series_source(target, self.crypto, self.fiat)
        rates = await source.fetch_series(base, target, date_range)
        key = resolve_symbol(target)
        logger.info("Fetched %d days for %s/%s", len(rates), base, key)
        return rates, key

    async def build(self, request: ChartRequest) -> ChartSpec:
        """Fetch, downsample and align every target of ``request``.

        Targets are awaited sequentially; the first failure aborts the build.

        :param request: Chart request.
        :returns: Chart specification with one dataset per target.
        """
        tables: list[tuple[RateTable, str]] = []
        for target in request.targets:
            tables.append(await self.fetch_target(request.base, target, request.date_range))

        if request.axis_policy is AxisPolicy.FIRST_SERIES:
            labels, columns = align_first_series(tables, request.max_points)
        else:
            labels, columns = align_union(tables, request.max_points)

        datasets = [
            ChartDataset(name=f"{request.base}/{target}", color=color, values=values)
            for target, color, values in zip(request.targets, request.colors, columns)
        ]
        return ChartSpec(
            title=chart_title(request.base, request.targets),
            labels=labels,
            datasets=datasets,
            axis_policy=request.axis_policy,
        )


__all__ = [
    "chart_title",
    "align_first_series",
    "align_union",
    "SeriesAligner",
]

"""Multi-series chart building, rendering and export module."""

from ratechart.charting.aligner import (SeriesAligner, align_first_series,
                                        align_union, chart_title)
from ratechart.charting.builder import ChartBuilder
from ratechart.charting.registry import ChartRegistry
from ratechart.charting.renderer import (ChartHandle, ChartRenderer,
                                         MatplotlibRenderer)

__all__ = [
    "SeriesAligner",
    "align_first_series",
    "align_union",
    "chart_title",
    "ChartBuilder",
    "ChartRegistry",
    "ChartHandle",
    "ChartRenderer",
    "MatplotlibRenderer",
]

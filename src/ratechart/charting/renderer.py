"""Chart rendering and image export."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402  (backend must be set first)

from ratechart.exceptions import ChartNotFoundError  # noqa: E402
from ratechart.types import ChartSpec, ContainerId  # noqa: E402


class ChartHandle:
    """A rendered chart bound to one container.

    :param container: Container the chart is bound to.
    :param spec: Specification the chart was drawn from.
    :param figure: Renderer-specific figure object, if any.
    """

    def __init__(self, container: ContainerId, spec: ChartSpec, figure: Any = None) -> None:
        self.container = container
        self.spec = spec
        self.figure = figure

    def export(self, path: str | Path) -> Path:
        """Write the chart as a PNG image.

        :param path: Destination file; parent directories are created.
        :returns: The written path.
        :raises ChartNotFoundError: If the chart has been closed.
        """
        if self.figure is None:
            raise ChartNotFoundError(f"Chart for container '{self.container}' has been closed")
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self.figure.savefig(path, format="png")
        return path

    def close(self) -> None:
        """Release the underlying figure."""
        if self.figure is not None:
            plt.close(self.figure)
            self.figure = None


class ChartRenderer(ABC):
    """Abstract base class for chart renderers."""

    @abstractmethod
    def render(self, container: ContainerId, spec: ChartSpec) -> ChartHandle:
        """Draw ``spec`` into ``container``.

        :param container: Target container identifier.
        :param spec: Chart specification.
        :returns: Handle to the rendered chart.
        """
        ...


class MatplotlibRenderer(ChartRenderer):
    """Line-chart renderer backed by matplotlib (Agg backend).

    None values are drawn as gaps.

    :param figsize: Figure size in inches.
    :param dpi: Resolution used for export.
    """

    def __init__(self, figsize: tuple[float, float] = (8.0, 4.0), dpi: int = 100) -> None:
        self.figsize = figsize
        self.dpi = dpi

    def render(self, container: ContainerId, spec: ChartSpec) -> ChartHandle:
        fig, ax = plt.subplots(figsize=self.figsize, dpi=self.dpi)
        positions = list(range(len(spec.labels)))

        for dataset in spec.datasets:
            ys = [float("nan") if v is None else v for v in dataset.values]
            ax.plot(
                positions[: len(ys)],
                ys,
                label=dataset.name,
                color=dataset.color,
                marker="o",
                markersize=3,
            )

        ax.set_xticks(positions)
        ax.set_xticklabels(spec.labels, rotation=45, ha="right", fontsize=7)
        ax.set_title(spec.title)
        ax.grid(alpha=0.3)
        if spec.datasets:
            ax.legend()
        fig.tight_layout()
        return ChartHandle(container, spec, fig)


__all__ = ["ChartHandle", "ChartRenderer", "MatplotlibRenderer"]

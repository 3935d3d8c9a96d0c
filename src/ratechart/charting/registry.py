"""Per-container registry of rendered charts."""

from __future__ import annotations

import logging
from pathlib import Path

from ratechart.charting.renderer import ChartHandle
from ratechart.exceptions import ChartNotFoundError
from ratechart.types import ContainerId

logger = logging.getLogger(__name__)


class ChartRegistry:
    """Maps container identifiers to their current chart.

    Several charts coexist; export always names the container it targets.
    """

    def __init__(self) -> None:
        self._charts: dict[str, ChartHandle] = {}

    def register(self, handle: ChartHandle) -> None:
        """Bind ``handle`` to its container, closing any chart it replaces."""
        previous = self._charts.get(handle.container)
        if previous is not None and previous is not handle:
            previous.close()
        self._charts[handle.container] = handle

    def get(self, container: ContainerId) -> ChartHandle:
        """Return the chart bound to ``container``.

        :raises ChartNotFoundError: If no chart exists for the container.
        """
        try:
            return self._charts[container]
        except KeyError as e:
            raise ChartNotFoundError(
                f"No chart for container '{container}'. Create a chart first."
            ) from e

    def remove(self, container: ContainerId) -> None:
        """Drop and close the chart bound to ``container``, if any."""
        handle = self._charts.pop(container, None)
        if handle is not None:
            handle.close()

    def containers(self) -> list[str]:
        """Return the containers that currently hold a chart."""
        return list(self._charts)

    def export(self, container: ContainerId, path: str | Path) -> Path:
        """Export the chart of ``container`` as a PNG image.

        :param container: Container whose chart is exported.
        :param path: Destination file.
        :returns: The written path.
        :raises ChartNotFoundError: If no chart exists for the container.
        """
        written = self.get(container).export(path)
        logger.info("Exported chart '%s' to %s", container, written)
        return written

    def __contains__(self, container: object) -> bool:
        return container in self._charts

    def __len__(self) -> int:
        return len(self._charts)


__all__ = ["ChartRegistry"]

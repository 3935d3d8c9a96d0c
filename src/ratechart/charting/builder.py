"""Chart build orchestration with per-container supersession.

Each build runs as an ``asyncio.Task`` keyed by its container. Submitting a
new build for a container cancels the build still in flight for it, so a
slow earlier request can never overwrite a newer chart.
"""

from __future__ import annotations

import asyncio
import logging

from ratechart.charting.aligner import SeriesAligner
from ratechart.charting.registry import ChartRegistry
from ratechart.charting.renderer import ChartHandle, ChartRenderer
from ratechart.types import ChartRequest, ContainerId

logger = logging.getLogger(__name__)


class ChartBuilder:
    """Builds, renders and registers charts.

    Example usage::

        async with CryptoSeriesSource() as crypto, FiatSeriesSource() as fiat:
            builder = ChartBuilder(SeriesAligner(crypto, fiat), MatplotlibRenderer())
            await builder.draw(request)
            builder.registry.export(request.container, "chart.png")

    :param aligner: Fetches and aligns the series of a request.
    :param renderer: Draws aligned chart specifications.
    :param registry: Registry receiving rendered charts.
    """

    def __init__(
        self,
        aligner: SeriesAligner,
        renderer: ChartRenderer,
        registry: ChartRegistry | None = None,
    ) -> None:
        self.aligner = aligner
        self.renderer = renderer
        self.registry = registry or ChartRegistry()
        self._tasks: dict[str, asyncio.Task[ChartHandle]] = {}

    def submit(self, request: ChartRequest) -> asyncio.Task[ChartHandle]:
        """Start building ``request``, superseding any build for its container.

        Must be called from a running event loop.

        :param request: Chart request.
        :returns: Task resolving to the registered chart handle.
        """
        container = request.container
        previous = self._tasks.get(container)
        if previous is not None and not previous.done():
            logger.info("Cancelling in-flight chart build for '%s'", container)
            previous.cancel()

        task = asyncio.create_task(self._build(request))
        self._tasks[container] = task
        task.add_done_callback(lambda t: self._forget(container, t))
        return task

    async def draw(self, request: ChartRequest) -> ChartHandle:
        """Build ``request`` and wait for the rendered chart."""
        return await self.submit(request)

    def is_building(self, container: ContainerId) -> bool:
        """Return True if a build for ``container`` is in flight."""
        task = self._tasks.get(container)
        return task is not None and not task.done()

    async def _build(self, request: ChartRequest) -> ChartHandle:
        spec = await self.aligner.build(request)
        handle = self.renderer.render(request.container, spec)
        self.registry.register(handle)
        logger.info(
            "Rendered chart '%s' with %d datasets and %d labels",
            request.container,
            len(spec.datasets),
            len(spec.labels),
        )
        return handle

    def _forget(self, container: str, task: asyncio.Task[ChartHandle]) -> None:
        if self._tasks.get(container) is task:
            del self._tasks[container]


__all__ = ["ChartBuilder"]

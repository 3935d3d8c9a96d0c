"""Interactive selection of a base and its target currencies.

A :class:`TargetSelection` accepts targets one by one, the way they are
dropped onto a chart box, and reports a status message after every attempt.
Targets are compared by their resolved symbol, so ``eur`` and ``EUR`` are
the same target. Rejected targets never advance the pending-target counter.
"""

from __future__ import annotations

from ratechart.symbols import resolve_symbol
from ratechart.types import (AxisPolicy, ChartRequest, ContainerId,
                             DateRange, FrozenModel)


class SelectionStatus(FrozenModel):
    """Outcome of one selection attempt.

    :param accepted: Whether the target was added.
    :param message: User-facing status text (empty when nothing to say).
    """

    accepted: bool
    message: str = ""


class TargetSelection:
    """Collects ``required_count`` distinct targets for one base.

    :param base: Base currency or asset the targets are priced in.
    :param required_count: Number of targets needed before the chart is drawn.
    :raises ValueError: If ``base`` is empty or ``required_count`` is below 1.
    """

    def __init__(self, base: str, required_count: int) -> None:
        if not base:
            raise ValueError("base is required")
        if required_count < 1:
            raise ValueError(f"required_count must be at least 1, got {required_count}")
        self.base = base
        self.required_count = required_count
        self._targets: list[str] = []
        self._colors: list[str] = []

    @property
    def targets(self) -> list[str]:
        return list(self._targets)

    @property
    def colors(self) -> list[str]:
        return list(self._colors)

    @property
    def remaining(self) -> int:
        return self.required_count - len(self._targets)

    @property
    def is_complete(self) -> bool:
        return self.remaining <= 0

    def add_target(self, target: str, color: str) -> SelectionStatus:
        """Try to add ``target`` drawn in ``color``.

        :param target: Dropped asset or currency identifier.
        :param color: Color picked for the target.
        :returns: Status describing whether the target was accepted.
        """
        if not target:
            return SelectionStatus(accepted=False)
        if self.is_complete:
            return SelectionStatus(accepted=False, message="Selection complete")
        key = resolve_symbol(target)
        if key == resolve_symbol(self.base):
            return SelectionStatus(accepted=False, message="Cannot use same currency as base!")
        if key in {resolve_symbol(t) for t in self._targets}:
            return SelectionStatus(
                accepted=False,
                message=f"Already added {target.upper()} - select another currency",
            )

        self._targets.append(target)
        self._colors.append(color)

        if self.remaining > 0:
            message = (
                f"Selected {len(self._targets)} of {self.required_count} "
                "currencies... (drag next)"
            )
        else:
            message = ""
        return SelectionStatus(accepted=True, message=message)

    def to_request(
        self,
        date_range: DateRange,
        container: ContainerId = ContainerId("chart-1"),
        max_points: int = 20,
        axis_policy: AxisPolicy = AxisPolicy.UNION,
    ) -> ChartRequest:
        """Build the chart request for a complete selection.

        :raises ValueError: If the selection is not complete yet.
        """
        if not self.is_complete:
            raise ValueError(
                f"Selection incomplete: {len(self._targets)} of {self.required_count} targets"
            )
        return ChartRequest(
            base=self.base,
            targets=self.targets,
            colors=self.colors,
            date_range=date_range,
            container=container,
            max_points=max_points,
            axis_policy=axis_policy,
        )


__all__ = ["SelectionStatus", "TargetSelection"]

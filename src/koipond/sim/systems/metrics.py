from __future__ import annotations

from typing import Sequence

from ..types.metrics import TickMetrics


def create_metrics(
    tick: int,
    speeds: Sequence[float],
    visible: int,
    neighbor_checks: int,
    duration_ms: float,
) -> TickMetrics:
    population = len(speeds)
    if population == 0:
        return TickMetrics(tick, 0, 0, 0.0, 0.0, 0, duration_ms)
    return TickMetrics(
        tick=tick,
        population=population,
        visible=visible,
        average_speed=sum(speeds) / population,
        average_neighbors=neighbor_checks / population,
        neighbor_checks=neighbor_checks,
        tick_duration_ms=duration_ms,
    )

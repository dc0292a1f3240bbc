from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class TickMetrics:
    tick: int
    population: int
    visible: int
    average_speed: float
    average_neighbors: float
    neighbor_checks: int
    tick_duration_ms: float = 0.0

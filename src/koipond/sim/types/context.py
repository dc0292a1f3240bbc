from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True, slots=True)
class WorldContext:
    """Read-only view of the pond a fish needs for one tick."""

    width: float
    height: float
    margin: float
    scroll_y: float = 0.0
    time: float = 0.0

    def advanced(self, time: float) -> "WorldContext":
        return replace(self, time=time)

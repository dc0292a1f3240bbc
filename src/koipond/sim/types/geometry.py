from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

Point = Tuple[float, float]
Polygon = List[Point]


@dataclass(slots=True)
class FishGeometry:
    """Closed vertex sequences for one fish, ready for a renderer."""

    body: Polygon
    shadow: Polygon
    spots: List[Polygon] = field(default_factory=list)
    primary_color: str = "#FFFFFF"
    secondary_color: str = "#000000"
    shadow_opacity: int = 0

    def to_payload(self) -> dict:
        return {
            "body": [[x, y] for x, y in self.body],
            "shadow": [[x, y] for x, y in self.shadow],
            "spots": [[[x, y] for x, y in spot] for spot in self.spots],
            "primary": self.primary_color,
            "secondary": self.secondary_color,
            "shadow_opacity": self.shadow_opacity,
        }

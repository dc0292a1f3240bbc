from __future__ import annotations

from typing import List, Sequence, Tuple

from pygame.math import Vector2

from ..core.config import FishConfig
from ..types.body import FishBody, FishState, Spot
from ..types.geometry import FishGeometry, Polygon
from ..utils.math2d import orthogonal, safe_normalize


def _side_normal(chain: Sequence[Vector2], index: int) -> Vector2:
    return safe_normalize(orthogonal(chain[index - 1] - chain[index]))


def build_edges(
    chain: Sequence[Vector2], profile: Sequence[float], body_width: float
) -> Tuple[List[Vector2], List[Vector2]]:
    left = [Vector2(chain[0])]
    right = [Vector2(chain[0])]
    half_width = body_width / 2.0
    for i in range(1, len(chain)):
        offset = _side_normal(chain, i) * (profile[i] * half_width)
        left.append(chain[i] + offset)
        right.append(chain[i] - offset)
    return left, right


def spot_depth(spot: Spot, index: int) -> float:
    """Fraction of the half-width the spot reaches in from its edge at ``index``."""
    return spot.depth * (((index - spot.location) / spot.height) ** 2 - 1.0) + 1.0


def spot_polygon(
    chain: Sequence[Vector2],
    left: Sequence[Vector2],
    right: Sequence[Vector2],
    profile: Sequence[float],
    body_width: float,
    spot: Spot,
) -> List[Vector2]:
    start = max(1, spot.location - spot.height)
    stop = min(len(chain) - 1, spot.location + spot.height)
    edge = left if spot.side else right
    sign = 1.0 if spot.side else -1.0
    half_width = body_width / 2.0

    outline = [Vector2(edge[j]) for j in range(start, stop + 1)]
    for j in range(stop, start, -1):
        actual_depth = max(profile[j] * spot_depth(spot, j), -profile[j])
        offset = _side_normal(chain, j) * (sign * actual_depth * half_width)
        outline.append(chain[j] + offset)
    return outline


def body_polygon(left: Sequence[Vector2], right: Sequence[Vector2]) -> List[Vector2]:
    return list(left) + [right[i] for i in range(len(right) - 1, 0, -1)]


def shadow_polygon(left: Sequence[Vector2], right: Sequence[Vector2], offset: Vector2) -> List[Vector2]:
    points = list(left[:-1]) + [right[i] for i in range(len(right) - 1, 0, -1)]
    return [point + offset for point in points]


def _as_polygon(points: Sequence[Vector2]) -> Polygon:
    return [(point.x, point.y) for point in points]


def build_geometry(state: FishState, body: FishBody, config: FishConfig) -> FishGeometry:
    left = state.left_edge
    right = state.right_edge
    shadow_offset = Vector2(config.shadow_offset_x, config.shadow_offset_y)
    spots = [
        _as_polygon(spot_polygon(state.chain, left, right, config.body_profile, body.body_width, spot))
        for spot in body.spots
    ]
    return FishGeometry(
        body=_as_polygon(body_polygon(left, right)),
        shadow=_as_polygon(shadow_polygon(left, right, shadow_offset)),
        spots=spots,
        primary_color=body.primary_color,
        secondary_color=body.secondary_color,
        shadow_opacity=config.shadow_opacity,
    )

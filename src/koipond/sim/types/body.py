from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

from pygame.math import Vector2


@dataclass(frozen=True, slots=True)
class Spot:
    # chain index the spot is centred on
    location: int
    # how many segments the spot spans up and down the body
    height: int
    # how far the spot reaches onto the body (1 = centreline, 2 = whole width)
    depth: float
    # True draws along the left edge, False along the right
    side: bool


@dataclass(frozen=True, slots=True)
class FishBody:
    """Everything about a fish that is fixed at construction."""

    size: float
    segment_length: float
    body_width: float
    thrust_strength: float
    oscillation_period: float
    oscillation_amplitude: float
    oscillation_offset: float
    random_turn_prob: float
    behavior_strength: float
    primary_color: str
    secondary_color: str
    spots: Tuple[Spot, ...]


@dataclass(frozen=True, slots=True)
class PeerState:
    """Immutable copy of the parts of a fish its neighbours may read."""

    id: int
    position: Vector2
    velocity: Vector2
    out_of_bounds: bool


@dataclass(slots=True)
class FishState:
    """Per-tick mutable state, owned by exactly one fish."""

    position: Vector2
    velocity: Vector2
    heading: float
    chain: List[Vector2]
    left_edge: List[Vector2] = field(default_factory=list)
    right_edge: List[Vector2] = field(default_factory=list)
    out_of_bounds: bool = False

from __future__ import annotations

import math
from typing import List, Sequence, Tuple

from pygame.math import Vector2

from ..core.config import FishConfig
from ..core.rng import DeterministicRng
from ..types.body import FishBody
from ..types.context import WorldContext
from .spots import place_spots


def spawn_position(rng: DeterministicRng, context: WorldContext) -> Vector2:
    margin = int(context.margin)
    x = rng.next_int(-margin, int(context.width) + margin)
    y = rng.next_int(-margin, int(context.height) + margin)
    return Vector2(x, y)


def initial_chain(position: Vector2, count: int) -> List[Vector2]:
    return [Vector2(position) for _ in range(count)]


def pick_colors(rng: DeterministicRng, palette: Sequence[str]) -> Tuple[str, str]:
    primary = palette[rng.next_int(0, len(palette))]
    secondary = palette[rng.next_int(0, len(palette))]
    while secondary == primary:
        secondary = palette[rng.next_int(0, len(palette))]
    return primary, secondary


def generate_body(size: float, rng: DeterministicRng, config: FishConfig) -> FishBody:
    """Derive the size-scaled constants, colours and markings of a new fish."""
    primary, secondary = pick_colors(rng, config.colors)
    oscillation_period = config.oscillation_period * size
    oscillation_offset = rng.next_range(0.0, 2.0 * math.pi * oscillation_period)
    spots = place_spots(rng, config)
    return FishBody(
        size=size,
        segment_length=config.segment_length * size,
        body_width=config.body_width * size,
        thrust_strength=config.thrust_strength * math.sqrt(size),
        oscillation_period=oscillation_period,
        oscillation_amplitude=config.oscillation_amplitude / size,
        oscillation_offset=oscillation_offset,
        random_turn_prob=config.random_turn_prob / size,
        behavior_strength=config.behavior_strength / size,
        primary_color=primary,
        secondary_color=secondary,
        spots=tuple(spots),
    )

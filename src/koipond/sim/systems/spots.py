from __future__ import annotations

from typing import List

from ..core.config import FishConfig
from ..core.rng import DeterministicRng
from ..types.body import Spot


def place_spots(rng: DeterministicRng, config: FishConfig) -> List[Spot]:
    count = rng.next_int(config.min_spots, config.max_spots + 1)
    spots: List[Spot] = []
    for _ in range(count):
        spots.append(
            Spot(
                location=rng.next_int(1, config.num_segments - 1),
                height=rng.next_int(config.min_spot_height, config.max_spot_height + 1),
                depth=rng.next_range(config.min_spot_depth, config.max_spot_depth),
                side=rng.next_bool(),
            )
        )
    return spots

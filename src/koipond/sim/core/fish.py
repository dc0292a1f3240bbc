from __future__ import annotations

import itertools
import math
from typing import Iterable, List, Optional, Tuple

from pygame.math import Vector2

from ..systems import geometry as geometry_system, motion
from ..systems.behavior import Peer, aggregate_behavior, compute_behavior
from ..systems.body import generate_body, initial_chain, spawn_position
from ..types.body import FishBody, FishState, PeerState, Spot
from ..types.context import WorldContext
from ..types.geometry import FishGeometry
from .config import FishConfig
from .rng import DeterministicRng

_ids = itertools.count()


def next_fish_id() -> int:
    """Hand out a process-wide unique fish id."""
    return next(_ids)


DEFAULT_WARMUP_TICKS = 100


class Fish:
    """A single koi: flocking steering, a trailing spine and procedural markings.

    Construction spawns the fish at a random point of ``context`` (plus the
    margin), gives it a random size, colours and spots, then runs
    ``warmup_ticks`` moves with no neighbours so the spine is stretched out
    rather than piled up on the spawn point.
    """

    def __init__(
        self,
        context: WorldContext,
        rng: DeterministicRng,
        config: FishConfig | None = None,
        fish_id: Optional[int] = None,
        warmup_ticks: int = DEFAULT_WARMUP_TICKS,
        size: Optional[float] = None,
    ):
        self._config = config if config is not None else FishConfig()
        self._config.validate()
        self._rng = rng
        self._id = next_fish_id() if fish_id is None else fish_id

        position = spawn_position(rng, context)
        start_angle = rng.next_range(0.0, 2.0 * math.pi)
        velocity = Vector2(math.cos(start_angle), math.sin(start_angle)) * self._config.max_vel
        if size is None:
            size = rng.next_range(self._config.min_size, self._config.max_size)
        elif not self._config.min_size <= size <= self._config.max_size:
            raise ValueError(
                f"size {size} outside [{self._config.min_size}, {self._config.max_size}]"
            )

        self._body: FishBody = generate_body(size, rng, self._config)
        self._state = FishState(
            position=position,
            velocity=velocity,
            heading=start_angle,
            chain=initial_chain(position, self._config.num_segments),
            out_of_bounds=motion.is_out_of_bounds(position, context),
        )
        self._refresh_edges()

        for tick in range(warmup_ticks):
            self.move((), context.advanced(context.time + tick))

    @property
    def id(self) -> int:
        return self._id

    @property
    def position(self) -> Vector2:
        return Vector2(self._state.position)

    @property
    def velocity(self) -> Vector2:
        return Vector2(self._state.velocity)

    @property
    def heading(self) -> float:
        return self._state.heading

    @property
    def out_of_bounds(self) -> bool:
        return self._state.out_of_bounds

    @property
    def size(self) -> float:
        return self._body.size

    @property
    def segment_length(self) -> float:
        return self._body.segment_length

    @property
    def body_width(self) -> float:
        return self._body.body_width

    @property
    def primary_color(self) -> str:
        return self._body.primary_color

    @property
    def secondary_color(self) -> str:
        return self._body.secondary_color

    @property
    def spots(self) -> Tuple[Spot, ...]:
        return self._body.spots

    @property
    def chain(self) -> List[Vector2]:
        return [Vector2(point) for point in self._state.chain]

    @property
    def left_edge(self) -> List[Vector2]:
        return [Vector2(point) for point in self._state.left_edge]

    @property
    def right_edge(self) -> List[Vector2]:
        return [Vector2(point) for point in self._state.right_edge]

    def snapshot(self) -> PeerState:
        return PeerState(
            id=self._id,
            position=Vector2(self._state.position),
            velocity=Vector2(self._state.velocity),
            out_of_bounds=self._state.out_of_bounds,
        )

    def steering(self, peers: Iterable[Peer]) -> Vector2:
        return compute_behavior(self, peers, self._config)

    def move(self, peers: Iterable[Peer], context: WorldContext) -> int:
        """Advance one tick against ``peers`` (live fish or ``PeerState`` snapshots).

        Returns how many peers were close enough to steer by.
        """
        behavior, neighbors = aggregate_behavior(self, peers, self._config)
        motion.advance(self._state, self._body, behavior, context, self._rng, self._config)
        self._refresh_edges()
        return neighbors

    def _refresh_edges(self) -> None:
        self._state.left_edge, self._state.right_edge = geometry_system.build_edges(
            self._state.chain, self._config.body_profile, self._body.body_width
        )

    def update_bounds(self, context: WorldContext) -> bool:
        """Recompute visibility without moving, e.g. after the view scrolls."""
        self._state.out_of_bounds = motion.is_out_of_bounds(self._state.position, context)
        return self._state.out_of_bounds

    def geometry(self) -> FishGeometry | None:
        if self._state.out_of_bounds:
            return None
        return geometry_system.build_geometry(self._state, self._body, self._config)

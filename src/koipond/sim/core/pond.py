from __future__ import annotations

import logging
from time import perf_counter
from typing import Any, Dict, List

from ..systems import metrics as metrics_system
from ..types.body import PeerState
from ..types.context import WorldContext
from ..types.metrics import TickMetrics
from ..types.snapshot import Snapshot, SnapshotMetadata, SnapshotWorld
from .config import PondConfig
from .fish import Fish, next_fish_id
from .rng import DeterministicRng

logger = logging.getLogger(__name__)

_FISH_RNG_SALT = 0x4B4F49504F4E4421


def _derive_stream_seed(seed: int, salt: int) -> int:
    return (int(seed) ^ int(salt)) & 0xFFFFFFFFFFFFFFFF


class Pond:
    """A fixed population of fish sharing one canvas, clock and scroll offset.

    Every ``step`` copies the peer state of all fish before any of them moves,
    so the result does not depend on the order fish are updated in.
    """

    def __init__(self, config: PondConfig):
        config.validate()
        self._config = config
        self._fish: List[Fish] = []
        self._width = config.width
        self._height = config.height
        self._scroll_y = 0.0
        self._time = 0.0
        self._metrics: TickMetrics | None = None
        self._bootstrap_population()

    @property
    def fish(self) -> List[Fish]:
        return self._fish

    @property
    def metrics(self) -> TickMetrics | None:
        return self._metrics

    @property
    def config(self) -> PondConfig:
        return self._config

    @property
    def context(self) -> WorldContext:
        return WorldContext(
            width=self._width,
            height=self._height,
            margin=self._config.margin,
            scroll_y=self._scroll_y,
            time=self._time,
        )

    def reset(self) -> None:
        self._fish.clear()
        self._width = self._config.width
        self._height = self._config.height
        self._scroll_y = 0.0
        self._time = 0.0
        self._metrics = None
        self._bootstrap_population()

    def scroll_to(self, scroll_y: float) -> None:
        self._scroll_y = float(scroll_y)
        self._refresh_bounds()

    def resize(self, width: float, height: float) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"pond size must be positive, got {width}x{height}")
        self._width = float(width)
        self._height = float(height)
        self._refresh_bounds()

    def _refresh_bounds(self) -> None:
        context = self.context
        for fish in self._fish:
            fish.update_bounds(context)

    def peer_states(self) -> List[PeerState]:
        return [fish.snapshot() for fish in self._fish]

    def step(self, tick: int) -> TickMetrics:
        start = perf_counter()
        self._time = float(tick)
        context = self.context
        peers = self.peer_states()

        neighbor_checks = 0
        for fish in self._fish:
            neighbor_checks += fish.move(peers, context)

        speeds = [fish.velocity.length() for fish in self._fish]
        visible = sum(1 for fish in self._fish if not fish.out_of_bounds)
        duration_ms = (perf_counter() - start) * 1000.0
        self._metrics = metrics_system.create_metrics(tick, speeds, visible, neighbor_checks, duration_ms)
        return self._metrics

    def snapshot(self, tick: int) -> Snapshot:
        fish_payload: List[Dict[str, Any]] = []
        for fish in self._fish:
            shape = fish.geometry()
            if shape is None:
                continue
            position = fish.position
            velocity = fish.velocity
            payload: Dict[str, Any] = {
                "id": fish.id,
                "x": position.x,
                "y": position.y,
                "vx": velocity.x,
                "vy": velocity.y,
                "heading": fish.heading,
                "size": fish.size,
            }
            payload.update(shape.to_payload())
            fish_payload.append(payload)
        dt = self._config.time_step
        return Snapshot(
            tick=tick,
            metrics=self._metrics,
            fish=fish_payload,
            world=SnapshotWorld(
                width=self._width,
                height=self._height,
                margin=self._config.margin,
                scroll_y=self._scroll_y,
            ),
            metadata=SnapshotMetadata(
                seed=self._config.seed,
                sim_dt=dt,
                tick_rate=1.0 / dt if dt > 0 else 0.0,
                population=len(self._fish),
            ),
        )

    def _bootstrap_population(self) -> None:
        context = self.context
        for slot in range(self._config.population):
            fish_seed = _derive_stream_seed(self._config.seed, _FISH_RNG_SALT + slot)
            fish = Fish(
                context,
                DeterministicRng(fish_seed),
                self._config.fish,
                fish_id=next_fish_id(),
                warmup_ticks=self._config.warmup_ticks,
            )
            self._fish.append(fish)
        logger.debug("Spawned %d fish (seed=%d)", len(self._fish), self._config.seed)

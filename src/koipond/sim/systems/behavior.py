from __future__ import annotations

import math
from typing import Iterable, Iterator, Protocol, Tuple

from pygame.math import Vector2

from ..core.config import FishConfig
from ..types.body import PeerState


class Peer(Protocol):
    id: int
    position: Vector2
    velocity: Vector2
    out_of_bounds: bool


def _is_self(agent: Peer, other: Peer) -> bool:
    # a snapshot stands in for the fish it was taken from
    return other is agent or (isinstance(other, PeerState) and other.id == agent.id)


def _qualifying_peers(agent: Peer, peers: Iterable[Peer], sight_range: float) -> Iterator[Tuple[Peer, Vector2, float]]:
    """Yield ``(peer, offset_from_peer, distance)`` for every visible peer in range."""
    position = agent.position
    range_sq = sight_range * sight_range
    for other in peers:
        if _is_self(agent, other):
            continue
        if other.out_of_bounds:
            continue
        offset = Vector2(position.x - other.position.x, position.y - other.position.y)
        dist_sq = offset.x * offset.x + offset.y * offset.y
        if dist_sq > range_sq:
            continue
        yield other, offset, math.sqrt(dist_sq)


def aggregate_behavior(agent: Peer, peers: Iterable[Peer], config: FishConfig) -> Tuple[Vector2, int]:
    """Return the steering vector and the number of peers that contributed to it."""
    count = 0
    separation = Vector2()
    alignment = Vector2()
    cohesion = Vector2()

    for other, offset, distance in _qualifying_peers(agent, peers, config.sight_range):
        if distance > 0.0:
            # unit vector away from the peer, weighted by 1 / distance
            inv = 1.0 / (distance * distance)
            separation.x += offset.x * inv
            separation.y += offset.y * inv
        alignment += other.velocity
        # raw position, not the direction towards it
        cohesion += other.position
        count += 1

    if count == 0:
        return Vector2(), 0

    separation *= config.separation_coef / count
    alignment *= config.alignment_coef / count
    cohesion *= config.cohesion_coef / count
    return separation + alignment + cohesion, count


def compute_behavior(agent: Peer, peers: Iterable[Peer], config: FishConfig) -> Vector2:
    return aggregate_behavior(agent, peers, config)[0]

from __future__ import annotations

import math
from typing import List, Tuple

from pygame.math import Vector2

from ..core.config import FishConfig
from ..core.rng import DeterministicRng
from ..types.body import FishBody, FishState
from ..types.context import WorldContext
from ..utils.math2d import TAU, bound_angle, direction, rotated, signed_angle


def steer_heading(heading: float, behavior: Vector2, behavior_strength: float) -> float:
    behavior_angle = bound_angle(direction(behavior))
    return heading + (behavior_angle - heading) * behavior_strength * behavior.length()


def oscillate_heading(heading: float, time: float, body: FishBody) -> float:
    phase = time / body.oscillation_period + body.oscillation_offset
    return heading + math.sin(phase) * body.oscillation_amplitude


def random_turn(heading: float, probability: float, max_turn_angle: float, rng: DeterministicRng) -> float:
    # one chance in floor(1 / probability)
    if rng.next_int(0, int(math.floor(1.0 / probability))) == 0:
        heading += rng.next_range(-max_turn_angle, max_turn_angle)
    return heading


def clamp_heading(heading: float, velocity: Vector2, max_turn_angle: float) -> float:
    """Limit the heading to ``max_turn_angle`` either side of the velocity direction.

    An unclamped heading is re-expressed as the equivalent angle nearest the
    velocity direction so the following rotation takes the short way round.
    """
    current = direction(velocity)
    delta = bound_angle(heading - current)
    if max_turn_angle < delta <= math.pi:
        return current + max_turn_angle
    if math.pi < delta < TAU - max_turn_angle:
        return current - max_turn_angle
    return current + signed_angle(delta)


def turn_velocity(velocity: Vector2, heading: float, turn_speed: float) -> Tuple[Vector2, float]:
    turn = (heading - direction(velocity)) * turn_speed
    return rotated(velocity, turn), turn


def apply_thrust(velocity: Vector2, turn: float, thrust_strength: float) -> Vector2:
    thrust = (1.0 - math.pow(2.0, -abs(turn))) * thrust_strength
    return velocity * (1.0 + thrust)


def clamp_speed(velocity: Vector2, min_vel: float, max_vel: float) -> Vector2:
    speed = velocity.length()
    if speed > max_vel:
        return velocity * (max_vel / speed)
    if speed < min_vel:
        if speed == 0.0:
            return Vector2(min_vel, 0.0)
        return velocity * (min_vel / speed)
    return velocity


def _wrap(value: float, extent: float, margin: float) -> float:
    if value <= -margin:
        return extent + margin
    if value >= extent + margin:
        return -margin
    return value


def wrap_position(position: Vector2, context: WorldContext) -> Vector2:
    return Vector2(
        _wrap(position.x, context.width, context.margin),
        _wrap(position.y, context.height, context.margin),
    )


def relax_chain(chain: List[Vector2], head: Vector2, segment_length: float) -> None:
    """Pull every segment after ``head`` to within ``segment_length`` of its leader."""
    chain[0] = Vector2(head)
    for i in range(1, len(chain)):
        leader = chain[i - 1]
        diff = chain[i] - leader
        length = diff.length()
        if length >= segment_length:
            chain[i] = leader + diff * (segment_length / length)


def is_out_of_bounds(position: Vector2, context: WorldContext) -> bool:
    return (
        position.y < -context.margin + context.scroll_y
        or position.y > context.height + context.margin + context.scroll_y
    )


def advance(
    state: FishState,
    body: FishBody,
    behavior: Vector2,
    context: WorldContext,
    rng: DeterministicRng,
    config: FishConfig,
) -> None:
    heading = steer_heading(state.heading, behavior, body.behavior_strength)
    heading = oscillate_heading(heading, context.time, body)
    heading = random_turn(heading, body.random_turn_prob, config.max_turn_angle, rng)
    heading = clamp_heading(heading, state.velocity, config.max_turn_angle)

    velocity, turn = turn_velocity(state.velocity, heading, config.turn_speed)
    velocity = apply_thrust(velocity, turn, body.thrust_strength)
    velocity = velocity * config.resistance
    velocity = clamp_speed(velocity, config.min_vel, config.max_vel)

    state.heading = heading
    state.velocity = velocity
    state.position = wrap_position(state.position + velocity, context)
    relax_chain(state.chain, state.position, body.segment_length)
    state.out_of_bounds = is_out_of_bounds(state.position, context)

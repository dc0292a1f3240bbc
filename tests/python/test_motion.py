from __future__ import annotations

import math

from pygame.math import Vector2
from pytest import approx

from koipond.sim.core.config import FishConfig
from koipond.sim.core.rng import DeterministicRng
from koipond.sim.systems.body import generate_body, initial_chain
from koipond.sim.systems.motion import (
    advance,
    apply_thrust,
    clamp_heading,
    clamp_speed,
    is_out_of_bounds,
    relax_chain,
    steer_heading,
    turn_velocity,
    wrap_position,
)
from koipond.sim.types.body import FishState
from koipond.sim.types.context import WorldContext
from koipond.sim.utils.math2d import bound_angle, direction

CONTEXT = WorldContext(width=800.0, height=600.0, margin=100.0)
MAX_TURN = math.pi / 3


def test_zero_behavior_leaves_heading_alone():
    assert steer_heading(1.25, Vector2(), 0.5) == 1.25


def test_steering_pulls_heading_towards_behavior():
    heading = steer_heading(0.0, Vector2(0.0, 2.0), 0.1)
    assert heading == approx(math.pi / 2 * 0.1 * 2.0)


def test_clamp_heading_limits_left_and_right_turns():
    velocity = Vector2(1.0, 0.0)
    assert clamp_heading(2.0, velocity, MAX_TURN) == approx(MAX_TURN)
    assert clamp_heading(-2.0, velocity, MAX_TURN) == approx(-MAX_TURN)
    assert clamp_heading(0.3, velocity, MAX_TURN) == approx(0.3)
    # same direction one full turn away is not a sharp turn
    assert clamp_heading(2 * math.pi + 0.3, velocity, MAX_TURN) == approx(0.3)


def test_clamped_heading_never_exceeds_max_turn():
    rng = DeterministicRng(3)
    for _ in range(500):
        velocity = Vector2(rng.next_range(-4, 4), rng.next_range(-4, 4))
        heading = rng.next_range(-20.0, 20.0)
        clamped = clamp_heading(heading, velocity, MAX_TURN)
        delta = bound_angle(clamped - direction(velocity))
        assert delta <= MAX_TURN + 1e-9 or delta >= 2 * math.pi - MAX_TURN - 1e-9


def test_turn_rotates_a_fraction_of_the_gap():
    velocity, turn = turn_velocity(Vector2(2.0, 0.0), 0.5, 0.1)
    assert turn == approx(0.05)
    assert direction(velocity) == approx(0.05)
    assert velocity.length() == approx(2.0)


def test_thrust_grows_with_turn_and_saturates():
    base = Vector2(1.0, 0.0)
    assert apply_thrust(base, 0.0, 3.5).length() == approx(1.0)
    gentle = apply_thrust(base, 0.05, 3.5).length()
    sharp = apply_thrust(base, 0.5, 3.5).length()
    assert 1.0 < gentle < sharp < 1.0 + 3.5


def test_speed_clamp_bounds():
    assert clamp_speed(Vector2(10.0, 0.0), 1.0, 4.0).length() == approx(4.0)
    assert clamp_speed(Vector2(0.0, 0.1), 1.0, 4.0).length() == approx(1.0)
    assert clamp_speed(Vector2(), 1.0, 4.0).length() == approx(1.0)
    assert clamp_speed(Vector2(2.0, 0.0), 1.0, 4.0) == Vector2(2.0, 0.0)


def test_wrap_at_exact_boundaries_only_touches_that_axis():
    far_edge = wrap_position(Vector2(900.0, 250.0), CONTEXT)
    assert far_edge == Vector2(-100.0, 250.0)
    near_edge = wrap_position(Vector2(300.0, -100.0), CONTEXT)
    assert near_edge == Vector2(300.0, 700.0)
    inside = wrap_position(Vector2(899.0, -99.0), CONTEXT)
    assert inside == Vector2(899.0, -99.0)


def test_relax_chain_pulls_links_to_segment_length():
    chain = [Vector2(0.0, 0.0), Vector2(-12.0, 0.0), Vector2(-13.0, 0.0)]
    relax_chain(chain, Vector2(3.0, 4.0), 5.0)
    assert chain[0] == Vector2(3.0, 4.0)
    assert chain[1].distance_to(chain[0]) == approx(5.0)
    assert chain[2].distance_to(chain[1]) == approx(5.0)


def test_relax_chain_leaves_slack_links_alone():
    chain = [Vector2(0.0, 0.0), Vector2(-2.0, 0.0), Vector2(-3.0, 0.0)]
    relax_chain(chain, Vector2(1.0, 0.0), 5.0)
    assert chain[1] == Vector2(-2.0, 0.0)
    assert chain[2] == Vector2(-3.0, 0.0)


def test_relax_chain_handles_coincident_points():
    chain = initial_chain(Vector2(1.0, 1.0), 4)
    relax_chain(chain, Vector2(1.0, 1.0), 5.0)
    assert all(point == Vector2(1.0, 1.0) for point in chain)


def test_out_of_bounds_follows_scroll():
    assert is_out_of_bounds(Vector2(0.0, 701.0), CONTEXT)
    assert not is_out_of_bounds(Vector2(0.0, 300.0), CONTEXT)
    scrolled = WorldContext(width=800.0, height=600.0, margin=100.0, scroll_y=500.0)
    assert is_out_of_bounds(Vector2(0.0, 300.0), scrolled)
    assert not is_out_of_bounds(Vector2(0.0, 1000.0), scrolled)
    # horizontal position never matters
    assert not is_out_of_bounds(Vector2(-5000.0, 300.0), CONTEXT)


def test_advance_keeps_speed_and_chain_invariants():
    config = FishConfig()
    rng = DeterministicRng(21)
    body = generate_body(1.0, rng, config)
    for trial in range(20):
        start = Vector2(rng.next_range(0, 800), rng.next_range(0, 600))
        state = FishState(
            position=start,
            velocity=Vector2(rng.next_range(-10, 10), rng.next_range(-10, 10)),
            heading=rng.next_range(-10, 10),
            chain=initial_chain(start, config.num_segments),
        )
        for tick in range(60):
            behavior = Vector2(rng.next_range(-500, 500), rng.next_range(-500, 500))
            advance(state, body, behavior, CONTEXT.advanced(float(tick)), rng, config)
            assert config.min_vel - 1e-9 <= state.velocity.length() <= config.max_vel + 1e-9
            for i in range(1, len(state.chain)):
                assert state.chain[i].distance_to(state.chain[i - 1]) <= body.segment_length + 1e-6

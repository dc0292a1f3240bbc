from __future__ import annotations

import math

from pygame.math import Vector2
from pytest import approx

from koipond.sim.core.config import FishConfig
from koipond.sim.core.rng import DeterministicRng
from koipond.sim.systems.body import generate_body, initial_chain, pick_colors, spawn_position
from koipond.sim.systems.spots import place_spots
from koipond.sim.types.context import WorldContext


def test_size_scaled_constants():
    config = FishConfig()
    body = generate_body(1.44, DeterministicRng(1), config)

    assert body.segment_length == approx(config.segment_length * 1.44)
    assert body.body_width == approx(config.body_width * 1.44)
    assert body.thrust_strength == approx(config.thrust_strength * 1.2)
    assert body.oscillation_period == approx(config.oscillation_period * 1.44)
    assert body.oscillation_amplitude == approx(config.oscillation_amplitude / 1.44)
    assert body.random_turn_prob == approx(config.random_turn_prob / 1.44)
    assert body.behavior_strength == approx(config.behavior_strength / 1.44)
    assert 0.0 <= body.oscillation_offset <= 2 * math.pi * body.oscillation_period


def test_colors_never_match_across_seeds():
    palette = FishConfig().colors
    for seed in range(300):
        primary, secondary = pick_colors(DeterministicRng(seed), palette)
        assert primary != secondary
        assert primary in palette and secondary in palette


def test_spots_respect_configured_ranges():
    config = FishConfig()
    for seed in range(100):
        spots = place_spots(DeterministicRng(seed), config)
        assert config.min_spots <= len(spots) <= config.max_spots
        for spot in spots:
            assert 1 <= spot.location <= config.num_segments - 2
            assert config.min_spot_height <= spot.height <= config.max_spot_height
            assert config.min_spot_depth <= spot.depth <= config.max_spot_depth
            assert isinstance(spot.side, bool)


def test_initial_chain_is_independent_copies():
    head = Vector2(3.0, 4.0)
    chain = initial_chain(head, 5)
    assert len(chain) == 5
    assert all(point == head for point in chain)
    chain[1].x = 99.0
    assert chain[2].x == 3.0
    assert head.x == 3.0


def test_spawn_position_stays_inside_margin():
    context = WorldContext(width=100, height=50, margin=10)
    rng = DeterministicRng(8)
    for _ in range(200):
        position = spawn_position(rng, context)
        assert -10 <= position.x < 110
        assert -10 <= position.y < 60

from __future__ import annotations

from pathlib import Path

import pytest

from koipond.sim.core.config import ConfigError, FishConfig, PondConfig, load_config


def test_defaults_are_valid():
    PondConfig().validate()


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"min_spot_height": 7, "max_spot_height": 6}, "min_spot_height"),
        ({"min_size": 2.0, "max_size": 1.0}, "min_size"),
        ({"min_vel": 5.0, "max_vel": 4.0}, "min_vel"),
        ({"min_spot_depth": 3.0}, "min_spot_depth"),
        ({"colors": ["#FFFFFF", "#FFFFFF"]}, "distinct"),
        ({"body_profile": [0.0, 1.0, 0.0]}, "body_profile"),
        ({"resistance": 1.5}, "resistance"),
        ({"min_vel": 0.0}, "min_vel"),
    ],
)
def test_fish_config_fails_fast(overrides, message):
    with pytest.raises(ConfigError, match=message):
        FishConfig(**overrides).validate()


def test_config_error_is_a_value_error():
    with pytest.raises(ValueError):
        PondConfig(width=0).validate()


def test_load_config_builds_nested_sections():
    config = load_config({"population": 3, "seed": 11, "fish": {"sight_range": 50.0}})
    assert config.population == 3
    assert config.seed == 11
    assert config.fish.sight_range == 50.0
    assert config.fish.num_segments == 20


def test_from_yaml_round_trips_file(tmp_path):
    path = tmp_path / "pond.yaml"
    path.write_text("width: 300\nheight: 200\nfish:\n  max_spots: 3\n")
    config = PondConfig.from_yaml(path)
    assert config.width == 300
    assert config.height == 200
    assert config.fish.max_spots == 3


def test_from_yaml_rejects_invalid_values(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("fish:\n  min_spots: 6\n  max_spots: 2\n")
    with pytest.raises(ConfigError):
        PondConfig.from_yaml(path)


def test_shipped_default_yaml_is_valid():
    path = Path(__file__).resolve().parents[2] / "config" / "default.yaml"
    config = PondConfig.from_yaml(path)
    assert config.population == 16
    assert config.fish.colors == FishConfig().colors

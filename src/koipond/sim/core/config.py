from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

import yaml

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Raised when a configuration value can never produce a valid fish."""


def _default_colors() -> List[str]:
    return ["#E6E6E6", "#E6E6E6", "#EB4A2A", "#EB4A2A", "#F49D2C", "#313130"]


def _default_body_profile() -> List[float]:
    return [
        0.00, 0.65, 0.85, 0.96, 1.00, 1.00, 0.98, 0.96, 0.93, 0.87,
        0.80, 0.70, 0.59, 0.50, 0.41, 0.32, 0.21, 0.12, 0.05, 0.00,
    ]


@dataclass
class FishConfig:
    # body
    min_size: float = 0.7
    max_size: float = 1.9
    body_width: float = 24.0
    segment_length: float = 5.0
    num_segments: int = 20
    colors: List[str] = field(default_factory=_default_colors)
    body_profile: List[float] = field(default_factory=_default_body_profile)
    # spots
    min_spots: int = 2
    max_spots: int = 5
    min_spot_height: int = 3
    max_spot_height: int = 6
    min_spot_depth: float = 0.2
    max_spot_depth: float = 2.9
    # shadow
    shadow_opacity: int = 30
    shadow_offset_x: float = 6.0
    shadow_offset_y: float = 6.0
    # movement
    max_vel: float = 4.0
    min_vel: float = 1.0
    thrust_strength: float = 3.5
    resistance: float = 0.956
    turn_speed: float = 0.1
    max_turn_angle: float = math.pi / 3
    # behavior
    oscillation_period: float = 15.0
    oscillation_amplitude: float = 0.04
    random_turn_prob: float = 0.007
    sight_range: float = 200.0
    separation_coef: float = 0.7
    alignment_coef: float = 1.8
    cohesion_coef: float = 1.0
    behavior_strength: float = 0.000015

    def validate(self) -> None:
        _check_range("size", self.min_size, self.max_size)
        if self.min_size <= 0.0:
            raise ConfigError(f"min_size must be positive, got {self.min_size}")
        if self.segment_length <= 0.0 or self.body_width < 0.0:
            raise ConfigError("segment_length must be positive and body_width not negative")
        if self.num_segments < 3:
            raise ConfigError(f"num_segments must be at least 3, got {self.num_segments}")
        if len(self.body_profile) != self.num_segments:
            raise ConfigError(
                f"body_profile has {len(self.body_profile)} entries but num_segments is {self.num_segments}"
            )
        if self.body_profile[0] != 0.0 or self.body_profile[-1] != 0.0:
            raise ConfigError("body_profile must start and end at 0.0")
        if any(value < 0.0 or value > 1.0 for value in self.body_profile):
            raise ConfigError("body_profile values must lie in [0, 1]")
        if len(set(self.colors)) < 2:
            raise ConfigError("colors must contain at least two distinct values")
        _check_range("spots", self.min_spots, self.max_spots)
        if self.min_spots < 0:
            raise ConfigError(f"min_spots must not be negative, got {self.min_spots}")
        _check_range("spot_height", self.min_spot_height, self.max_spot_height)
        if self.min_spot_height < 1:
            raise ConfigError(f"min_spot_height must be at least 1, got {self.min_spot_height}")
        _check_range("spot_depth", self.min_spot_depth, self.max_spot_depth)
        if not 0 <= self.shadow_opacity <= 255:
            raise ConfigError(f"shadow_opacity must lie in [0, 255], got {self.shadow_opacity}")
        _check_range("vel", self.min_vel, self.max_vel)
        if self.min_vel <= 0.0:
            raise ConfigError(f"min_vel must be positive, got {self.min_vel}")
        if not 0.0 < self.resistance <= 1.0:
            raise ConfigError(f"resistance must lie in (0, 1], got {self.resistance}")
        if not 0.0 < self.max_turn_angle < math.pi:
            raise ConfigError(f"max_turn_angle must lie in (0, pi), got {self.max_turn_angle}")
        if self.oscillation_period <= 0.0:
            raise ConfigError(f"oscillation_period must be positive, got {self.oscillation_period}")
        if not 0.0 < self.random_turn_prob / self.min_size <= 1.0:
            raise ConfigError("random_turn_prob / min_size must lie in (0, 1]")
        if self.sight_range < 0.0:
            raise ConfigError(f"sight_range must not be negative, got {self.sight_range}")


@dataclass
class PondConfig:
    width: float = 800.0
    height: float = 600.0
    margin: float = 100.0
    population: int = 12
    seed: int = 42
    warmup_ticks: int = 100
    time_step: float = 1.0 / 60.0
    fish: FishConfig = field(default_factory=FishConfig)

    def validate(self) -> None:
        if self.width <= 0.0 or self.height <= 0.0:
            raise ConfigError(f"pond size must be positive, got {self.width}x{self.height}")
        if self.margin < 0.0:
            raise ConfigError(f"margin must not be negative, got {self.margin}")
        if self.population < 0:
            raise ConfigError(f"population must not be negative, got {self.population}")
        if self.time_step <= 0.0:
            raise ConfigError(f"time_step must be positive, got {self.time_step}")
        if self.warmup_ticks < 0:
            raise ConfigError(f"warmup_ticks must not be negative, got {self.warmup_ticks}")
        self.fish.validate()

    @staticmethod
    def from_yaml(path: Path) -> "PondConfig":
        data = yaml.safe_load(Path(path).read_text()) or {}
        config = load_config(data)
        logger.info("Loaded pond config from %s", path)
        return config


def _check_range(name: str, low: float, high: float) -> None:
    if low > high:
        raise ConfigError(f"min_{name} ({low}) is greater than max_{name} ({high})")


def load_config(raw: dict) -> PondConfig:
    fish = FishConfig(**raw.get("fish", {}))
    pond_values = {k: v for k, v in raw.items() if k != "fish"}
    config = PondConfig(fish=fish, **pond_values)
    config.validate()
    return config

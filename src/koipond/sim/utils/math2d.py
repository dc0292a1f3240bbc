from __future__ import annotations

import math

from pygame.math import Vector2

TAU = 2.0 * math.pi


def bound_angle(angle: float) -> float:
    """Wrap ``angle`` into ``[0, 2*pi)``."""
    bounded = angle % TAU
    # float modulo can land exactly on TAU for tiny negative inputs
    if bounded >= TAU:
        return 0.0
    return bounded


def direction(vector: Vector2) -> float:
    if vector.x == 0.0 and vector.y == 0.0:
        return 0.0
    return math.atan2(vector.y, vector.x)


def safe_normalize(vector: Vector2) -> Vector2:
    magnitude_sq = vector.x * vector.x + vector.y * vector.y
    if magnitude_sq < 1e-18:
        return Vector2()
    inv = 1.0 / math.sqrt(magnitude_sq)
    return Vector2(vector.x * inv, vector.y * inv)


def orthogonal(vector: Vector2) -> Vector2:
    return Vector2(-vector.y, vector.x)


def rotated(vector: Vector2, angle: float) -> Vector2:
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    return Vector2(vector.x * cos_a - vector.y * sin_a, vector.x * sin_a + vector.y * cos_a)


def signed_angle(angle: float) -> float:
    """Map an angle to ``(-pi, pi]``."""
    bounded = bound_angle(angle)
    if bounded > math.pi:
        return bounded - TAU
    return bounded

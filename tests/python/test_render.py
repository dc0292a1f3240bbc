from __future__ import annotations

import pygame

from koipond.app.render import WATER_COLOR, PygameRenderer
from koipond.sim.types.geometry import FishGeometry


def _square(x0: float, y0: float, x1: float, y1: float):
    return [(x0, y0), (x1, y0), (x1, y1), (x0, y1)]


def test_renderer_draws_shadow_body_and_spots():
    surface = pygame.Surface((40, 40))
    shape = FishGeometry(
        body=_square(5, 5, 30, 30),
        shadow=_square(32, 32, 39, 39),
        spots=[_square(8, 8, 14, 14)],
        primary_color="#EB4A2A",
        secondary_color="#313130",
        shadow_opacity=255,
    )

    PygameRenderer(surface).draw([shape])

    assert surface.get_at((20, 20)) == pygame.Color("#EB4A2A")
    assert surface.get_at((11, 11)) == pygame.Color("#313130")
    assert surface.get_at((35, 35))[:3] == (0, 0, 0)
    assert surface.get_at((1, 1))[:3] == WATER_COLOR


def test_renderer_applies_scroll_offset():
    surface = pygame.Surface((40, 40))
    shape = FishGeometry(body=_square(5, 15, 30, 35), shadow=[], primary_color="#F49D2C")

    PygameRenderer(surface).draw([shape], scroll_y=10.0)

    assert surface.get_at((20, 8)) == pygame.Color("#F49D2C")
    assert surface.get_at((20, 30))[:3] == WATER_COLOR

from __future__ import annotations

from typing import Iterable, Optional, Sequence, Tuple

import pygame

from ..sim.types.geometry import FishGeometry, Point

WATER_COLOR = (18, 52, 64)


def _shifted(points: Sequence[Point], scroll_y: float) -> list[Tuple[float, float]]:
    return [(x, y - scroll_y) for x, y in points]


class PygameRenderer:
    """Draws fish geometry onto a pygame surface.

    Shadows are drawn first for every fish so no shadow falls on top of a body.
    """

    def __init__(self, surface: pygame.Surface, background: Tuple[int, int, int] = WATER_COLOR):
        self.surface = surface
        self.background = background
        self._shadow_layer: Optional[pygame.Surface] = None

    def _shadow_surface(self) -> pygame.Surface:
        size = self.surface.get_size()
        if self._shadow_layer is None or self._shadow_layer.get_size() != size:
            self._shadow_layer = pygame.Surface(size, pygame.SRCALPHA)
        self._shadow_layer.fill((0, 0, 0, 0))
        return self._shadow_layer

    def clear(self) -> None:
        self.surface.fill(self.background)

    def draw_shadows(self, shapes: Iterable[FishGeometry], scroll_y: float = 0.0) -> None:
        layer = self._shadow_surface()
        for shape in shapes:
            if len(shape.shadow) < 3:
                continue
            pygame.draw.polygon(layer, (0, 0, 0, shape.shadow_opacity), _shifted(shape.shadow, scroll_y))
        self.surface.blit(layer, (0, 0))

    def draw_fish(self, shape: FishGeometry, scroll_y: float = 0.0) -> None:
        if len(shape.body) >= 3:
            pygame.draw.polygon(self.surface, pygame.Color(shape.primary_color), _shifted(shape.body, scroll_y))
        secondary = pygame.Color(shape.secondary_color)
        for spot in shape.spots:
            if len(spot) < 3:
                continue
            pygame.draw.polygon(self.surface, secondary, _shifted(spot, scroll_y))

    def draw(self, shapes: Sequence[FishGeometry], scroll_y: float = 0.0) -> None:
        self.clear()
        self.draw_shadows(shapes, scroll_y)
        for shape in shapes:
            self.draw_fish(shape, scroll_y)

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional

import pygame

from ..sim.core.config import PondConfig
from ..sim.core.pond import Pond
from .render import PygameRenderer

logger = logging.getLogger(__name__)

SCROLL_STEP = 40.0


def run_viewer(config: PondConfig, fps: int = 60, max_ticks: Optional[int] = None) -> int:
    pygame.init()
    try:
        screen = pygame.display.set_mode((int(config.width), int(config.height)), pygame.RESIZABLE)
        pygame.display.set_caption("koipond")
        pond = Pond(config)
        renderer = PygameRenderer(screen)
        clock = pygame.time.Clock()
        scroll_y = 0.0
        tick = 0
        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                    running = False
                elif event.type == pygame.MOUSEWHEEL:
                    scroll_y -= event.y * SCROLL_STEP
                    pond.scroll_to(scroll_y)
                elif event.type == pygame.VIDEORESIZE:
                    pond.resize(event.w, event.h)
                    logger.debug("Resized pond to %dx%d", event.w, event.h)
            pond.step(tick)
            shapes = [shape for shape in (fish.geometry() for fish in pond.fish) if shape is not None]
            renderer.draw(shapes, scroll_y)
            pygame.display.flip()
            clock.tick(fps)
            tick += 1
            if max_ticks is not None and tick >= max_ticks:
                running = False
        return tick
    finally:
        pygame.quit()


def main() -> None:
    parser = argparse.ArgumentParser(description="Interactive koi pond")
    parser.add_argument("--config", type=Path, default=None, help="YAML pond configuration")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--fps", type=int, default=60)
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args()
    logging.basicConfig(level=args.log_level.upper())
    config = PondConfig.from_yaml(args.config) if args.config else PondConfig()
    if args.seed is not None:
        config.seed = args.seed
    run_viewer(config, fps=args.fps)


if __name__ == "__main__":
    main()

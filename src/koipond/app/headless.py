from __future__ import annotations

import argparse
import csv
import json
import logging
import math
from dataclasses import replace
from pathlib import Path
from typing import Optional

from ..sim.core.config import PondConfig
from ..sim.core.pond import Pond
from ..sim.types.metrics import TickMetrics

logger = logging.getLogger(__name__)

_BASIC_HEADER = [
    "tick",
    "population",
    "visible",
    "avg_speed",
    "neighbor_checks",
    "tick_ms",
]

_DETAILED_HEADER = [
    "tick",
    "population",
    "visible",
    "avg_speed",
    "neighbor_checks",
    "tick_ms",
    "avg_neighbors",
    "min_speed",
    "max_speed",
    "polarization",
    "centroid_x",
    "centroid_y",
    "max_link_stretch",
]


def _format_basic_row(metrics: TickMetrics, tick_ms: float) -> list[object]:
    return [
        metrics.tick,
        metrics.population,
        metrics.visible,
        f"{metrics.average_speed:.4f}",
        metrics.neighbor_checks,
        f"{tick_ms:.3f}",
    ]


def _format_detailed_row(pond: Pond, metrics: TickMetrics, tick_ms: float) -> list[object]:
    speeds = []
    sum_x = 0.0
    sum_y = 0.0
    heading_x = 0.0
    heading_y = 0.0
    max_stretch = 0.0
    for fish in pond.fish:
        velocity = fish.velocity
        speed = velocity.length()
        speeds.append(speed)
        if speed > 0.0:
            heading_x += velocity.x / speed
            heading_y += velocity.y / speed
        position = fish.position
        sum_x += position.x
        sum_y += position.y
        chain = fish.chain
        for i in range(1, len(chain)):
            stretch = chain[i].distance_to(chain[i - 1]) / fish.segment_length
            if stretch > max_stretch:
                max_stretch = stretch

    population = len(speeds)
    if population == 0:
        min_speed = max_speed = polarization = centroid_x = centroid_y = 0.0
    else:
        min_speed = min(speeds)
        max_speed = max(speeds)
        # 1.0 when every fish swims the same way
        polarization = math.hypot(heading_x, heading_y) / population
        centroid_x = sum_x / population
        centroid_y = sum_y / population

    return _format_basic_row(metrics, tick_ms) + [
        f"{metrics.average_neighbors:.4f}",
        f"{min_speed:.4f}",
        f"{max_speed:.4f}",
        f"{polarization:.4f}",
        f"{centroid_x:.3f}",
        f"{centroid_y:.3f}",
        f"{max_stretch:.4f}",
    ]


def _summary_stats(values: list[float]) -> dict[str, float]:
    if not values:
        return {"min": 0.0, "max": 0.0, "avg": 0.0}
    return {
        "min": float(min(values)),
        "max": float(max(values)),
        "avg": float(sum(values) / len(values)),
    }


def run_headless(
    steps: int,
    seed: Optional[int],
    log_path: Optional[Path],
    deterministic_log: bool = False,
    log_format: str = "detailed",
    summary_path: Optional[Path] = None,
    config: Optional[PondConfig] = None,
) -> Pond:
    config = config if config is not None else PondConfig()
    if seed is not None:
        config = replace(config, seed=seed)

    log_mode = log_format.lower().strip()
    if log_mode not in {"basic", "detailed"}:
        raise ValueError(f"Unknown log format: {log_format}")

    pond = Pond(config)
    logger.info("Running %d ticks with %d fish (seed=%d)", steps, len(pond.fish), config.seed)

    writer = None
    csv_file = None
    if log_path:
        csv_file = Path(log_path).open("w", newline="")
        writer = csv.writer(csv_file)
        writer.writerow(_DETAILED_HEADER if log_mode == "detailed" else _BASIC_HEADER)

    tick_ms_series: list[float] = []
    speed_series: list[float] = []
    visible_series: list[float] = []
    neighbor_series: list[float] = []

    try:
        for tick in range(steps):
            metrics = pond.step(tick)
            tick_ms = 0.0 if deterministic_log else metrics.tick_duration_ms
            tick_ms_series.append(tick_ms)
            speed_series.append(metrics.average_speed)
            visible_series.append(float(metrics.visible))
            neighbor_series.append(metrics.average_neighbors)
            if writer:
                if log_mode == "detailed":
                    writer.writerow(_format_detailed_row(pond, metrics, tick_ms))
                else:
                    writer.writerow(_format_basic_row(metrics, tick_ms))
    finally:
        if csv_file:
            csv_file.close()

    if summary_path:
        summary = {
            "steps": steps,
            "seed": config.seed,
            "population": len(pond.fish),
            "log_format": log_mode,
            "deterministic_log": deterministic_log,
            "tick_ms": _summary_stats(tick_ms_series),
            "average_speed": _summary_stats(speed_series),
            "visible": _summary_stats(visible_series),
            "average_neighbors": _summary_stats(neighbor_series),
        }
        Path(summary_path).write_text(json.dumps(summary, indent=2))
    return pond


def main() -> None:
    parser = argparse.ArgumentParser(description="Headless koi pond simulation")
    parser.add_argument("--steps", type=int, default=3000)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--config", type=Path, default=None, help="YAML pond configuration")
    parser.add_argument("--log", type=Path, default=None, help="CSV file to write metrics")
    parser.add_argument(
        "--log-format",
        choices=["basic", "detailed"],
        default="detailed",
        help="CSV format to write when --log is provided.",
    )
    parser.add_argument("--summary", type=Path, default=None, help="Optional JSON file for summary stats.")
    parser.add_argument(
        "--deterministic-log",
        action="store_true",
        help="Write deterministic CSV (tick_ms is forced to 0.000 so identical seeds match).",
    )
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args()
    logging.basicConfig(level=args.log_level.upper())
    config = PondConfig.from_yaml(args.config) if args.config else None
    run_headless(
        args.steps,
        args.seed,
        args.log,
        deterministic_log=args.deterministic_log,
        log_format=args.log_format,
        summary_path=args.summary,
        config=config,
    )


if __name__ == "__main__":
    main()

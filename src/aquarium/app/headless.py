from __future__ import annotations

import argparse
import asyncio
import csv
import json
import logging
import math
from dataclasses import replace
from pathlib import Path
from time import perf_counter
from typing import Optional

from ..config import AppConfig
from ..sim.core.clock import ManualScheduler
from ..sim.systems.metrics import summarize
from ..sim.types.state import ActivityCategory
from .server import AquariumController

logger = logging.getLogger(__name__)

_HEADER = [
    "tick",
    "population",
    "avg_speed",
    "avg_age",
    "distressed",
    "work_life_balance",
    "primitives",
    "tick_ms",
]


def _interpolated(ordered: list[float], fraction: float) -> float:
    position = (len(ordered) - 1) * fraction
    below = math.floor(position)
    above = min(below + 1, len(ordered) - 1)
    return ordered[below] + (ordered[above] - ordered[below]) * (position - below)


def _summary_stats(values: list[float]) -> dict[str, float]:
    ordered = sorted(float(value) for value in values) or [0.0]
    stats = {"min": ordered[0], "max": ordered[-1], "avg": sum(ordered) / len(ordered)}
    for label, fraction in (("p50", 0.50), ("p90", 0.90), ("p99", 0.99)):
        stats[label] = _interpolated(ordered, fraction)
    return stats


def _demo_activities(count: int) -> list[dict[str, object]]:
    categories = list(ActivityCategory)
    return [
        {
            "id": f"activity-{index}",
            "name": f"{categories[index % len(categories)].value.title()} session {index}",
            "category": categories[index % len(categories)].value,
            "duration": 60.0 * (index + 1),
            "timestamp": 0,
        }
        for index in range(count)
    ]


def run_headless(
    steps: int,
    seed: Optional[int],
    log_path: Optional[Path],
    fish: int = 12,
    deterministic_log: bool = False,
    summary_path: Optional[Path] = None,
    config: Optional[AppConfig] = None,
) -> AquariumController:
    base = config or AppConfig()
    config = replace(
        base,
        seed=base.seed if seed is None else seed,
        bridge=replace(base.bridge, spawn_on_new_activity=True),
    )
    time_step = config.time_step
    sim_time = 0.0

    def now() -> float:
        return sim_time

    controller = AquariumController(config, wall_clock=now)
    scheduler = ManualScheduler()
    asyncio.run(controller.start(scheduler))
    controller.source.publish({"activities": _demo_activities(fish)})

    writer = None
    csv_file = None
    if log_path:
        csv_file = Path(log_path).open("w", newline="")
        writer = csv.writer(csv_file)
        writer.writerow(_HEADER)

    tick_ms_series: list[float] = []
    speed_series: list[float] = []
    try:
        for tick in range(steps):
            sim_time = tick * time_step
            start = perf_counter()
            scheduler.pulse(sim_time)
            tick_ms = 0.0 if deterministic_log else (perf_counter() - start) * 1000.0
            metrics = summarize(controller.clock.state, tick, tick_ms)
            tick_ms_series.append(tick_ms)
            speed_series.append(metrics.average_speed)
            if writer:
                writer.writerow(
                    [
                        metrics.tick,
                        metrics.population,
                        f"{metrics.average_speed:.4f}",
                        f"{metrics.average_age:.4f}",
                        metrics.distressed,
                        f"{metrics.work_life_balance_percent / 100.0:.4f}",
                        len(controller.clock.frame),
                        f"{tick_ms:.3f}",
                    ]
                )
    finally:
        if csv_file:
            csv_file.close()
        asyncio.run(controller.stop())

    if summary_path:
        summary = {
            "steps": steps,
            "seed": config.seed,
            "fish": len(controller.clock.state.fish),
            "deterministic_log": deterministic_log,
            "tick_ms": _summary_stats(tick_ms_series),
            "avg_speed": _summary_stats(speed_series),
            "final": {
                "population": len(controller.clock.state.fish),
                "work_life_balance": controller.clock.state.work_life_balance,
            },
        }
        Path(summary_path).write_text(json.dumps(summary, indent=2))
    logger.info("Headless run finished: %d ticks, %d fish", steps, len(controller.clock.state.fish))
    return controller


def main() -> None:
    parser = argparse.ArgumentParser(description="Headless aquarium simulation")
    parser.add_argument("--steps", type=int, default=600)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--fish", type=int, default=12, help="Number of demo activities to spawn fish for")
    parser.add_argument("--config", type=Path, default=None, help="YAML configuration file")
    parser.add_argument("--log", type=Path, default=None, help="CSV file to write per-tick metrics")
    parser.add_argument("--summary", type=Path, default=None, help="Optional JSON file to write summary stats")
    parser.add_argument(
        "--deterministic-log",
        action="store_true",
        help="Write deterministic CSV (tick_ms is forced to 0.000 so identical seeds match).",
    )
    args = parser.parse_args()
    logging.basicConfig(level=logging.INFO)
    config = AppConfig.from_yaml(args.config) if args.config else None
    run_headless(
        args.steps,
        args.seed,
        args.log,
        fish=args.fish,
        deterministic_log=args.deterministic_log,
        summary_path=args.summary,
        config=config,
    )


if __name__ == "__main__":
    main()

from __future__ import annotations

from typing import Tuple

from ..types.metrics import AquariumMetrics
from ..types.state import AquariumState

_HEALTH_BUCKETS: Tuple[Tuple[float, str, str], ...] = (
    (0.8, "Excellent", "#4caf50"),
    (0.6, "Good", "#8bc34a"),
    (0.4, "Fair", "#ffeb3b"),
    (0.2, "Poor", "#ff9800"),
)
_CRITICAL = ("Critical", "#f44336")

DISTRESS_THRESHOLD = 0.5


def health_status(balance: float) -> tuple[str, str]:
    for threshold, label, color in _HEALTH_BUCKETS:
        if balance >= threshold:
            return label, color
    return _CRITICAL


def format_duration(seconds: float) -> str:
    seconds = int(seconds)
    if seconds < 60:
        return f"{seconds}s"
    if seconds < 3600:
        return f"{seconds // 60}m"
    return f"{seconds // 3600}h {(seconds % 3600) // 60}m"


def summarize(state: AquariumState, tick: int = 0, duration_ms: float = 0.0) -> AquariumMetrics:
    population = len(state.fish)
    if population:
        average_speed = sum(fish.velocity.length() for fish in state.fish) / population
        average_age = sum(fish.age for fish in state.fish) / population
    else:
        average_speed = 0.0
        average_age = 0.0
    label, color = health_status(state.work_life_balance)
    return AquariumMetrics(
        tick=tick,
        population=population,
        water_quality_percent=state.water_quality * 100.0,
        temperature=state.temperature,
        light_level_percent=state.light_level * 100.0,
        work_life_balance_percent=state.work_life_balance * 100.0,
        average_speed=average_speed,
        average_age=average_age,
        distressed=sum(1 for fish in state.fish if fish.health < DISTRESS_THRESHOLD),
        health_status=label,
        health_color=color,
        tick_duration_ms=duration_ms,
    )

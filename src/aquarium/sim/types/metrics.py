from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class AquariumMetrics:
    tick: int
    population: int
    water_quality_percent: float
    temperature: float
    light_level_percent: float
    work_life_balance_percent: float
    average_speed: float
    average_age: float
    distressed: int
    health_status: str
    health_color: str
    tick_duration_ms: float = 0.0

from __future__ import annotations

import itertools
import time
from typing import Dict, Optional

from pygame.math import Vector2

from ...config import PhysicsConfig, SpawnConfig
from ...rng import RandomSource
from ..types.state import Activity, ActivityCategory, AquariumState, Bounds, Fish, FishType

_SEQUENCE = itertools.count()

_CATEGORY_FISH: Dict[ActivityCategory, FishType] = {
    ActivityCategory.WORK: FishType.GOLDFISH,
    ActivityCategory.COMMUNICATION: FishType.CLOWNFISH,
    ActivityCategory.ENTERTAINMENT: FishType.BETTA,
    ActivityCategory.PRODUCTIVITY: FishType.ANGELFISH,
    ActivityCategory.LEARNING: FishType.TETRA,
    ActivityCategory.OTHER: FishType.GUPPY,
}


def _next_fish_id(rng: RandomSource) -> str:
    return f"fish-{int(time.time() * 1000)}-{next(_SEQUENCE)}-{rng.next_hex(8)}"


def fish_type_for(category: ActivityCategory) -> FishType:
    return _CATEGORY_FISH.get(category, FishType.GUPPY)


def spawn_fish(
    x: float,
    y: float,
    fish_type: FishType | str,
    activity_id: str,
    rng: RandomSource | None = None,
    config: SpawnConfig | None = None,
) -> Fish:
    config = config or SpawnConfig()
    rng = rng or RandomSource()
    kind = FishType(fish_type)
    size_min, size_max = config.size_range
    speed = config.initial_speed
    return Fish(
        id=_next_fish_id(rng),
        type=kind,
        name=f"Fish from {kind.value}",
        position=Vector2(x, y),
        velocity=Vector2(rng.next_range(-speed, speed), rng.next_range(-speed, speed)),
        size=rng.next_range(size_min, size_max),
        color=rng.choice(config.palette),
        health=1.0,
        age=0.0,
        activity_id=activity_id,
    )


def spawn_for_activity(
    activity: Activity,
    bounds: Bounds,
    rng: RandomSource,
    config: SpawnConfig | None = None,
    physics: PhysicsConfig | None = None,
) -> Fish:
    config = config or SpawnConfig()
    physics = physics or PhysicsConfig()
    margin = config.size_range[1]
    max_x = max(margin, bounds.width - margin)
    max_y = max(margin, bounds.height - margin - physics.floor_height)
    x = rng.next_range(margin, max_x)
    y = rng.next_range(margin, max_y)
    return spawn_fish(x, y, fish_type_for(activity.category), activity.id, rng, config)


def admit_fish(state: AquariumState, fish: Fish, max_population: Optional[int] = None) -> AquariumState:
    population = state.fish + (fish,)
    if max_population is not None and max_population >= 0 and len(population) > max_population:
        # Oldest by insertion order leaves first.
        population = population[len(population) - max_population :]
    return state.with_fish(population)

from __future__ import annotations

from dataclasses import replace

from pygame.math import Vector2

from ...config import PhysicsConfig
from ...rng import RandomSource
from ..types.state import AquariumState, Bounds, Fish
from ..utils.math2d import _clamp_length_xy_f, _clamp_value


def step(
    state: AquariumState,
    dt: float,
    bounds: Bounds,
    rng: RandomSource | None = None,
    config: PhysicsConfig | None = None,
) -> AquariumState:
    config = config or PhysicsConfig()
    rng = rng or RandomSource()
    # Deltas outside (0, max_dt] leave the state untouched.
    if dt <= 0 or dt > config.max_dt:
        return state
    return state.with_fish(tuple(_advance_fish(fish, dt, bounds, rng, config) for fish in state.fish))


def _advance_fish(fish: Fish, dt: float, bounds: Bounds, rng: RandomSource, config: PhysicsConfig) -> Fish:
    x = fish.position.x + fish.velocity.x * dt
    y = fish.position.y + fish.velocity.y * dt
    vx = fish.velocity.x
    vy = fish.velocity.y

    margin = fish.size
    max_x = bounds.width - margin
    max_y = bounds.height - margin - config.floor_height

    if x < margin or x > max_x:
        vx = -vx
        x = _clamp_value(x, margin, max_x)
    if y < margin or y > max_y:
        vy = -vy
        y = _clamp_value(y, margin, max_y)

    vx += (rng.next_float() - 0.5) * config.wander_jitter
    vy += (rng.next_float() - 0.5) * config.wander_jitter
    vx, vy = _clamp_length_xy_f(vx, vy, config.max_speed)

    return replace(fish, position=Vector2(x, y), velocity=Vector2(vx, vy), age=fish.age + dt)

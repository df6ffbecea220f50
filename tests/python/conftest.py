import os
import sys
from pathlib import Path

import pytest

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

ROOT = Path(__file__).resolve().parents[2]
src_root = ROOT / "src"
if str(src_root) not in sys.path:
    sys.path.insert(0, str(src_root))

from pygame.math import Vector2  # noqa: E402

from aquarium.rng import RandomSource  # noqa: E402
from aquarium.sim.types.state import AquariumState, Fish, FishType  # noqa: E402


def make_fish(
    x: float = 50.0,
    y: float = 50.0,
    vx: float = 0.0,
    vy: float = 0.0,
    size: float = 20.0,
    health: float = 1.0,
    age: float = 0.0,
    fish_id: str = "fish-1",
) -> Fish:
    return Fish(
        id=fish_id,
        type=FishType.GOLDFISH,
        name="Fish from goldfish",
        position=Vector2(x, y),
        velocity=Vector2(vx, vy),
        size=size,
        color="#ff6b6b",
        health=health,
        age=age,
        activity_id="activity-1",
    )


@pytest.fixture
def rng() -> RandomSource:
    return RandomSource(1234)


@pytest.fixture
def fish_factory():
    return make_fish


@pytest.fixture
def state_factory():
    def _state(*fish: Fish, **ambient: float) -> AquariumState:
        return AquariumState(fish=tuple(fish), **ambient)

    return _state

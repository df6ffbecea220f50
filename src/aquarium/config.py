from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

import yaml

DEFAULT_PALETTE: Tuple[str, ...] = ("#ff6b6b", "#4ecdc4", "#45b7d1", "#f9ca24", "#f0932b", "#eb4d4b")


@dataclass
class PhysicsConfig:
    max_dt: float = 1.0
    max_speed: float = 50.0
    wander_jitter: float = 0.5
    floor_height: float = 20.0


@dataclass
class SpawnConfig:
    palette: Tuple[str, ...] = DEFAULT_PALETTE
    size_range: Tuple[float, float] = (15.0, 25.0)
    initial_speed: float = 20.0


@dataclass
class RenderConfig:
    floor_height: float = 20.0
    seaweed_count: int = 5
    seaweed_amplitude: float = 15.0
    seaweed_top_fraction: float = 0.6
    bubble_count: int = 10
    bubble_rise_speed: float = 30.0
    bar_width: float = 200.0
    bar_height: float = 10.0
    bar_margin: float = 20.0


@dataclass
class AquariumDefaults:
    water_quality: float = 0.8
    temperature: float = 24.0
    light_level: float = 0.7
    work_life_balance: float = 0.5


@dataclass
class BridgeConfig:
    spawn_on_new_activity: bool = False
    max_population: Optional[int] = None
    recent_activity_limit: int = 10


@dataclass
class AppConfig:
    width: int = 1200
    height: int = 800
    fps: int = 60
    time_step: float = 1.0 / 60.0
    seed: Optional[int] = None
    host: str = "127.0.0.1"
    port: int = 8000
    physics: PhysicsConfig = field(default_factory=PhysicsConfig)
    spawn: SpawnConfig = field(default_factory=SpawnConfig)
    render: RenderConfig = field(default_factory=RenderConfig)
    defaults: AquariumDefaults = field(default_factory=AquariumDefaults)
    bridge: BridgeConfig = field(default_factory=BridgeConfig)

    @staticmethod
    def from_yaml(path: Path) -> "AppConfig":
        data = yaml.safe_load(Path(path).read_text()) or {}
        return load_config(data)


def load_config(raw: dict) -> AppConfig:
    def _pair(value: tuple[float, float] | list[float] | None, default: tuple[float, float]) -> tuple[float, float]:
        if isinstance(value, (tuple, list)) and len(value) == 2:
            return (float(value[0]), float(value[1]))
        return default

    physics = PhysicsConfig(**raw.get("physics", {}))
    spawn_raw = dict(raw.get("spawn", {}))
    default_spawn = SpawnConfig()
    palette = tuple(str(color) for color in spawn_raw.pop("palette", default_spawn.palette))
    if not palette:
        raise ValueError("spawn.palette must contain at least one colour")
    size_range = _pair(spawn_raw.pop("size_range", None), default_spawn.size_range)
    if size_range[0] <= 0 or size_range[0] > size_range[1]:
        raise ValueError(f"Invalid spawn.size_range: {size_range}")
    spawn = SpawnConfig(palette=palette, size_range=size_range, **spawn_raw)
    render = RenderConfig(**raw.get("render", {}))
    defaults = AquariumDefaults(**raw.get("defaults", {}))
    bridge = BridgeConfig(**raw.get("bridge", {}))
    app_values = {k: v for k, v in raw.items() if k not in {"physics", "spawn", "render", "defaults", "bridge"}}
    return AppConfig(physics=physics, spawn=spawn, render=render, defaults=defaults, bridge=bridge, **app_values)

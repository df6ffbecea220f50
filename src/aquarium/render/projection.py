from __future__ import annotations

import math
import time
from typing import List, Optional

from ..config import RenderConfig
from ..sim.types.state import AquariumState, Fish
from ..sim.utils.math2d import _heading_from_velocity, _rotate_translate
from . import colors
from .primitives import (
    LAYER_BUBBLES,
    LAYER_HUD,
    Circle,
    Ellipse,
    FilledRect,
    Gradient,
    Path,
    Polygon,
    Primitive,
    Text,
    TextStyle,
)

SEAWEED = colors.parse("#2d5a2d")
SAND = colors.parse("#d4a373")
DISTRESS_AMBER = colors.parse("#ffaa00")
DISTRESS_RED = colors.parse("#ff0000")
BUBBLE = colors.rgba(255, 255, 255, 0.3)
BAR_BACKGROUND = colors.rgba(0, 0, 0, 0.3)
BAR_BORDER = colors.rgba(255, 255, 255, 0.5)
LABEL_STYLE = TextStyle(size=12, family="sans-serif", align="right", color=colors.WHITE)


def project(
    state: AquariumState,
    width: float,
    height: float,
    now: Optional[float] = None,
    config: RenderConfig | None = None,
) -> List[Primitive]:
    config = config or RenderConfig()
    if now is None:
        now = time.time()
    frame: List[Primitive] = []
    frame.append(water_overlay(state.water_quality, width, height))
    frame.extend(background(width, height, config))
    for fish in state.fish:
        frame.extend(fish_shapes(fish))
    frame.extend(bubbles(width, height, now, config))
    frame.extend(balance_indicator(state.work_life_balance, width, config))
    return frame


def water_overlay(quality: float, width: float, height: float) -> Gradient:
    opacity = 0.1 + (1.0 - quality) * 0.3
    return Gradient(
        rect=(0.0, 0.0, width, height),
        stops=((0.0, colors.rgba(135, 206, 235, opacity)), (1.0, colors.rgba(70, 130, 180, opacity))),
    )


def background(width: float, height: float, config: RenderConfig) -> List[Primitive]:
    shapes: List[Primitive] = []
    base_y = height - config.floor_height
    top = height * config.seaweed_top_fraction
    spacing = width / (config.seaweed_count + 1)
    for i in range(config.seaweed_count):
        x = spacing * (i + 1)
        points = [(x, base_y)]
        y = base_y
        while y > top:
            wave = math.sin(y / 30.0 + i * 0.5) * config.seaweed_amplitude
            points.append((x + wave, y))
            y -= 10.0
        shapes.append(Path(points=tuple(points), stroke=SEAWEED, width=3.0))
    shapes.append(FilledRect(rect=(0.0, base_y, width, config.floor_height), color=SAND))
    return shapes


def fish_shapes(fish: Fish) -> List[Primitive]:
    size = fish.size
    angle = _heading_from_velocity(fish.velocity)
    origin = fish.position
    fill = colors.parse(fish.color)
    center = (origin.x, origin.y)
    tail = tuple(
        _rotate_translate(lx, ly, angle, origin)
        for lx, ly in ((-size, 0.0), (-size * 1.5, -size * 0.4), (-size * 1.5, size * 0.4))
    )
    shapes: List[Primitive] = [
        Ellipse(center=center, radii=(size, size * 0.6), rotation=angle, fill=fill),
        Polygon(points=tail, fill=fill),
        Circle(center=_rotate_translate(size * 0.3, -size * 0.2, angle, origin), radius=size * 0.15, fill=colors.WHITE),
        Circle(center=_rotate_translate(size * 0.35, -size * 0.2, angle, origin), radius=size * 0.08, fill=colors.BLACK),
    ]
    if fish.health < 0.5:
        ring = DISTRESS_RED if fish.health < 0.3 else DISTRESS_AMBER
        shapes.append(Circle(center=center, radius=size + 5.0, fill=None, stroke=ring, stroke_width=2.0))
    return shapes


def bubbles(width: float, height: float, now: float, config: RenderConfig) -> List[Primitive]:
    shapes: List[Primitive] = []
    count = config.bubble_count
    for i in range(count):
        phase = math.sin(now + i)
        x = (width / count) * i + phase * 20.0
        y = ((now * config.bubble_rise_speed + i * 100.0) % (height + 50.0)) - 50.0
        shapes.append(Circle(center=(x, y), radius=3.0 + phase * 2.0, fill=BUBBLE, layer=LAYER_BUBBLES))
    return shapes


def balance_indicator(balance: float, width: float, config: RenderConfig) -> List[Primitive]:
    bar_w = config.bar_width
    bar_h = config.bar_height
    x = width - bar_w - config.bar_margin
    y = config.bar_margin
    border = ((x, y), (x + bar_w, y), (x + bar_w, y + bar_h), (x, y + bar_h))
    return [
        FilledRect(rect=(x, y, bar_w, bar_h), color=BAR_BACKGROUND, layer=LAYER_HUD),
        FilledRect(rect=(x, y, bar_w * balance, bar_h), color=colors.hsl(balance * 120.0, 70.0, 50.0), layer=LAYER_HUD),
        Path(points=border, stroke=BAR_BORDER, width=1.0, closed=True, layer=LAYER_HUD),
        Text(position=(x - 10.0, y + 8.0), content="Work-Life Balance", style=LABEL_STYLE),
    ]

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from .colors import RGBA

Point = Tuple[float, float]
Rect = Tuple[float, float, float, float]

LAYER_WATER = "water"
LAYER_BACKGROUND = "background"
LAYER_FISH = "fish"
LAYER_BUBBLES = "bubbles"
LAYER_HUD = "hud"


@dataclass(frozen=True, slots=True)
class Gradient:
    rect: Rect
    stops: Tuple[Tuple[float, RGBA], ...]
    layer: str = LAYER_WATER


@dataclass(frozen=True, slots=True)
class Path:
    points: Tuple[Point, ...]
    stroke: RGBA
    width: float = 1.0
    closed: bool = False
    layer: str = LAYER_BACKGROUND


@dataclass(frozen=True, slots=True)
class FilledRect:
    rect: Rect
    color: RGBA
    layer: str = LAYER_BACKGROUND


@dataclass(frozen=True, slots=True)
class Ellipse:
    center: Point
    radii: Tuple[float, float]
    rotation: float
    fill: RGBA
    layer: str = LAYER_FISH


@dataclass(frozen=True, slots=True)
class Polygon:
    points: Tuple[Point, ...]
    fill: RGBA
    layer: str = LAYER_FISH


@dataclass(frozen=True, slots=True)
class Circle:
    center: Point
    radius: float
    fill: Optional[RGBA]
    stroke: Optional[RGBA] = None
    stroke_width: float = 1.0
    layer: str = LAYER_FISH


@dataclass(frozen=True, slots=True)
class TextStyle:
    size: int = 12
    family: str = "sans-serif"
    align: str = "left"
    color: RGBA = (255, 255, 255, 255)


@dataclass(frozen=True, slots=True)
class Text:
    position: Point
    content: str
    style: TextStyle
    layer: str = LAYER_HUD


Primitive = Union[Gradient, Path, FilledRect, Ellipse, Polygon, Circle, Text]

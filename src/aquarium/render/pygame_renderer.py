from __future__ import annotations

import math
from typing import Callable, Dict, Iterable, Tuple

import pygame

from .primitives import Circle, Ellipse, FilledRect, Gradient, Path, Polygon, Primitive, Text

_FONT_FAMILIES = {"sans-serif": None, "serif": "serif", "monospace": "monospace"}


class PygameRenderer:
    def __init__(self, surface: pygame.Surface, background: Tuple[int, int, int] = (70, 130, 180)):
        self.surface = surface
        self.background = background
        self._fonts: Dict[Tuple[str, int], pygame.font.Font] = {}

    def __call__(self, frame: Iterable[Primitive]) -> None:
        self.render(frame)

    def render(self, frame: Iterable[Primitive]) -> None:
        self.surface.fill(self.background)
        for primitive in frame:
            self.draw(primitive)

    def draw(self, primitive: Primitive) -> None:
        if isinstance(primitive, Gradient):
            self._draw_gradient(primitive)
        elif isinstance(primitive, Path):
            self._draw_path(primitive)
        elif isinstance(primitive, FilledRect):
            self._draw_rect(primitive)
        elif isinstance(primitive, Ellipse):
            self._draw_ellipse(primitive)
        elif isinstance(primitive, Polygon):
            self._draw_polygon(primitive)
        elif isinstance(primitive, Circle):
            self._draw_circle(primitive)
        elif isinstance(primitive, Text):
            self._draw_text(primitive)
        else:
            raise TypeError(f"Unsupported primitive: {type(primitive).__name__}")

    def _blend(self, color: Tuple[int, ...], paint: Callable[[pygame.Surface], object]) -> None:
        if len(color) < 4 or color[3] >= 255:
            paint(self.surface)
            return
        layer = pygame.Surface(self.surface.get_size(), pygame.SRCALPHA)
        paint(layer)
        self.surface.blit(layer, (0, 0))

    def _draw_gradient(self, gradient: Gradient) -> None:
        x, y, width, height = gradient.rect
        if width <= 0 or height <= 0 or not gradient.stops:
            return
        layer = pygame.Surface(self.surface.get_size(), pygame.SRCALPHA)
        rows = int(math.ceil(height))
        for row in range(rows):
            t = row / max(1, rows - 1)
            color = _sample_stops(gradient.stops, t)
            pygame.draw.line(layer, color, (x, y + row), (x + width - 1, y + row))
        self.surface.blit(layer, (0, 0))

    def _draw_path(self, path: Path) -> None:
        if len(path.points) < 2:
            return
        width = max(1, int(round(path.width)))
        self._blend(path.stroke, lambda target: pygame.draw.lines(target, path.stroke, path.closed, path.points, width))

    def _draw_rect(self, rect: FilledRect) -> None:
        x, y, width, height = rect.rect
        if width <= 0 or height <= 0:
            return
        area = pygame.Rect(round(x), round(y), round(width), round(height))
        self._blend(rect.color, lambda target: pygame.draw.rect(target, rect.color, area))

    def _draw_ellipse(self, ellipse: Ellipse) -> None:
        rx, ry = ellipse.radii
        if rx <= 0 or ry <= 0:
            return
        body = pygame.Surface((max(1, round(rx * 2)), max(1, round(ry * 2))), pygame.SRCALPHA)
        pygame.draw.ellipse(body, ellipse.fill, body.get_rect())
        # pygame rotates counter-clockwise on a y-down surface.
        rotated = pygame.transform.rotate(body, -math.degrees(ellipse.rotation))
        self.surface.blit(rotated, rotated.get_rect(center=(round(ellipse.center[0]), round(ellipse.center[1]))))

    def _draw_polygon(self, polygon: Polygon) -> None:
        if len(polygon.points) < 3:
            return
        self._blend(polygon.fill, lambda target: pygame.draw.polygon(target, polygon.fill, polygon.points))

    def _draw_circle(self, circle: Circle) -> None:
        if circle.radius <= 0:
            return
        center = (round(circle.center[0]), round(circle.center[1]))
        if circle.fill is not None:
            fill = circle.fill
            self._blend(fill, lambda target: pygame.draw.circle(target, fill, center, circle.radius))
        if circle.stroke is not None:
            stroke = circle.stroke
            width = max(1, int(round(circle.stroke_width)))
            self._blend(stroke, lambda target: pygame.draw.circle(target, stroke, center, circle.radius, width))

    def _draw_text(self, text: Text) -> None:
        font = self._font(text.style.family, text.style.size)
        image = font.render(text.content, True, text.style.color)
        x, y = text.position
        rect = image.get_rect()
        if text.style.align == "right":
            rect.bottomright = (round(x), round(y))
        elif text.style.align == "center":
            rect.midbottom = (round(x), round(y))
        else:
            rect.bottomleft = (round(x), round(y))
        self.surface.blit(image, rect)

    def _font(self, family: str, size: int) -> pygame.font.Font:
        key = (family, size)
        font = self._fonts.get(key)
        if font is None:
            if not pygame.font.get_init():
                pygame.font.init()
            name = _FONT_FAMILIES.get(family, family)
            font = pygame.font.SysFont(name, size) if name else pygame.font.Font(None, size)
            self._fonts[key] = font
        return font


def _sample_stops(stops: Tuple[Tuple[float, Tuple[int, int, int, int]], ...], t: float) -> Tuple[int, int, int, int]:
    if t <= stops[0][0]:
        return stops[0][1]
    for (left_t, left), (right_t, right) in zip(stops, stops[1:]):
        if t <= right_t:
            span = right_t - left_t
            mix = 0.0 if span <= 0 else (t - left_t) / span
            return tuple(int(round(a + (b - a) * mix)) for a, b in zip(left, right))  # type: ignore[return-value]
    return stops[-1][1]

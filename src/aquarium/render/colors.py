from __future__ import annotations

from typing import Tuple

import pygame

RGBA = Tuple[int, int, int, int]

WHITE: RGBA = (255, 255, 255, 255)
BLACK: RGBA = (0, 0, 0, 255)


def _to_rgba(color: pygame.Color) -> RGBA:
    return (color.r, color.g, color.b, color.a)


def parse(value: str) -> RGBA:
    return _to_rgba(pygame.Color(value))


def rgba(r: int, g: int, b: int, alpha: float) -> RGBA:
    return (r, g, b, int(round(max(0.0, min(1.0, alpha)) * 255)))


def hsl(hue: float, saturation: float, lightness: float) -> RGBA:
    color = pygame.Color(0, 0, 0)
    color.hsla = (hue % 360.0, saturation, lightness, 100.0)
    return _to_rgba(color)

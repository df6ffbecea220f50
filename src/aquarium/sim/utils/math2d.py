from __future__ import annotations

import math

from pygame.math import Vector2


def _clamp_length_xy_f(x: float, y: float, max_length: float) -> tuple[float, float]:
    if max_length <= 0.0:
        return 0.0, 0.0
    magnitude_sq = x * x + y * y
    max_sq = max_length * max_length
    if magnitude_sq <= max_sq:
        return x, y
    inv = max_length / math.sqrt(magnitude_sq)
    return x * inv, y * inv


def _heading_from_velocity(vector: Vector2) -> float:
    return math.atan2(vector.y, vector.x)


def _rotate_translate(local_x: float, local_y: float, angle: float, origin: Vector2) -> tuple[float, float]:
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    return (origin.x + local_x * cos_a - local_y * sin_a, origin.y + local_x * sin_a + local_y * cos_a)


def _clamp_value(value: float, min_value: float, max_value: float) -> float:
    return max(min_value, min(max_value, value))

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from pygame.math import Vector2


class FishType(str, Enum):
    GOLDFISH = "goldfish"
    ANGELFISH = "angelfish"
    CLOWNFISH = "clownfish"
    BETTA = "betta"
    TETRA = "tetra"
    GUPPY = "guppy"


class ActivityCategory(str, Enum):
    WORK = "work"
    COMMUNICATION = "communication"
    ENTERTAINMENT = "entertainment"
    PRODUCTIVITY = "productivity"
    LEARNING = "learning"
    OTHER = "other"


@dataclass(frozen=True, slots=True)
class Bounds:
    width: float
    height: float


@dataclass(frozen=True, slots=True)
class Fish:
    id: str
    type: FishType
    name: str
    position: Vector2
    velocity: Vector2
    size: float
    color: str
    health: float = 1.0
    age: float = 0.0
    activity_id: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "name": self.name,
            "x": self.position.x,
            "y": self.position.y,
            "vx": self.velocity.x,
            "vy": self.velocity.y,
            "size": self.size,
            "color": self.color,
            "health": self.health,
            "age": self.age,
            "activityId": self.activity_id,
        }


@dataclass(frozen=True, slots=True)
class AquariumState:
    fish: Tuple[Fish, ...] = ()
    water_quality: float = 0.8
    temperature: float = 24.0
    light_level: float = 0.7
    work_life_balance: float = 0.5

    def with_fish(self, fish: Tuple[Fish, ...]) -> "AquariumState":
        return replace(self, fish=tuple(fish))

    def with_balance(self, work_life_balance: float) -> "AquariumState":
        return replace(self, work_life_balance=work_life_balance)


@dataclass(frozen=True, slots=True)
class Activity:
    id: str
    name: str
    category: ActivityCategory
    duration: float
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    app_icon: Optional[str] = None

    @staticmethod
    def from_dict(raw: Dict[str, Any]) -> "Activity":
        if not isinstance(raw, dict) or "id" not in raw or "name" not in raw:
            raise ValueError(f"Activity is missing id or name: {raw!r}")
        try:
            category = ActivityCategory(raw.get("category", ActivityCategory.OTHER.value))
        except ValueError:
            category = ActivityCategory.OTHER
        return Activity(
            id=str(raw["id"]),
            name=str(raw["name"]),
            category=category,
            duration=float(raw.get("duration", 0.0)),
            timestamp=_parse_timestamp(raw.get("timestamp")),
            app_icon=raw.get("appIcon"),
        )

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "category": self.category.value,
            "duration": self.duration,
            "timestamp": self.timestamp.isoformat(),
        }
        if self.app_icon is not None:
            payload["appIcon"] = self.app_icon
        return payload


def _parse_timestamp(value: Any) -> datetime:
    if value is None:
        return datetime.now(timezone.utc)
    if isinstance(value, datetime):
        return value
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(float(value), tz=timezone.utc)
        except (OverflowError, OSError) as exc:
            raise ValueError(f"timestamp out of range: {value!r}") from exc
    text = str(value)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Protocol, Set, Tuple

from ..config import AppConfig, AquariumDefaults
from ..rng import RandomSource
from ..sim.core.clock import SimulationClock
from ..sim.systems.spawner import admit_fish, spawn_for_activity
from ..sim.types.state import Activity, AquariumState
from ..sim.utils.math2d import _clamp_value

logger = logging.getLogger(__name__)

Listener = Callable[[Mapping[str, Any]], None]
Unsubscribe = Callable[[], None]


class ActivitySource(Protocol):
    def get_activity_data(self) -> Awaitable[Mapping[str, Any]]: ...

    def subscribe(self, callback: Listener) -> Unsubscribe: ...


@dataclass(frozen=True)
class ActivityUpdate:
    activities: Optional[Tuple[Activity, ...]] = None
    work_life_balance: Optional[float] = None
    fish_health: Optional[Dict[str, float]] = None

    @property
    def empty(self) -> bool:
        return self.activities is None and self.work_life_balance is None and self.fish_health is None


def _finite(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    value = float(value)
    return value if math.isfinite(value) else None


def parse_update(message: Any) -> ActivityUpdate:
    if not isinstance(message, Mapping):
        raise ValueError(f"Activity update must be an object, got {type(message).__name__}")

    activities: Optional[Tuple[Activity, ...]] = None
    raw_activities = message.get("activities")
    if raw_activities is not None:
        if not isinstance(raw_activities, list):
            raise ValueError("activities must be a list")
        activities = tuple(Activity.from_dict(item) for item in raw_activities)

    balance: Optional[float] = None
    if message.get("workLifeBalance") is not None:
        balance = _finite(message["workLifeBalance"])
        if balance is None:
            raise ValueError(f"workLifeBalance must be a finite number: {message['workLifeBalance']!r}")
        balance = _clamp_value(balance, 0.0, 1.0)

    fish_health: Optional[Dict[str, float]] = None
    raw_health = message.get("fishHealth")
    if raw_health is not None:
        if not isinstance(raw_health, Mapping):
            raise ValueError("fishHealth must map fish ids to numbers")
        fish_health = {}
        for fish_id, value in raw_health.items():
            health = _finite(value)
            if health is None:
                raise ValueError(f"fishHealth[{fish_id!r}] must be a finite number")
            fish_health[str(fish_id)] = _clamp_value(health, 0.0, 1.0)

    return ActivityUpdate(activities=activities, work_life_balance=balance, fish_health=fish_health)


def _is_valid_update(message: Any) -> bool:
    try:
        parse_update(message)
    except (ValueError, TypeError):
        return False
    return True


class InMemoryActivitySource:
    def __init__(self, defaults: Optional[AquariumDefaults] = None):
        defaults = defaults or AquariumDefaults()
        self._snapshot: Dict[str, Any] = {"activities": [], "workLifeBalance": defaults.work_life_balance}
        self._listeners: List[Listener] = []

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    async def get_activity_data(self) -> Mapping[str, Any]:
        return dict(self._snapshot)

    def subscribe(self, callback: Listener) -> Unsubscribe:
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def publish(self, message: Mapping[str, Any]) -> None:
        if _is_valid_update(message):
            for key in ("activities", "workLifeBalance"):
                if message.get(key) is not None:
                    self._snapshot[key] = message[key]
        for listener in list(self._listeners):
            listener(message)


def initial_state(defaults: AquariumDefaults) -> AquariumState:
    return AquariumState(
        fish=(),
        water_quality=defaults.water_quality,
        temperature=defaults.temperature,
        light_level=defaults.light_level,
        work_life_balance=defaults.work_life_balance,
    )


class ActivityBridge:
    def __init__(
        self,
        source: ActivitySource,
        clock: SimulationClock,
        config: Optional[AppConfig] = None,
        rng: Optional[RandomSource] = None,
    ):
        self.source = source
        self.clock = clock
        self.config = config or clock.config
        self.rng = rng or clock.rng
        self._activities: Tuple[Activity, ...] = ()
        self._seen_activity_ids: Set[str] = set()
        self._unsubscribe: Optional[Unsubscribe] = None

    @property
    def activities(self) -> Tuple[Activity, ...]:
        return self._activities

    @property
    def subscribed(self) -> bool:
        return self._unsubscribe is not None

    async def start(self) -> None:
        try:
            snapshot = await self.source.get_activity_data()
        except Exception:
            logger.exception("Failed to load initial activity data")
            raise
        self.apply(parse_update(snapshot))
        if self._unsubscribe is None:
            self._unsubscribe = self.source.subscribe(self.handle_message)

    def stop(self) -> None:
        unsubscribe = self._unsubscribe
        self._unsubscribe = None
        if unsubscribe is not None:
            unsubscribe()

    def handle_message(self, message: Any) -> None:
        try:
            update = parse_update(message)
        except (ValueError, TypeError) as exc:
            logger.warning("Ignoring malformed activity update: %s", exc)
            return
        self.apply(update)

    def apply(self, update: ActivityUpdate) -> None:
        if update.empty:
            return
        new_activities: List[Activity] = []
        if update.activities is not None:
            self._activities = update.activities
            for activity in update.activities:
                if activity.id not in self._seen_activity_ids:
                    self._seen_activity_ids.add(activity.id)
                    new_activities.append(activity)
        spawn = self.config.bridge.spawn_on_new_activity
        self.clock.submit(lambda state: self._apply_to_state(state, update, new_activities if spawn else []))

    def recent_activities(self, limit: Optional[int] = None) -> List[Activity]:
        limit = self.config.bridge.recent_activity_limit if limit is None else limit
        if limit <= 0:
            return []
        return list(reversed(self._activities[-limit:]))

    def _apply_to_state(
        self, state: AquariumState, update: ActivityUpdate, new_activities: List[Activity]
    ) -> AquariumState:
        if update.work_life_balance is not None:
            state = state.with_balance(update.work_life_balance)
        if update.fish_health:
            health = update.fish_health
            state = state.with_fish(
                tuple(replace(fish, health=health[fish.id]) if fish.id in health else fish for fish in state.fish)
            )
        for activity in new_activities:
            fish = spawn_for_activity(activity, self.clock.bounds, self.rng, self.config.spawn, self.config.physics)
            state = admit_fish(state, fish, self.config.bridge.max_population)
        return state

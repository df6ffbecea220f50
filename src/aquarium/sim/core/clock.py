from __future__ import annotations

import asyncio
import logging
import time
from collections import deque
from typing import Callable, Deque, List, Optional, Protocol

from ...config import AppConfig
from ...render.primitives import Primitive
from ...render.projection import project
from ...rng import RandomSource
from ..systems.physics import step
from ..types.state import AquariumState, Bounds

logger = logging.getLogger(__name__)

TickFn = Callable[[float], object]
StateUpdate = Callable[[AquariumState], AquariumState]
Renderer = Callable[[List[Primitive]], object]


class Scheduler(Protocol):
    def start(self, tick_fn: TickFn) -> None: ...

    def stop(self) -> None: ...


class ManualScheduler:
    def __init__(self) -> None:
        self._tick_fn: Optional[TickFn] = None

    @property
    def running(self) -> bool:
        return self._tick_fn is not None

    def start(self, tick_fn: TickFn) -> None:
        self._tick_fn = tick_fn

    def stop(self) -> None:
        self._tick_fn = None

    def pulse(self, now: float) -> bool:
        tick_fn = self._tick_fn
        if tick_fn is None:
            return False
        tick_fn(now)
        return True


class AsyncioScheduler:
    def __init__(self, fps: float = 60.0, time_source: Callable[[], float] = time.perf_counter):
        self.interval = 1.0 / max(1.0, fps)
        self._time_source = time_source
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self, tick_fn: TickFn) -> None:
        if self._task is None:
            self._task = asyncio.get_running_loop().create_task(self._loop(tick_fn))

    def stop(self) -> None:
        task = self._task
        self._task = None
        if task is not None:
            task.cancel()

    async def _loop(self, tick_fn: TickFn) -> None:
        while True:
            try:
                tick_fn(self._time_source())
            except Exception:
                # tick_fn reports its own failure; the loop just ends.
                self._task = None
                return
            await asyncio.sleep(self.interval)


class SimulationClock:
    def __init__(
        self,
        state: AquariumState,
        bounds: Bounds,
        renderer: Optional[Renderer] = None,
        rng: Optional[RandomSource] = None,
        config: Optional[AppConfig] = None,
        wall_clock: Callable[[], float] = time.time,
    ):
        self.config = config or AppConfig()
        self.rng = rng or RandomSource(self.config.seed)
        self.renderer = renderer
        self.tick_count = 0
        self._state = state
        self._bounds = bounds
        self._pending_bounds: Optional[Bounds] = None
        self._updates: Deque[StateUpdate] = deque()
        self._last_time: Optional[float] = None
        self._scheduler: Optional[Scheduler] = None
        self._wall_clock = wall_clock
        self._frame: List[Primitive] = []

    @property
    def state(self) -> AquariumState:
        return self._state

    @property
    def bounds(self) -> Bounds:
        return self._pending_bounds or self._bounds

    @property
    def frame(self) -> List[Primitive]:
        return self._frame

    @property
    def running(self) -> bool:
        return self._scheduler is not None

    def submit(self, update: StateUpdate) -> None:
        self._updates.append(update)

    def resize(self, width: float, height: float) -> None:
        self._pending_bounds = Bounds(width, height)

    def start(self, scheduler: Scheduler) -> None:
        if self._scheduler is not None:
            self.stop()
        self._scheduler = scheduler
        scheduler.start(self._scheduled_tick)

    def stop(self) -> None:
        scheduler = self._scheduler
        self._scheduler = None
        if scheduler is not None:
            scheduler.stop()
        logger.debug("Simulation clock stopped after %d ticks", self.tick_count)

    def _scheduled_tick(self, now: float) -> None:
        # A callback already in flight when stop() ran must not advance the simulation.
        if self._scheduler is None:
            return
        try:
            self.tick(now)
        except Exception:
            logger.exception("Simulation tick %d failed; stopping the clock", self.tick_count)
            self.stop()
            raise

    def tick(self, now: float) -> List[Primitive]:
        state = self._state
        while self._updates:
            state = self._updates.popleft()(state)
        if self._pending_bounds is not None:
            self._bounds = self._pending_bounds
            self._pending_bounds = None

        dt = 0.0 if self._last_time is None else now - self._last_time
        state = step(state, dt, self._bounds, self.rng, self.config.physics)
        frame = project(state, self._bounds.width, self._bounds.height, self._wall_clock(), self.config.render)
        if self.renderer is not None:
            self.renderer(frame)

        self._state = state
        self._frame = frame
        self._last_time = now
        self.tick_count += 1
        return frame

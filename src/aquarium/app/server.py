from __future__ import annotations

import json
import logging
import time
from dataclasses import asdict
from typing import Any, Callable, Optional

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.responses import JSONResponse

from ..config import AppConfig
from ..rng import RandomSource
from ..sim.core.clock import AsyncioScheduler, Renderer, Scheduler, SimulationClock
from ..sim.systems.metrics import format_duration, summarize
from ..sim.types.state import Bounds
from .bridge import ActivityBridge, InMemoryActivitySource, initial_state, parse_update

logger = logging.getLogger(__name__)


class AquariumController:
    def __init__(
        self,
        config: Optional[AppConfig] = None,
        source: Optional[InMemoryActivitySource] = None,
        renderer: Optional[Renderer] = None,
        wall_clock: Callable[[], float] = time.time,
    ):
        self.config = config or AppConfig()
        self.source = source or InMemoryActivitySource(self.config.defaults)
        self.clock = SimulationClock(
            initial_state(self.config.defaults),
            Bounds(self.config.width, self.config.height),
            renderer=renderer,
            rng=RandomSource(self.config.seed),
            config=self.config,
            wall_clock=wall_clock,
        )
        self.bridge = ActivityBridge(self.source, self.clock, self.config)

    @property
    def running(self) -> bool:
        return self.clock.running

    async def start(self, scheduler: Optional[Scheduler] = None) -> None:
        if self.clock.running:
            return
        # The first frames render the placeholder state while the snapshot loads.
        self.clock.start(scheduler or AsyncioScheduler(self.config.fps))
        try:
            await self.bridge.start()
        except Exception:
            self.clock.stop()
            raise
        logger.info("Aquarium started at %dx%d", self.config.width, self.config.height)

    async def stop(self) -> None:
        self.clock.stop()
        self.bridge.stop()

    def status(self) -> dict[str, Any]:
        metrics = summarize(self.clock.state, self.clock.tick_count)
        return {
            "running": self.running,
            "tick": self.clock.tick_count,
            "metrics": asdict(metrics),
            "recentActivities": [
                {**activity.to_dict(), "durationLabel": format_duration(activity.duration)}
                for activity in self.bridge.recent_activities()
            ],
        }


def create_app(controller: Optional[AquariumController] = None, manage_lifecycle: bool = True) -> FastAPI:
    controller = controller or AquariumController()
    app = FastAPI(title="Digital Aquarium")
    app.state.controller = controller

    if manage_lifecycle:

        @app.on_event("startup")
        async def _startup() -> None:
            await controller.start()

        @app.on_event("shutdown")
        async def _shutdown() -> None:
            await controller.stop()

    @app.get("/api/activity")
    async def get_activity() -> JSONResponse:
        return JSONResponse(dict(await controller.source.get_activity_data()))

    @app.post("/api/activity")
    async def post_activity(payload: dict) -> JSONResponse:
        try:
            update = parse_update(payload)
        except (ValueError, TypeError) as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        controller.source.publish(payload)
        return JSONResponse(
            {
                "accepted": True,
                "activities": None if update.activities is None else len(update.activities),
                "workLifeBalance": update.work_life_balance,
            }
        )

    @app.get("/api/status")
    async def status() -> JSONResponse:
        return JSONResponse(controller.status())

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket) -> None:
        await websocket.accept()
        try:
            while True:
                message = await websocket.receive_text()
                try:
                    payload = json.loads(message)
                except json.JSONDecodeError:
                    continue
                controller.source.publish(payload)
                await websocket.send_text(json.dumps({"type": "ack", "tick": controller.clock.tick_count}))
        except WebSocketDisconnect:
            logger.debug("Activity monitor disconnected")

    return app


app = create_app()


__all__ = ["AquariumController", "app", "create_app"]

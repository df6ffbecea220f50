from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path
from typing import Optional

import pygame

from ..config import AppConfig
from ..render.pygame_renderer import PygameRenderer
from ..sim.core.clock import ManualScheduler
from .server import AquariumController, create_app

logger = logging.getLogger(__name__)


async def run_desktop(config: AppConfig, serve: bool = False, max_frames: Optional[int] = None) -> None:
    pygame.init()
    pygame.display.set_caption("Digital Aquarium")
    screen = pygame.display.set_mode((config.width, config.height), pygame.RESIZABLE)
    renderer = PygameRenderer(screen)
    controller = AquariumController(config, renderer=renderer)
    scheduler = ManualScheduler()
    server = None
    server_task: asyncio.Task | None = None

    if serve:
        import uvicorn

        server = uvicorn.Server(
            uvicorn.Config(create_app(controller, manage_lifecycle=False), host=config.host, port=config.port)
        )
        server_task = asyncio.create_task(server.serve())

    frame_time = 1.0 / max(1, config.fps)
    frames = 0
    startup = asyncio.create_task(controller.start(scheduler))
    try:
        running = True
        while running:
            if startup.done():
                startup.result()
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.VIDEORESIZE:
                    controller.clock.resize(event.w, event.h)
                    renderer.surface = pygame.display.get_surface()
            if not running:
                break
            scheduler.pulse(pygame.time.get_ticks() / 1000.0)
            pygame.display.flip()
            frames += 1
            if max_frames is not None and frames >= max_frames:
                break
            await asyncio.sleep(frame_time)
    finally:
        if not startup.done():
            startup.cancel()
        await controller.stop()
        if server is not None and server_task is not None:
            server.should_exit = True
            await server_task
        pygame.quit()
        logger.info("Desktop session ended after %d frames", frames)


def main() -> None:
    parser = argparse.ArgumentParser(description="Digital aquarium desktop view")
    parser.add_argument("--config", type=Path, default=None, help="YAML configuration file")
    parser.add_argument("--width", type=int, default=None)
    parser.add_argument("--height", type=int, default=None)
    parser.add_argument("--fps", type=int, default=None)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument(
        "--serve",
        action="store_true",
        help="Also serve the activity ingest API so an external monitor can push updates.",
    )
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)
    config = AppConfig.from_yaml(args.config) if args.config else AppConfig()
    for name in ("width", "height", "fps", "seed"):
        value = getattr(args, name)
        if value is not None:
            setattr(config, name, value)
    asyncio.run(run_desktop(config, serve=args.serve))


if __name__ == "__main__":
    main()

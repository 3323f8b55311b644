"""Entry point: python -m glade.server"""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
from typing import TYPE_CHECKING

import numpy as np
import uvicorn

from .config import settings

if TYPE_CHECKING:
    from fastapi import FastAPI

    from glade.env.driver import FrameDriver

logger = logging.getLogger("glade.server")


async def drive_frames(driver: FrameDriver, frames_per_second: float) -> None:
    """Tick the demo scene on the event loop so reads and ticks never interleave."""
    period = 1.0 / frames_per_second
    while True:
        driver.tick()
        await asyncio.sleep(period)


def stop_server_on_failure(server: uvicorn.Server):
    """Done-callback for the demo task: a crashed simulation shuts the server down."""

    def on_done(task: asyncio.Task) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(f"Demo simulation stopped: {exc!r}")
            server.should_exit = True

    return on_done


async def run_server(app: FastAPI, host: str, port: int, driver: FrameDriver | None, fps: float) -> None:
    """Run the server with proper shutdown handling."""
    config = uvicorn.Config(app, host=host, port=port)
    server = uvicorn.Server(config)

    loop = asyncio.get_running_loop()
    sim_task = asyncio.create_task(drive_frames(driver, fps)) if driver is not None else None
    if sim_task is not None:
        sim_task.add_done_callback(stop_server_on_failure(server))

    def handle_exit():
        if sim_task is not None:
            sim_task.cancel()
        server.should_exit = True

    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, handle_exit)

    await server.serve()


def main() -> None:
    parser = argparse.ArgumentParser(description="Glade status server")
    parser.add_argument("--host", type=str, default=settings.HOST)
    parser.add_argument("--port", type=int, default=settings.PORT)
    parser.add_argument(
        "--demo",
        choices=["none", "hummingbird", "balancer", "jumper"],
        default="none",
        help="Run a heuristic scene in-process and serve its scoreboards",
    )
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument("--fps", type=float, default=50.0, help="Demo frames per second")
    args = parser.parse_args()

    from glade.config import LoopConfig
    from glade.env.driver import FrameDriver
    from glade.env.loop import AgentEnvironmentLoop
    from glade.scenes import build_balancer_scene, build_hummingbird_scene, build_jumper_scene
    from glade.scoreboard import Scoreboard
    from glade.training.stats_collector import EpisodeStatsCollector

    from . import create_app

    collector = EpisodeStatsCollector(history=settings.EPISODE_HISTORY)
    scoreboards: dict[str, Scoreboard] = {}
    driver = None

    if args.demo != "none":
        rng = np.random.default_rng(args.seed)
        if args.demo == "hummingbird":
            scene = build_hummingbird_scene(rng)
        elif args.demo == "balancer":
            scene = build_balancer_scene()
        else:
            scene = build_jumper_scene()

        loops = []
        for agent in scene.agents:
            board = Scoreboard(countdown_s=agent.time_limit_s)
            scoreboards[agent.agent_id] = board
            loops.append(
                AgentEnvironmentLoop(
                    agent,
                    LoopConfig(seed=args.seed),
                    sink=collector,
                    scoreboard=board,
                    rng=rng,
                )
            )
        driver = FrameDriver(scene.physics, loops)
        logger.info(f"Demo scene '{args.demo}' with {len(loops)} agent(s)")

    app = create_app(scoreboards=scoreboards, collector=collector)
    asyncio.run(run_server(app, args.host, args.port, driver, args.fps))


if __name__ == "__main__":
    main()

"""Glade status server - scoreboards and episode history over HTTP."""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI

from .config import settings

if TYPE_CHECKING:
    from glade.scoreboard import Scoreboard
    from glade.training.stats_collector import EpisodeStatsCollector

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger("glade.server")

_server_start_time: float = 0.0


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    global _server_start_time
    _server_start_time = time.time()
    logger.info(f"Glade server starting on {settings.HOST}:{settings.PORT}")
    yield
    logger.info("Glade server shutting down...")


def create_app(
    *,
    scoreboards: dict[str, Scoreboard] | None = None,
    collector: EpisodeStatsCollector | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        scoreboards: Live scoreboards keyed by agent id. Routes answer 503 without them.
        collector: Episode sink shared with the running loops. Routes answer 503 without it.
    """
    from .models import HealthResponse
    from .routes import episodes as episode_routes
    from .routes import scoreboard as scoreboard_routes

    app = FastAPI(lifespan=lifespan, title="Glade Server")

    if scoreboards is not None:
        scoreboard_routes.init_scoreboard_routes(scoreboards)
    if collector is not None:
        episode_routes.init_episode_routes(collector)
    app.include_router(scoreboard_routes.router)
    app.include_router(episode_routes.router)

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return HealthResponse(
            status="ok",
            agents=len(scoreboards) if scoreboards is not None else 0,
            episodes=len(collector.summaries) if collector is not None else 0,
            uptime_s=time.time() - _server_start_time if _server_start_time else 0.0,
        )

    return app

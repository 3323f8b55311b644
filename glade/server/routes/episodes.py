"""Episode history endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, HTTPException, Query

from ..config import settings
from ..models import EpisodeAggregate, EpisodeView

if TYPE_CHECKING:
    from glade.training.stats_collector import EpisodeStatsCollector

router = APIRouter(prefix="/api", tags=["episodes"])

# Module-level state set by init_episode_routes
_collector: EpisodeStatsCollector | None = None


def init_episode_routes(collector: EpisodeStatsCollector) -> None:
    """Initialize routes with the episode collector."""
    global _collector
    _collector = collector


@router.get("/episodes")
def list_episodes(
    agent_id: str | None = None,
    limit: int = Query(default=settings.EPISODE_LIST_LIMIT, ge=1, le=1000),
) -> list[EpisodeView]:
    """Most recent episodes, oldest first."""
    if _collector is None:
        raise HTTPException(503, "Episode collector not initialized")

    if agent_id is not None and agent_id not in _collector.per_agent:
        raise HTTPException(404, f"Agent '{agent_id}' not found")
    return [EpisodeView(**s.to_dict()) for s in _collector.recent(limit, agent_id)]


@router.get("/episodes/summary")
def get_summary() -> EpisodeAggregate:
    if _collector is None:
        raise HTTPException(503, "Episode collector not initialized")
    return EpisodeAggregate(**_collector.aggregate())

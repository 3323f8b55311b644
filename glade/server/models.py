"""Pydantic models for API responses."""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    agents: int
    episodes: int
    uptime_s: float


class ScoreboardView(BaseModel):
    """Score and timer display state for one agent."""

    agent_id: str
    score: int
    timer: float
    countdown: bool
    episodes: int
    score_text: str
    timer_text: str


class EpisodeView(BaseModel):
    """A finished episode."""

    agent_id: str
    episode_index: int
    cumulative_reward: float
    step_count: int
    reason: str


class AgentStatsView(BaseModel):
    episodes: int
    mean_reward: float
    mean_length: float
    best_reward: float
    reasons: dict[str, int]


class EpisodeAggregate(BaseModel):
    """Aggregate statistics across all reported episodes."""

    episodes: int
    recent_mean_reward: float
    recent_mean_length: float
    agents: dict[str, AgentStatsView]

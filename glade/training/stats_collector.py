"""Episode statistics collection.

Implements the loop's EpisodeSink: every finished episode reports a summary
here, and aggregates are computed on demand. Keep it lightweight; it sits on
the training hot path.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import numpy as np

from ..env.episode import EpisodeSummary


@dataclass
class AgentEpisodeStats:
    """Accumulator for one agent's finished episodes."""

    episodes: int = 0
    total_reward: float = 0.0
    total_steps: int = 0
    best_reward: float = float("-inf")
    reasons: dict[str, int] = field(default_factory=dict)

    def add(self, summary: EpisodeSummary) -> None:
        self.episodes += 1
        self.total_reward += summary.cumulative_reward
        self.total_steps += summary.step_count
        self.best_reward = max(self.best_reward, summary.cumulative_reward)
        self.reasons[summary.reason] = self.reasons.get(summary.reason, 0) + 1

    def to_dict(self) -> dict[str, Any]:
        n = max(1, self.episodes)
        return {
            "episodes": self.episodes,
            "mean_reward": self.total_reward / n,
            "mean_length": self.total_steps / n,
            "best_reward": self.best_reward if self.episodes else 0.0,
            "reasons": dict(self.reasons),
        }


class EpisodeStatsCollector:
    def __init__(self, history: int = 1000) -> None:
        """
        Args:
            history: Number of most recent summaries kept for listing.
        """
        self.history = int(history)
        self.summaries: list[EpisodeSummary] = []
        self.per_agent: dict[str, AgentEpisodeStats] = {}

    def report(self, summary: EpisodeSummary) -> None:
        self.summaries.append(summary)
        if len(self.summaries) > self.history:
            del self.summaries[: len(self.summaries) - self.history]
        self.per_agent.setdefault(summary.agent_id, AgentEpisodeStats()).add(summary)

    def recent(self, limit: int = 50, agent_id: str | None = None) -> list[EpisodeSummary]:
        items = [s for s in self.summaries if agent_id is None or s.agent_id == agent_id]
        return items[-limit:] if limit > 0 else []

    def aggregate(self) -> dict[str, Any]:
        rewards = [s.cumulative_reward for s in self.summaries]
        lengths = [s.step_count for s in self.summaries]
        return {
            "episodes": sum(a.episodes for a in self.per_agent.values()),
            "recent_mean_reward": float(np.mean(rewards)) if rewards else 0.0,
            "recent_mean_length": float(np.mean(lengths)) if lengths else 0.0,
            "agents": {aid: stats.to_dict() for aid, stats in self.per_agent.items()},
        }

"""Training-side collaborators for the agent loop.

- stats_collector: EpisodeSink that aggregates episode summaries (EpisodeStatsCollector)
- evaluation: Seeded policy evaluation (evaluate_policy, EvalStats)
"""

from glade.training.evaluation import EvalStats, evaluate_policy
from glade.training.stats_collector import AgentEpisodeStats, EpisodeStatsCollector

__all__ = [
    "AgentEpisodeStats",
    "EpisodeStatsCollector",
    "EvalStats",
    "evaluate_policy",
]

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class EpisodeSummary:
    """What the training backend receives when an episode ends."""

    agent_id: str
    episode_index: int
    cumulative_reward: float
    step_count: int
    reason: str

    def to_dict(self) -> dict[str, float | int | str]:
        return {
            "agent_id": self.agent_id,
            "episode_index": self.episode_index,
            "cumulative_reward": self.cumulative_reward,
            "step_count": self.step_count,
            "reason": self.reason,
        }


@dataclass
class EpisodeState:
    """Per-episode reward and step accounting.

    Reward is a plain running sum, reset to zero only by `begin()`.
    """

    cumulative_reward: float = 0.0
    step_count: int = 0
    active: bool = False
    episode_index: int = -1

    def begin(self) -> None:
        self.cumulative_reward = 0.0
        self.step_count = 0
        self.active = True
        self.episode_index += 1

    def add_reward(self, value: float) -> None:
        if not self.active:
            raise RuntimeError("cannot add reward outside of an active episode")
        self.cumulative_reward += float(value)

    def advance(self) -> int:
        if not self.active:
            raise RuntimeError("cannot advance an inactive episode")
        self.step_count += 1
        return self.step_count

    def end(self, agent_id: str, reason: str) -> EpisodeSummary:
        self.active = False
        return EpisodeSummary(
            agent_id=agent_id,
            episode_index=self.episode_index,
            cumulative_reward=self.cumulative_reward,
            step_count=self.step_count,
            reason=reason,
        )

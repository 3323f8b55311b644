"""Reward computation for the agent/environment loop.

Design:
- RewardWeights: fixed magnitudes for each reward component
- StepContext: the triggers collected during one tick
- RewardComputer: stateless computation of rewards from context

Components compose additively and are never normalized. The episode's
cumulative reward is an unbounded running sum reset only at episode begin.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from ..sim.body import normalized


@dataclass
class RewardWeights:
    """Magnitudes for every reward component.

    - survival: per full second the agent stays in play (balancer)
    - nectar_base / nectar_alignment: per nectar contact; the alignment part
      scales with how squarely the beak faces the flower (hummingbird)
    - boundary: touching the area boundary (hummingbird)
    - fall: the ball touching the boundary, which also ends the episode (balancer)
    - target_hit: forward raycast hits the target (jumper)
    - ceiling: per tick spent above the ceiling height (jumper)
    """

    survival: float = 0.1
    nectar_base: float = 0.01
    nectar_alignment: float = 0.02
    boundary: float = -0.5
    fall: float = -1.0
    target_hit: float = 1.0
    ceiling: float = -0.1


@dataclass
class StepContext:
    """Per-tick reward triggers, filled by the agent's event and update hooks."""

    survival_seconds: int = 0
    # Clamped [0, 1] alignment for each successful nectar contact this tick.
    nectar_alignments: list[float] = field(default_factory=list)
    boundary_collisions: int = 0
    falls: int = 0
    target_hits: int = 0
    above_ceiling: bool = False

    # Not rewards: episode control and presentation signals.
    terminal: bool = False
    terminal_reason: str = ""
    score_increments: int = 0

    def end(self, reason: str) -> None:
        self.terminal = True
        if not self.terminal_reason:
            self.terminal_reason = reason


@dataclass
class RewardComponents:
    """Breakdown of reward into components for debugging/analysis."""

    survival: float = 0.0
    nectar: float = 0.0
    boundary: float = 0.0
    fall: float = 0.0
    target_hit: float = 0.0
    ceiling: float = 0.0

    def total(self) -> float:
        return self.survival + self.nectar + self.boundary + self.fall + self.target_hit + self.ceiling

    def to_dict(self) -> dict[str, float]:
        return {
            "survival": self.survival,
            "nectar": self.nectar,
            "boundary": self.boundary,
            "fall": self.fall,
            "target_hit": self.target_hit,
            "ceiling": self.ceiling,
        }


def alignment_bonus(heading: np.ndarray, target_up: np.ndarray) -> float:
    """How squarely `heading` faces into a target whose outward normal is `target_up`.

    1 means pointing straight at the target face, 0 means perpendicular or away.
    """
    return float(np.clip(np.dot(normalized(heading), -normalized(target_up)), 0.0, 1.0))


class RewardComputer:
    """Stateless reward computation from step context."""

    def __init__(self, weights: RewardWeights | None = None):
        self.weights = weights or RewardWeights()

    def compute(self, ctx: StepContext) -> RewardComponents:
        w = self.weights
        comp = RewardComponents()
        comp.survival = w.survival * ctx.survival_seconds
        comp.nectar = sum(w.nectar_base + w.nectar_alignment * a for a in ctx.nectar_alignments)
        comp.boundary = w.boundary * ctx.boundary_collisions
        comp.fall = w.fall * ctx.falls
        comp.target_hit = w.target_hit * ctx.target_hits
        if ctx.above_ceiling:
            comp.ceiling = w.ceiling
        return comp

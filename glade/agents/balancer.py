"""Balancer: tilts a platform to keep a ball on it."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from ..actions import TiltIndex
from ..config import BalancerConfig
from ..constants import BALANCER_OBS_SLOTS, CLOCK_EPS, SURVIVAL_PERIOD_S, TAG_BOUNDARY
from ..control.smoothing import SmoothedAxis
from ..env.decoder import TiltDecoder
from .base import AgentBehavior
from .heuristic import InputState, Key, axis

if TYPE_CHECKING:
    from ..env.rewards import StepContext
    from ..sim.physics import CollisionEvent, PhysicsProvider


class BalancerAgent(AgentBehavior):
    """
    Observations (7): ball position xyz (3), platform rotation quaternion (4).
    Actions (2 continuous): tilt right (about x), tilt up (about z).

    Earns the survival bonus once per second in play; the ball touching a
    boundary collider is penalized and ends the episode.
    """

    observation_slots = BALANCER_OBS_SLOTS

    def __init__(
        self,
        agent_id: str,
        physics: PhysicsProvider,
        body_id: str,
        ball_id: str,
        config: BalancerConfig | None = None,
    ):
        self.config = config or BalancerConfig()
        super().__init__(agent_id, physics, body_id, TiltDecoder(self.config))
        self.ball_id = ball_id
        self.axes = [SmoothedAxis(self.config.smoothing_rate), SmoothedAxis(self.config.smoothing_rate)]
        self._stock_position: np.ndarray | None = None
        self._ball_stock_position: np.ndarray | None = None
        self._survival_clock = 0.0

    @property
    def body_ids(self) -> frozenset[str]:
        return frozenset({self.body_id, self.ball_id})

    def initialize(self, rng: np.random.Generator) -> None:
        self._stock_position = self.physics.body(self.body_id).position.copy()
        self._ball_stock_position = self.physics.body(self.ball_id).position.copy()

    def on_episode_begin(self, rng: np.random.Generator) -> None:
        if self._stock_position is None or self._ball_stock_position is None:
            raise RuntimeError("BalancerAgent.initialize() must run before the first episode")
        self.physics.zero_velocity(self.ball_id)
        self.physics.set_pose(self.ball_id, self._ball_stock_position)
        tilt = self.config.initial_tilt
        rotation = np.array([rng.uniform(-tilt, tilt), 0.0, rng.uniform(-tilt, tilt)])
        self.physics.set_pose(self.body_id, self._stock_position, rotation)
        self.reset_axes()
        self._survival_clock = 0.0

    def collect_observations(self) -> np.ndarray:
        ball = self.physics.body(self.ball_id)
        platform = self.physics.body(self.body_id)
        return np.concatenate([ball.position, platform.quaternion()]).astype(np.float32)

    def heuristic(self, inputs: InputState) -> np.ndarray:
        action = np.zeros(self.action_spec.size, dtype=np.float32)
        action[TiltIndex.RIGHT] = axis(inputs, Key.RIGHT_ARROW, Key.LEFT_ARROW)
        action[TiltIndex.UP] = axis(inputs, Key.UP_ARROW, Key.DOWN_ARROW)
        return action

    def on_event(self, event: CollisionEvent, ctx: StepContext) -> None:
        if event.body_id == self.ball_id and event.tag == TAG_BOUNDARY:
            ctx.falls += 1
            if self.config.end_on_boundary:
                ctx.end("ball_fell")

    def on_fixed_update(self, dt: float, ctx: StepContext) -> None:
        self._survival_clock += dt
        if self._survival_clock >= SURVIVAL_PERIOD_S - CLOCK_EPS:
            self._survival_clock = 0.0
            ctx.survival_seconds += 1
            ctx.score_increments += 1

"""Jumper: flaps upward to line a forward raycast up with a target."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from ..actions import JumpCommand
from ..config import JumperConfig
from ..constants import JUMPER_OBS_SLOTS
from ..env.decoder import JumpDecoder
from .base import AgentBehavior
from .heuristic import InputState, Key

if TYPE_CHECKING:
    from ..env.rewards import StepContext
    from ..sim.physics import PhysicsProvider


class JumperAgent(AgentBehavior):
    """
    Observations (2): player height, target height.
    Action (1 discrete branch of 2): 0 = idle, 1 = apply upward force.

    A forward raycast hitting the target scores and respawns the target at
    a new random height. Time above the ceiling is penalized every tick.
    """

    observation_slots = JUMPER_OBS_SLOTS

    def __init__(
        self,
        agent_id: str,
        physics: PhysicsProvider,
        body_id: str,
        target_collider_id: str,
        origin: np.ndarray | None = None,
        config: JumperConfig | None = None,
    ):
        self.config = config or JumperConfig()
        super().__init__(agent_id, physics, body_id, JumpDecoder(self.config))
        self.target_collider_id = target_collider_id
        self.origin = np.zeros(3) if origin is None else np.asarray(origin, dtype=np.float64)
        self.time_limit_s = float(self.config.episode_seconds)
        self.target_y = 0.0
        self._spawn_position: np.ndarray | None = None
        self._rng: np.random.Generator | None = None

    def initialize(self, rng: np.random.Generator) -> None:
        self._spawn_position = self.physics.body(self.body_id).position.copy()
        self._rng = rng

    def on_episode_begin(self, rng: np.random.Generator) -> None:
        if self._spawn_position is None:
            raise RuntimeError("JumperAgent.initialize() must run before the first episode")
        self._rng = rng
        self.physics.set_pose(self.body_id, self._spawn_position)
        self.physics.zero_velocity(self.body_id)
        self.spawn_target()

    def spawn_target(self) -> float:
        """Move the target to a random height in front of the player."""
        assert self._rng is not None
        ox, oz = self.config.target_offset
        self.target_y = float(self._rng.uniform(*self.config.target_height))
        self.physics.move_collider(self.target_collider_id, self.origin + np.array([ox, self.target_y, oz]))
        return self.target_y

    def collect_observations(self) -> np.ndarray:
        body = self.physics.body(self.body_id)
        return np.array([body.position[1], self.target_y], dtype=np.float32)

    def heuristic(self, inputs: InputState) -> np.ndarray:
        code = JumpCommand.FLY if inputs.is_down(Key.SPACE) else JumpCommand.IDLE
        return np.array([int(code)], dtype=np.int64)

    def on_fixed_update(self, dt: float, ctx: StepContext) -> None:
        body = self.physics.body(self.body_id)
        hit = self.physics.raycast(body.position, body.forward())
        if hit is not None and hit.tag == self.config.target_tag:
            ctx.target_hits += 1
            ctx.score_increments += 1
            self.spawn_target()

        if body.position[1] > self.config.ceiling_height:
            ctx.above_ceiling = True

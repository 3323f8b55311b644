from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import TYPE_CHECKING

import numpy as np

from ..control.smoothing import SmoothedAxis

if TYPE_CHECKING:
    from ..env.decoder import ActionDecoder, ActionSpec, ControlCommand
    from ..env.rewards import StepContext
    from ..sim.physics import CollisionEvent, PhysicsProvider
    from .heuristic import InputState


class AgentBehavior(ABC):
    """The capability set every agent variant implements.

    initialize / on_episode_begin / collect_observations / on_action_received /
    heuristic mirror the episodic agent protocol. on_event and on_fixed_update
    are where collision messages and timers turn into reward triggers on the
    tick's StepContext.
    """

    observation_slots: int
    # 0 disables the wall-clock episode limit.
    time_limit_s: float = 0.0

    def __init__(self, agent_id: str, physics: PhysicsProvider, body_id: str, decoder: ActionDecoder):
        self.agent_id = agent_id
        self.physics = physics
        self.body_id = body_id
        self.decoder = decoder
        self.axes: list[SmoothedAxis] = []
        self.training_mode = True
        self.frozen = False

    @property
    def action_spec(self) -> ActionSpec:
        return self.decoder.spec

    @property
    def body_ids(self) -> frozenset[str]:
        """Bodies whose collision events are routed to this agent."""
        return frozenset({self.body_id})

    def initialize(self, rng: np.random.Generator) -> None:
        """One-time setup before the first episode."""

    @abstractmethod
    def on_episode_begin(self, rng: np.random.Generator) -> None: ...

    @abstractmethod
    def collect_observations(self) -> Sequence[float] | np.ndarray: ...

    @abstractmethod
    def heuristic(self, inputs: InputState) -> np.ndarray: ...

    def on_action_received(self, action: np.ndarray, dt: float) -> ControlCommand | None:
        """Decode the raw action and apply it to the physics collaborator.

        Returns the applied command, or None when the agent is frozen.
        """
        if self.frozen:
            return None
        body = self.physics.body(self.body_id)
        command = self.decoder.decode(action, self.axes, body.rotation, dt)
        self.apply_command(command)
        return command

    def apply_command(self, command: ControlCommand) -> None:
        if command.force.any():
            self.physics.apply_force(self.body_id, command.force)
        if command.rotation is not None:
            self.physics.set_rotation(self.body_id, command.rotation)

    def on_event(self, event: CollisionEvent, ctx: StepContext) -> None:
        """Handle one collision message delivered to this agent's bodies."""

    def on_fixed_update(self, dt: float, ctx: StepContext) -> None:
        """Per-tick checks that are not driven by the chosen action."""

    def reset_axes(self) -> None:
        for ax in self.axes:
            ax.reset()

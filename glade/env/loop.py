"""The episodic agent/environment loop.

One `tick(dt)` processes exactly one agent step, synchronously:

  fixed update -> observe -> decide -> decode/apply -> events -> reward -> terminate

State machine:

  UNINITIALIZED -> READY -> RUNNING -> EPISODE_ENDING -> READY -> ...

A tick issued while READY begins a new episode first. Episodes may also be
ended from outside with `end_episode()`, but only between ticks; reward
accumulated up to that point is kept in the summary.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Protocol

import numpy as np

from ..agents.heuristic import NO_INPUT, InputState
from ..config import LoopConfig
from ..constants import CLOCK_EPS
from ..errors import MissingTarget
from .episode import EpisodeState, EpisodeSummary
from .observations import ObservationBuilder
from .rewards import RewardComponents, RewardComputer, StepContext

if TYPE_CHECKING:
    from ..agents.base import AgentBehavior
    from ..scoreboard import Scoreboard
    from ..sim.physics import CollisionEvent
    from .decoder import ActionSpec, ControlCommand

logger = logging.getLogger(__name__)


class Policy(Protocol):
    """Anything that maps an observation to an action for a declared schema."""

    def act(self, observation: np.ndarray, action_spec: ActionSpec) -> np.ndarray: ...


class EpisodeSink(Protocol):
    """Receives a summary when each episode ends (training backend, stats)."""

    def report(self, summary: EpisodeSummary) -> None: ...


class LoopState(Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    RUNNING = "running"
    EPISODE_ENDING = "episode_ending"


@dataclass
class TickResult:
    observation: np.ndarray
    action: np.ndarray
    command: ControlCommand | None
    reward: float
    components: RewardComponents
    step_count: int
    done: bool = False
    reason: str = ""
    summary: EpisodeSummary | None = None
    used_fallback_obs: bool = False
    events: list[str] = field(default_factory=list)


class AgentEnvironmentLoop:
    def __init__(
        self,
        behavior: AgentBehavior,
        config: LoopConfig | None = None,
        *,
        policy: Policy | None = None,
        input_source: Callable[[], InputState] | None = None,
        sink: EpisodeSink | None = None,
        scoreboard: Scoreboard | None = None,
        reward_computer: RewardComputer | None = None,
        rng: np.random.Generator | None = None,
    ):
        self.behavior = behavior
        self.config = config or LoopConfig()
        self.policy = policy
        self.input_source = input_source or (lambda: NO_INPUT)
        self.sink = sink
        self.scoreboard = scoreboard
        self.reward_computer = reward_computer or RewardComputer()
        self.rng = rng if rng is not None else np.random.default_rng(self.config.seed)

        self.state = LoopState.UNINITIALIZED
        self.episode = EpisodeState()
        self.elapsed_s = 0.0
        self.last_summary: EpisodeSummary | None = None
        self._events: deque[CollisionEvent] = deque()

        self._obs_builder = ObservationBuilder(behavior.observation_slots)
        self.observation_space = self._obs_builder.to_space()
        self.action_space = behavior.action_spec.to_space()

    @property
    def agent_id(self) -> str:
        return self.behavior.agent_id

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def initialize(self) -> None:
        if self.state != LoopState.UNINITIALIZED:
            raise RuntimeError(f"{self.agent_id}: initialize() called twice")
        self.behavior.training_mode = self.config.training_mode
        self.behavior.initialize(self.rng)
        self.state = LoopState.READY

    def begin_episode(self) -> None:
        if self.state == LoopState.UNINITIALIZED:
            self.initialize()
        if self.state != LoopState.READY:
            raise RuntimeError(f"{self.agent_id}: cannot begin an episode while {self.state.value}")

        # The behavior may fail loudly here (e.g. no safe spawn); the loop
        # then stays READY and no episode starts.
        self.behavior.on_episode_begin(self.rng)
        self.episode.begin()
        self.elapsed_s = 0.0
        self._events.clear()
        if self.scoreboard is not None:
            self.scoreboard.reset()
        self.state = LoopState.RUNNING
        logger.info(f"{self.agent_id}: episode {self.episode.episode_index} begin")

    def end_episode(self, reason: str = "external") -> EpisodeSummary:
        if self.state != LoopState.RUNNING:
            raise RuntimeError(f"{self.agent_id}: no running episode to end ({self.state.value})")
        self.state = LoopState.EPISODE_ENDING
        summary = self.episode.end(self.agent_id, reason)
        if self.sink is not None:
            self.sink.report(summary)
        self.last_summary = summary
        logger.info(
            f"{self.agent_id}: episode {summary.episode_index} end ({reason}) "
            f"reward={summary.cumulative_reward:.3f} steps={summary.step_count}"
        )
        self.state = LoopState.READY
        return summary

    def post_event(self, event: CollisionEvent) -> None:
        """Queue a collision message for the next tick."""
        self._events.append(event)

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------

    def tick(self, dt: float | None = None) -> TickResult:
        dt = self.config.dt if dt is None else float(dt)
        if self.state != LoopState.RUNNING:
            self.begin_episode()

        behavior = self.behavior
        ctx = StepContext()

        behavior.on_fixed_update(dt, ctx)

        obs, fallback = self._observe()
        action = self._decide(obs)
        command = behavior.on_action_received(action, dt)

        event_tags: list[str] = []
        while self._events:
            event = self._events.popleft()
            event_tags.append(event.tag)
            behavior.on_event(event, ctx)

        components = self.reward_computer.compute(ctx)
        reward = components.total()
        if reward != 0.0:
            self.episode.add_reward(reward)
        step = self.episode.advance()
        self.elapsed_s += dt

        if self.scoreboard is not None:
            if ctx.score_increments:
                self.scoreboard.on_score_incremented(ctx.score_increments)
            self.scoreboard.on_timer_elapsed(dt)

        result = TickResult(
            observation=obs,
            action=action,
            command=command,
            reward=reward,
            components=components,
            step_count=step,
            used_fallback_obs=fallback,
            events=event_tags,
        )

        reason = self._termination_reason(ctx, step)
        if reason:
            result.done = True
            result.reason = reason
            result.summary = self.end_episode(reason)
        return result

    def _observe(self) -> tuple[np.ndarray, bool]:
        try:
            return self._obs_builder.build(self.behavior.collect_observations), False
        except MissingTarget as e:
            logger.debug(f"{self.agent_id}: {e}; emitting empty observation")
            return self._obs_builder.empty(), True

    def _decide(self, obs: np.ndarray) -> np.ndarray:
        if self.policy is not None:
            return np.asarray(self.policy.act(obs, self.behavior.action_spec))
        return np.asarray(self.behavior.heuristic(self.input_source()))

    def _termination_reason(self, ctx: StepContext, step: int) -> str:
        if ctx.terminal:
            return ctx.terminal_reason or "terminal"
        cfg = self.config
        if cfg.training_mode and cfg.max_steps > 0 and step >= cfg.max_steps:
            return "max_steps"
        limit = self.behavior.time_limit_s
        if limit > 0.0 and self.elapsed_s >= limit - CLOCK_EPS:
            return "timeout"
        return ""

    def run_episode(self, max_ticks: int | None = None) -> EpisodeSummary:
        """Tick until the episode ends; truncate after `max_ticks` if given."""
        if self.state != LoopState.RUNNING:
            self.begin_episode()
        ticks = 0
        while True:
            result = self.tick()
            ticks += 1
            if result.done:
                assert result.summary is not None
                return result.summary
            if max_ticks is not None and ticks >= max_ticks:
                return self.end_episode("truncated")

    def ticks(self, dt: float | None = None) -> Iterator[TickResult]:
        """Endless stream of ticks; each `next()` advances exactly one step."""
        while True:
            yield self.tick(dt)

"""Fixed-timestep frame driver.

Several agents may share one physics provider (and the resources in it).
Each frame ticks every loop in order, then steps physics once and routes the
resulting collision messages to the loop that owns the touching body. Ticks
never overlap, which is what makes the unlocked read-modify-write on shared
resources safe.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..sim.physics import PointMassPhysics
    from .episode import EpisodeSummary
    from .loop import AgentEnvironmentLoop, TickResult


class FrameDriver:
    def __init__(self, physics: PointMassPhysics, loops: list[AgentEnvironmentLoop], dt: float = 0.02):
        if dt <= 0.0:
            raise ValueError(f"dt must be positive, got {dt}")
        self.physics = physics
        self.loops = list(loops)
        self.dt = float(dt)
        self.frame = 0
        self._owners: dict[str, AgentEnvironmentLoop] = {}
        for loop in self.loops:
            for body_id in loop.behavior.body_ids:
                if body_id in self._owners:
                    raise ValueError(f"Body {body_id!r} is controlled by more than one agent")
                self._owners[body_id] = loop

    def tick(self) -> list[TickResult]:
        results = [loop.tick(self.dt) for loop in self.loops]
        for event in self.physics.step(self.dt):
            owner = self._owners.get(event.body_id)
            if owner is not None:
                owner.post_event(event)
        self.frame += 1
        return results

    def run(self, frames: int) -> list[EpisodeSummary]:
        """Run a number of frames and return every episode summary produced."""
        summaries: list[EpisodeSummary] = []
        for _ in range(frames):
            for result in self.tick():
                if result.summary is not None:
                    summaries.append(result.summary)
        return summaries

    def run_until_done(self, loop: AgentEnvironmentLoop, max_frames: int) -> EpisodeSummary:
        """Run frames until `loop` finishes an episode; truncate it at `max_frames`."""
        index = self.loops.index(loop)
        for _ in range(max_frames):
            result = self.tick()[index]
            if result.summary is not None:
                return result.summary
        return loop.end_episode("truncated")

"""Policy evaluation over seeded episodes."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

import numpy as np
import torch

from ..config import LoopConfig
from ..env.driver import FrameDriver
from ..env.loop import AgentEnvironmentLoop, Policy
from ..scenes import Scene


@dataclass
class EvalStats:
    """Evaluation results."""

    mean_reward: float
    std_reward: float
    mean_episode_length: float
    episodes: int
    rewards: list[float]


@torch.no_grad()
def evaluate_policy(
    make_scene: Callable[[np.random.Generator], Scene],
    policy: Policy | None,
    episodes: int,
    seeds: list[int],
    *,
    dt: float = 0.02,
    max_frames: int = 5000,
) -> EvalStats:
    """Run one episode per seed for the first agent of a freshly built scene.

    Args:
        make_scene: Builds a scene from a seeded RNG
        policy: Policy to evaluate; None uses the agent's heuristic with no input
        episodes: Number of evaluation episodes
        seeds: Seeds for scene construction and episode randomization (must match episodes count)
        dt: Fixed timestep
        max_frames: Truncation limit per episode
    """
    if len(seeds) != episodes:
        raise ValueError(f"seeds length ({len(seeds)}) must match episodes ({episodes})")

    rewards: list[float] = []
    lengths: list[int] = []
    for seed in seeds:
        rng = np.random.default_rng(int(seed))
        scene = make_scene(rng)
        behavior = scene.agents[0]
        loop = AgentEnvironmentLoop(
            behavior,
            LoopConfig(dt=dt, training_mode=True, max_steps=max_frames),
            policy=policy,
            rng=rng,
        )
        driver = FrameDriver(scene.physics, [loop], dt=dt)
        summary = driver.run_until_done(loop, max_frames)
        rewards.append(summary.cumulative_reward)
        lengths.append(summary.step_count)

    return EvalStats(
        mean_reward=float(np.mean(rewards)) if rewards else 0.0,
        std_reward=float(np.std(rewards)) if rewards else 0.0,
        mean_episode_length=float(np.mean(lengths)) if lengths else 0.0,
        episodes=episodes,
        rewards=rewards,
    )

# ruff: noqa: E402
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import numpy as np

from glade import AgentEnvironmentLoop, LoopConfig
from glade.env.driver import FrameDriver
from glade.scenes import Scene, build_balancer_scene, build_hummingbird_scene, build_jumper_scene
from glade.scoreboard import Scoreboard
from glade.training import EpisodeStatsCollector


def build_scene(agent: str, rng: np.random.Generator, num_agents: int) -> Scene:
    if agent == "hummingbird":
        return build_hummingbird_scene(rng, num_agents=num_agents)
    if agent == "balancer":
        return build_balancer_scene()
    return build_jumper_scene()


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--agent", type=str, default="balancer", choices=["hummingbird", "balancer", "jumper"])
    parser.add_argument("--episodes", type=int, default=3)
    parser.add_argument("--max-frames", type=int, default=2000, help="Frame budget per run")
    parser.add_argument("--num-agents", type=int, default=1, help="Hummingbirds sharing one flower area")
    parser.add_argument("--dt", type=float, default=0.02)
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument("--gameplay", action="store_true", help="Run with training_mode=False")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format="%(levelname)s %(message)s")

    rng = np.random.default_rng(args.seed)
    scene = build_scene(args.agent, rng, args.num_agents)
    collector = EpisodeStatsCollector()
    cfg = LoopConfig(dt=args.dt, training_mode=not args.gameplay, seed=args.seed)
    loops = [
        AgentEnvironmentLoop(
            agent,
            cfg,
            sink=collector,
            scoreboard=Scoreboard(countdown_s=agent.time_limit_s),
            rng=rng,
        )
        for agent in scene.agents
    ]
    driver = FrameDriver(scene.physics, loops, dt=args.dt)

    frames = 0
    while frames < args.max_frames and len(collector.summaries) < args.episodes:
        driver.tick()
        frames += 1

    for summary in collector.summaries:
        print(f"episode: {summary.to_dict()}")
    for loop in loops:
        print(f"{loop.agent_id}: {loop.scoreboard.score_text} {loop.scoreboard.timer_text}")
    print("summary:", collector.aggregate())


if __name__ == "__main__":
    main()

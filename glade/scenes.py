"""Ready-made scenes for each agent on the point-mass physics provider.

Used by scripts, evaluation and tests. A real engine integration would build
its own bodies and colliders and hand the same agent classes its provider.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from .agents.balancer import BalancerAgent
from .agents.base import AgentBehavior
from .agents.hummingbird import HummingbirdAgent
from .agents.jumper import JumperAgent
from .config import BalancerConfig, HummingbirdConfig, JumperConfig
from .constants import AREA_DIAMETER, TAG_BOUNDARY
from .sim.body import BodyState
from .sim.flowers import FlowerArea
from .sim.physics import Collider, PointMassPhysics

GRAVITY = (0.0, -9.81, 0.0)


@dataclass
class Scene:
    physics: PointMassPhysics
    agents: list[AgentBehavior]
    flower_area: FlowerArea | None = None


def add_boundary_ring(
    physics: PointMassPhysics,
    center: np.ndarray,
    radius: float,
    *,
    count: int = 16,
    post_radius: float = 1.0,
    height: float = 0.0,
    prefix: str = "boundary",
) -> None:
    """Approximate a circular wall with a ring of solid spheres."""
    for i in range(count):
        angle = 2.0 * math.pi * i / count
        pos = np.asarray(center, dtype=np.float64) + np.array(
            [math.sin(angle) * radius, height, math.cos(angle) * radius]
        )
        physics.add_collider(Collider(f"{prefix}{i}", pos, post_radius, tag=TAG_BOUNDARY))


def build_hummingbird_scene(
    rng: np.random.Generator,
    *,
    num_agents: int = 1,
    config: HummingbirdConfig | None = None,
    num_plants: int = 6,
    flowers_per_plant: int = 3,
) -> Scene:
    config = config or HummingbirdConfig()

    physics = PointMassPhysics(drag=0.5)
    area = FlowerArea.generate(
        rng, num_plants=num_plants, flowers_per_plant=flowers_per_plant, physics=physics
    )
    add_boundary_ring(physics, area.center, AREA_DIAMETER * 0.5 + 1.0, height=1.5)

    agents: list[AgentBehavior] = []
    for i in range(num_agents):
        body_id = f"bird{i}"
        physics.add_body(
            BodyState(
                body_id,
                position=area.center + np.array([0.0, 2.0 + i, 0.0]),
                use_gravity=False,
                contact_offset=np.array([0.0, 0.0, config.beak_length]),
            )
        )
        agents.append(HummingbirdAgent(f"hummingbird_{i}", physics, body_id, area, config))
    return Scene(physics=physics, agents=agents, flower_area=area)


def build_balancer_scene(config: BalancerConfig | None = None, *, boundary_radius: float = 3.0) -> Scene:
    physics = PointMassPhysics()
    physics.add_body(BodyState("platform", position=np.zeros(3), radius=0.5, use_gravity=False))
    physics.add_body(BodyState("ball", position=np.array([0.0, 0.5, 0.0]), radius=0.25, use_gravity=False))
    add_boundary_ring(physics, np.zeros(3), boundary_radius, post_radius=0.5)
    agent = BalancerAgent("balancer", physics, "platform", "ball", config)
    return Scene(physics=physics, agents=[agent])


def build_jumper_scene(config: JumperConfig | None = None) -> Scene:
    config = config or JumperConfig()
    physics = PointMassPhysics(gravity=GRAVITY, floor_y=0.0)
    physics.add_body(BodyState("player", position=np.zeros(3), radius=0.5))
    ox, oz = config.target_offset
    physics.add_collider(Collider("target", np.array([ox, 1.0, oz]), 0.5, tag=config.target_tag))
    agent = JumperAgent("jumper", physics, "player", "target", config=config)
    return Scene(physics=physics, agents=[agent])

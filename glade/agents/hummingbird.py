"""Hummingbird: flies between flowers and drinks nectar."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

from ..actions import FlightIndex
from ..config import HummingbirdConfig
from ..constants import AREA_DIAMETER, HUMMINGBIRD_OBS_SLOTS, TAG_BOUNDARY, TAG_NECTAR
from ..control.smoothing import SmoothedAxis
from ..env.decoder import FlightDecoder
from ..env.rewards import alignment_bonus
from ..env.spawn import find_safe_pose
from ..errors import MissingTarget
from ..sim.body import look_rotation, normalized
from .base import AgentBehavior
from .heuristic import InputState, Key, axis

if TYPE_CHECKING:
    from ..env.rewards import StepContext
    from ..sim.flowers import Flower, FlowerArea
    from ..sim.physics import CollisionEvent, PhysicsProvider

logger = logging.getLogger(__name__)


class HummingbirdAgent(AgentBehavior):
    """
    Observations (10):
      rotation quaternion (4), unit vector beak tip -> nearest flower (3),
      dot(to_flower, -flower_up) (1, +1 = directly in front of the flower),
      dot(beak_forward, -flower_up) (1, +1 = beak pointing into the flower),
      beak tip distance / area diameter (1).

    Actions (5 continuous): move x, move y, move z, pitch, yaw.
    """

    observation_slots = HUMMINGBIRD_OBS_SLOTS

    def __init__(
        self,
        agent_id: str,
        physics: PhysicsProvider,
        body_id: str,
        flower_area: FlowerArea,
        config: HummingbirdConfig | None = None,
    ):
        self.config = config or HummingbirdConfig()
        super().__init__(agent_id, physics, body_id, FlightDecoder(self.config))
        self.flower_area = flower_area
        self.axes = [SmoothedAxis(self.config.smoothing_rate), SmoothedAxis(self.config.smoothing_rate)]
        self.nearest_flower: Flower | None = None
        self.nectar_obtained = 0.0

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------

    @property
    def beak_tip(self) -> np.ndarray:
        body = self.physics.body(self.body_id)
        return body.position + body.forward() * self.config.beak_length

    # ------------------------------------------------------------------
    # Episode lifecycle
    # ------------------------------------------------------------------

    def on_episode_begin(self, rng: np.random.Generator) -> None:
        if self.training_mode and self.config.reset_flowers_on_begin:
            self.flower_area.reset_flowers(rng)

        self.nectar_obtained = 0.0
        self.physics.zero_velocity(self.body_id)
        self.reset_axes()

        in_front_of_flower = True
        if self.training_mode:
            in_front_of_flower = bool(rng.random() < self.config.spawn_in_front_prob)
        self.move_to_safe_random_pose(rng, in_front_of_flower)
        self.update_nearest_flower()

    def move_to_safe_random_pose(self, rng: np.random.Generator, in_front_of_flower: bool) -> None:
        cfg = self.config
        area = self.flower_area

        def sample() -> tuple[np.ndarray, np.ndarray]:
            if in_front_of_flower:
                flower = area.flowers[int(rng.integers(0, len(area.flowers)))]
                distance = rng.uniform(*cfg.spawn_distance)
                position = flower.position + flower.up_vector * distance
                # Point the beak at the flower (the head is the body centre).
                rotation = look_rotation(flower.center_position - position)
            else:
                height = rng.uniform(*cfg.spawn_height)
                radius = rng.uniform(*cfg.spawn_radius)
                direction = rng.uniform(-np.pi, np.pi)
                position = area.center + np.array(
                    [np.sin(direction) * radius, height, np.cos(direction) * radius]
                )
                rotation = np.array([rng.uniform(*cfg.spawn_pitch), rng.uniform(-180.0, 180.0), 0.0])
            return position, rotation

        ignore = frozenset({self.body_id})
        position, rotation = find_safe_pose(
            sample, lambda p, r: self.physics.overlap_count(p, r, ignore=ignore)
        )
        self.physics.set_pose(self.body_id, position, rotation)

    def update_nearest_flower(self) -> Flower | None:
        self.nearest_flower = self.flower_area.nearest_flower(self.beak_tip)
        return self.nearest_flower

    # ------------------------------------------------------------------
    # Observation / action
    # ------------------------------------------------------------------

    def collect_observations(self) -> np.ndarray:
        flower = self.nearest_flower
        if flower is None:
            raise MissingTarget(f"{self.agent_id}: no flower with nectar left")

        body = self.physics.body(self.body_id)
        beak_tip = self.beak_tip
        to_flower = flower.center_position - beak_tip
        to_flower_n = normalized(to_flower)
        flower_in = -flower.up_vector

        obs = np.empty(self.observation_slots, dtype=np.float32)
        obs[0:4] = body.quaternion()
        obs[4:7] = to_flower_n
        obs[7] = float(np.dot(to_flower_n, flower_in))
        obs[8] = float(np.dot(normalized(body.forward()), flower_in))
        obs[9] = float(np.linalg.norm(to_flower)) / AREA_DIAMETER
        return obs

    def heuristic(self, inputs: InputState) -> np.ndarray:
        body = self.physics.body(self.body_id)
        forward = body.forward() * axis(inputs, Key.W, Key.S)
        right = body.right() * axis(inputs, Key.D, Key.A)
        up = body.up() * axis(inputs, Key.LEFT_SHIFT, Key.LEFT_COMMAND)
        combined = normalized(forward + right + up)

        action = np.zeros(self.action_spec.size, dtype=np.float32)
        action[FlightIndex.MOVE_X : FlightIndex.MOVE_Z + 1] = combined
        action[FlightIndex.PITCH] = axis(inputs, Key.UP_ARROW, Key.DOWN_ARROW)
        action[FlightIndex.YAW] = axis(inputs, Key.RIGHT_ARROW, Key.LEFT_ARROW)
        return action

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def on_event(self, event: CollisionEvent, ctx: StepContext) -> None:
        if event.tag == TAG_NECTAR:
            self._feed(event, ctx)
        elif event.tag == TAG_BOUNDARY and self.training_mode:
            ctx.boundary_collisions += 1

    def _feed(self, event: CollisionEvent, ctx: StepContext) -> None:
        # Only contact at the beak tip counts.
        if float(np.linalg.norm(self.beak_tip - event.closest_point)) >= self.config.beak_tip_radius:
            return

        flower = self.flower_area.flower_from_nectar(event.collider_id)
        taken = flower.feed(self.config.feed_amount)
        self.nectar_obtained += taken

        if self.training_mode and taken > 0.0:
            body = self.physics.body(self.body_id)
            ctx.nectar_alignments.append(alignment_bonus(body.forward(), flower.up_vector))

        if not flower.has_nectar:
            self.update_nearest_flower()

    def on_fixed_update(self, dt: float, ctx: StepContext) -> None:
        # The tracked flower may have been emptied by another agent; it may
        # also have been missing since the last reset.
        if self.nearest_flower is None or not self.nearest_flower.has_nectar:
            previous = self.nearest_flower
            self.update_nearest_flower()
            if previous is not None and self.nearest_flower is not previous:
                logger.debug(f"{self.agent_id}: nearest flower depleted, retargeted")

    # ------------------------------------------------------------------
    # Gameplay controls
    # ------------------------------------------------------------------

    def freeze(self) -> None:
        if self.training_mode:
            raise RuntimeError("Freeze/Unfreeze not supported in training")
        self.frozen = True
        self.physics.sleep(self.body_id)

    def unfreeze(self) -> None:
        if self.training_mode:
            raise RuntimeError("Freeze/Unfreeze not supported in training")
        self.frozen = False
        self.physics.wake_up(self.body_id)

"""Depletable nectar sources grouped into plants and areas."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np

from ..constants import FULL_NECTAR, PLANT_TILT_DEG, PLANT_YAW_DEG, TAG_FLOWER, TAG_NECTAR
from .body import euler_to_quaternion, normalized, rotate
from .physics import Collider

if TYPE_CHECKING:
    from .physics import PointMassPhysics

FLOWER_RADIUS = 0.04
NECTAR_RADIUS = 0.02
NECTAR_DEPTH = 0.02  # nectar centre sits this far out along the flower's up vector


@dataclass(eq=False)
class Flower:
    """A single flower holding nectar.

    Pose is derived from the owning plant: `local_offset` and `local_up` are
    expressed in the plant frame and re-evaluated whenever the plant moves.
    """

    flower_id: str
    local_offset: np.ndarray
    local_up: np.ndarray
    nectar_amount: float = FULL_NECTAR
    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    up_vector: np.ndarray = field(default_factory=lambda: np.array([0.0, 1.0, 0.0]))
    physics: PointMassPhysics | None = field(default=None, repr=False)

    @property
    def flower_collider_id(self) -> str:
        return f"{self.flower_id}/flower"

    @property
    def nectar_collider_id(self) -> str:
        return f"{self.flower_id}/nectar"

    @property
    def center_position(self) -> np.ndarray:
        """Centre of the nectar collider."""
        return self.position + self.up_vector * NECTAR_DEPTH

    @property
    def has_nectar(self) -> bool:
        return self.nectar_amount > 0.0

    def feed(self, amount: float) -> float:
        """Remove up to `amount` nectar and return what was actually taken."""
        taken = float(np.clip(amount, 0.0, self.nectar_amount))
        self.nectar_amount -= taken
        if self.nectar_amount <= 0.0:
            self.nectar_amount = 0.0
            self._set_colliders_enabled(False)
        return taken

    def reset(self) -> None:
        self.nectar_amount = FULL_NECTAR
        self._set_colliders_enabled(True)

    def place(self, plant_position: np.ndarray, plant_rotation: np.ndarray) -> None:
        q = euler_to_quaternion(plant_rotation)
        self.position = np.asarray(plant_position, dtype=np.float64) + rotate(q, self.local_offset)
        self.up_vector = normalized(rotate(q, self.local_up))
        if self.physics is not None:
            self.physics.move_collider(self.flower_collider_id, self.position)
            self.physics.move_collider(self.nectar_collider_id, self.center_position)

    def _set_colliders_enabled(self, enabled: bool) -> None:
        if self.physics is None:
            return
        self.physics.set_collider_enabled(self.flower_collider_id, enabled)
        self.physics.set_collider_enabled(self.nectar_collider_id, enabled)


@dataclass(eq=False)
class FlowerPlant:
    plant_id: str
    position: np.ndarray
    rotation: np.ndarray = field(default_factory=lambda: np.zeros(3))
    flowers: list[Flower] = field(default_factory=list)

    def place_flowers(self) -> None:
        for flower in self.flowers:
            flower.place(self.position, self.rotation)


class FlowerArea:
    """A collection of flower plants and their flowers.

    Owns the nectar-collider lookup used to resolve trigger contacts back to
    the flower being fed on.
    """

    def __init__(self, center: np.ndarray | None = None, physics: PointMassPhysics | None = None):
        self.center = np.zeros(3) if center is None else np.asarray(center, dtype=np.float64)
        self.physics = physics
        self.plants: list[FlowerPlant] = []
        self.flowers: list[Flower] = []
        self._nectar_lookup: dict[str, Flower] = {}

    def add_plant(
        self,
        plant_id: str,
        position: np.ndarray,
        flowers: list[tuple[np.ndarray, np.ndarray]],
    ) -> FlowerPlant:
        """Add a plant with flowers given as (local_offset, local_up) pairs."""
        plant = FlowerPlant(plant_id=plant_id, position=np.asarray(position, dtype=np.float64))
        for i, (offset, up) in enumerate(flowers):
            flower = Flower(
                flower_id=f"{plant_id}/f{i}",
                local_offset=np.asarray(offset, dtype=np.float64),
                local_up=normalized(np.asarray(up, dtype=np.float64)),
                physics=self.physics,
            )
            if self.physics is not None:
                self.physics.add_collider(
                    Collider(flower.flower_collider_id, np.zeros(3), FLOWER_RADIUS, tag=TAG_FLOWER)
                )
                self.physics.add_collider(
                    Collider(flower.nectar_collider_id, np.zeros(3), NECTAR_RADIUS, tag=TAG_NECTAR, trigger=True)
                )
            plant.flowers.append(flower)
            self.flowers.append(flower)
            self._nectar_lookup[flower.nectar_collider_id] = flower
        plant.place_flowers()
        self.plants.append(plant)
        return plant

    def reset_flowers(self, rng: np.random.Generator) -> None:
        """Re-pose every plant and refill every flower."""
        for plant in self.plants:
            plant.rotation = np.array(
                [
                    rng.uniform(-PLANT_TILT_DEG, PLANT_TILT_DEG),
                    rng.uniform(-PLANT_YAW_DEG, PLANT_YAW_DEG),
                    rng.uniform(-PLANT_TILT_DEG, PLANT_TILT_DEG),
                ]
            )
            plant.place_flowers()
        for flower in self.flowers:
            flower.reset()

    def flower_from_nectar(self, collider_id: str) -> Flower:
        return self._nectar_lookup[collider_id]

    def nearest_flower(self, point: np.ndarray) -> Flower | None:
        """Closest flower that still has nectar, or None if all are empty."""
        p = np.asarray(point, dtype=np.float64)
        nearest: Flower | None = None
        best = math.inf
        for flower in self.flowers:
            if not flower.has_nectar:
                continue
            dist = float(np.linalg.norm(flower.position - p))
            if dist < best:
                best = dist
                nearest = flower
        return nearest

    @classmethod
    def generate(
        cls,
        rng: np.random.Generator,
        *,
        center: np.ndarray | None = None,
        num_plants: int = 6,
        flowers_per_plant: int = 3,
        physics: PointMassPhysics | None = None,
    ) -> FlowerArea:
        """Scatter plants on a ring around the centre, flowers facing outward."""
        area = cls(center=center, physics=physics)
        for p in range(num_plants):
            angle = 2.0 * math.pi * p / max(1, num_plants)
            radius = float(rng.uniform(3.0, 8.0))
            pos = area.center + np.array([math.sin(angle) * radius, 0.0, math.cos(angle) * radius])
            flowers = []
            for f in range(flowers_per_plant):
                a = 2.0 * math.pi * f / max(1, flowers_per_plant)
                height = float(rng.uniform(0.8, 1.8))
                offset = np.array([math.sin(a) * 0.25, height, math.cos(a) * 0.25])
                up = np.array([math.sin(a), 0.3, math.cos(a)])
                flowers.append((offset, up))
            area.add_plant(f"plant{p}", pos, flowers)
        return area

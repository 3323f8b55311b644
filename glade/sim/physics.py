"""Physics collaborator interface and a point-mass reference provider.

The loop never integrates physics itself; it talks to a `PhysicsProvider`.
`PointMassPhysics` is a small in-memory implementation good enough for
scenes, scripts and tests: point-mass bodies with a sphere footprint and
static sphere colliders tagged like scene objects ("nectar", "boundary", ...).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Protocol

import numpy as np

from .body import BodyState, normalized


@dataclass
class Collider:
    collider_id: str
    center: np.ndarray  # float64[3]
    radius: float
    tag: str = ""
    trigger: bool = False  # triggers report every overlapping tick, solids only on enter
    enabled: bool = True

    def closest_point(self, point: np.ndarray) -> np.ndarray:
        offset = np.asarray(point, dtype=np.float64) - self.center
        dist = float(np.linalg.norm(offset))
        if dist <= self.radius:
            return np.asarray(point, dtype=np.float64).copy()
        return self.center + offset * (self.radius / dist)


@dataclass(frozen=True)
class RaycastHit:
    collider_id: str
    tag: str
    distance: float
    point: np.ndarray


@dataclass(frozen=True)
class CollisionEvent:
    """A body touched a collider during the last physics step."""

    body_id: str
    collider_id: str
    tag: str
    closest_point: np.ndarray
    trigger: bool = False


class PhysicsProvider(Protocol):
    def body(self, body_id: str) -> BodyState: ...

    def apply_force(self, body_id: str, force: np.ndarray) -> None: ...

    def set_rotation(self, body_id: str, rotation: np.ndarray) -> None: ...

    def set_pose(self, body_id: str, position: np.ndarray, rotation: np.ndarray | None = None) -> None: ...

    def zero_velocity(self, body_id: str) -> None: ...

    def overlap_count(self, point: np.ndarray, radius: float, ignore: frozenset[str] = frozenset()) -> int: ...

    def raycast(
        self, origin: np.ndarray, direction: np.ndarray, ignore: frozenset[str] = frozenset()
    ) -> RaycastHit | None: ...

    def set_collider_enabled(self, collider_id: str, enabled: bool) -> None: ...

    def move_collider(self, collider_id: str, center: np.ndarray) -> None: ...

    def sleep(self, body_id: str) -> None: ...

    def wake_up(self, body_id: str) -> None: ...


class PointMassPhysics:
    def __init__(
        self,
        gravity: tuple[float, float, float] = (0.0, 0.0, 0.0),
        floor_y: float | None = None,
        drag: float = 0.0,
    ):
        self.gravity = np.asarray(gravity, dtype=np.float64)
        self.floor_y = floor_y
        self.drag = float(drag)
        self.bodies: dict[str, BodyState] = {}
        self.colliders: dict[str, Collider] = {}
        # (body_id, collider_id) pairs touching after the last step, for enter detection.
        self._contacts: set[tuple[str, str]] = set()

    # ------------------------------------------------------------------
    # Scene construction
    # ------------------------------------------------------------------

    def add_body(self, body: BodyState) -> BodyState:
        if body.body_id in self.bodies:
            raise ValueError(f"Duplicate body id: {body.body_id!r}")
        self.bodies[body.body_id] = body
        return body

    def add_collider(self, collider: Collider) -> Collider:
        if collider.collider_id in self.colliders:
            raise ValueError(f"Duplicate collider id: {collider.collider_id!r}")
        self.colliders[collider.collider_id] = collider
        return collider

    # ------------------------------------------------------------------
    # PhysicsProvider
    # ------------------------------------------------------------------

    def body(self, body_id: str) -> BodyState:
        return self.bodies[body_id]

    def apply_force(self, body_id: str, force: np.ndarray) -> None:
        body = self.bodies[body_id]
        body.force = body.force + np.asarray(force, dtype=np.float64)

    def set_rotation(self, body_id: str, rotation: np.ndarray) -> None:
        self.bodies[body_id].rotation = np.asarray(rotation, dtype=np.float64).copy()

    def set_pose(self, body_id: str, position: np.ndarray, rotation: np.ndarray | None = None) -> None:
        body = self.bodies[body_id]
        body.position = np.asarray(position, dtype=np.float64).copy()
        if rotation is not None:
            body.rotation = np.asarray(rotation, dtype=np.float64).copy()

    def zero_velocity(self, body_id: str) -> None:
        body = self.bodies[body_id]
        body.velocity = np.zeros(3)
        body.angular_velocity = np.zeros(3)
        body.force = np.zeros(3)

    def overlap_count(self, point: np.ndarray, radius: float, ignore: frozenset[str] = frozenset()) -> int:
        p = np.asarray(point, dtype=np.float64)
        count = 0
        for col in self.colliders.values():
            if not col.enabled or col.collider_id in ignore:
                continue
            if float(np.linalg.norm(col.center - p)) <= col.radius + radius:
                count += 1
        for body in self.bodies.values():
            if body.body_id in ignore:
                continue
            if float(np.linalg.norm(body.position - p)) <= body.radius + radius:
                count += 1
        return count

    def raycast(
        self, origin: np.ndarray, direction: np.ndarray, ignore: frozenset[str] = frozenset()
    ) -> RaycastHit | None:
        o = np.asarray(origin, dtype=np.float64)
        d = normalized(direction)
        if not d.any():
            return None

        best: RaycastHit | None = None
        for col in self.colliders.values():
            if not col.enabled or col.collider_id in ignore:
                continue
            # Ray/sphere intersection: |o + t*d - c|^2 = r^2
            oc = o - col.center
            b = float(np.dot(oc, d))
            c = float(np.dot(oc, oc)) - col.radius * col.radius
            disc = b * b - c
            if disc < 0.0:
                continue
            sq = math.sqrt(disc)
            t = -b - sq
            if t < 0.0:
                t = -b + sq
            if t < 0.0:
                continue
            if best is None or t < best.distance:
                best = RaycastHit(collider_id=col.collider_id, tag=col.tag, distance=t, point=o + t * d)
        return best

    def set_collider_enabled(self, collider_id: str, enabled: bool) -> None:
        self.colliders[collider_id].enabled = bool(enabled)

    def move_collider(self, collider_id: str, center: np.ndarray) -> None:
        self.colliders[collider_id].center = np.asarray(center, dtype=np.float64).copy()

    # ------------------------------------------------------------------
    # Simulation
    # ------------------------------------------------------------------

    def sleep(self, body_id: str) -> None:
        body = self.bodies[body_id]
        body.sleeping = True
        self.zero_velocity(body_id)

    def wake_up(self, body_id: str) -> None:
        self.bodies[body_id].sleeping = False

    def step(self, dt: float) -> list[CollisionEvent]:
        """Integrate one fixed step and report contacts."""
        for body in self.bodies.values():
            if body.sleeping:
                body.force = np.zeros(3)
                continue
            accel = body.force / max(1e-6, body.mass)
            if body.use_gravity:
                accel = accel + self.gravity
            body.velocity = body.velocity + accel * dt
            if self.drag > 0.0:
                body.velocity = body.velocity * max(0.0, 1.0 - self.drag * dt)
            body.position = body.position + body.velocity * dt
            if self.floor_y is not None and body.position[1] < self.floor_y:
                body.position[1] = self.floor_y
                body.velocity[1] = max(0.0, float(body.velocity[1]))
            body.force = np.zeros(3)

        events: list[CollisionEvent] = []
        contacts: set[tuple[str, str]] = set()
        for body in self.bodies.values():
            point = body.contact_point()
            for col in self.colliders.values():
                if not col.enabled:
                    continue
                closest = col.closest_point(point)
                if float(np.linalg.norm(closest - point)) > body.radius:
                    continue
                key = (body.body_id, col.collider_id)
                contacts.add(key)
                if col.trigger or key not in self._contacts:
                    events.append(
                        CollisionEvent(
                            body_id=body.body_id,
                            collider_id=col.collider_id,
                            tag=col.tag,
                            closest_point=closest,
                            trigger=col.trigger,
                        )
                    )
        self._contacts = contacts
        return events

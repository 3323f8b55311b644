"""Rigid body state and Euler/quaternion helpers.

Conventions: Y is up, Z is forward, X is right. Euler angles are degrees and
compose as yaw(y) * pitch(x) * roll(z), so a positive pitch tips the nose down.
Quaternions are stored as [x, y, z, w].
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np

WORLD_UP = np.array([0.0, 1.0, 0.0])
WORLD_FORWARD = np.array([0.0, 0.0, 1.0])
WORLD_RIGHT = np.array([1.0, 0.0, 0.0])


def _axis_quaternion(axis: np.ndarray, deg: float) -> np.ndarray:
    half = math.radians(deg) * 0.5
    s = math.sin(half)
    return np.array([axis[0] * s, axis[1] * s, axis[2] * s, math.cos(half)])


def quat_multiply(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    ax, ay, az, aw = a
    bx, by, bz, bw = b
    return np.array(
        [
            aw * bx + ax * bw + ay * bz - az * by,
            aw * by - ax * bz + ay * bw + az * bx,
            aw * bz + ax * by - ay * bx + az * bw,
            aw * bw - ax * bx - ay * by - az * bz,
        ]
    )


def euler_to_quaternion(euler_deg: np.ndarray) -> np.ndarray:
    qx = _axis_quaternion(WORLD_RIGHT, float(euler_deg[0]))
    qy = _axis_quaternion(WORLD_UP, float(euler_deg[1]))
    qz = _axis_quaternion(WORLD_FORWARD, float(euler_deg[2]))
    q = quat_multiply(quat_multiply(qy, qx), qz)
    return q / np.linalg.norm(q)


def rotate(q: np.ndarray, v: np.ndarray) -> np.ndarray:
    """Rotate vector v by unit quaternion q."""
    u = q[:3]
    w = q[3]
    t = 2.0 * np.cross(u, v)
    return np.asarray(v, dtype=np.float64) + w * t + np.cross(u, t)


def look_rotation(direction: np.ndarray) -> np.ndarray:
    """Euler angles (pitch, yaw, 0) whose forward axis points along direction."""
    dx, dy, dz = (float(c) for c in direction)
    yaw = math.degrees(math.atan2(dx, dz))
    pitch = math.degrees(math.atan2(-dy, math.hypot(dx, dz)))
    return np.array([pitch, yaw, 0.0])


def normalized(v: np.ndarray) -> np.ndarray:
    n = float(np.linalg.norm(v))
    if n <= 1e-12:
        return np.zeros(3)
    return np.asarray(v, dtype=np.float64) / n


@dataclass
class BodyState:
    body_id: str
    position: np.ndarray  # float64[3]
    rotation: np.ndarray = field(default_factory=lambda: np.zeros(3))  # Euler degrees
    velocity: np.ndarray = field(default_factory=lambda: np.zeros(3))
    angular_velocity: np.ndarray = field(default_factory=lambda: np.zeros(3))
    mass: float = 1.0
    radius: float = 0.05
    use_gravity: bool = True
    sleeping: bool = False
    force: np.ndarray = field(default_factory=lambda: np.zeros(3))  # accumulated this step
    # Body-local point that touches colliders (e.g. a beak tip); the centre by default.
    contact_offset: np.ndarray = field(default_factory=lambda: np.zeros(3))

    def quaternion(self) -> np.ndarray:
        return euler_to_quaternion(self.rotation)

    def forward(self) -> np.ndarray:
        return rotate(self.quaternion(), WORLD_FORWARD)

    def right(self) -> np.ndarray:
        return rotate(self.quaternion(), WORLD_RIGHT)

    def up(self) -> np.ndarray:
        return rotate(self.quaternion(), WORLD_UP)

    def contact_point(self) -> np.ndarray:
        if not self.contact_offset.any():
            return self.position.copy()
        return self.position + rotate(self.quaternion(), self.contact_offset)

"""Raw action vectors -> typed control commands.

Continuous decoders run each rotation axis through a `SmoothedAxis`, turn
the smoothed delta into an absolute Euler target and saturate it with
wrap-then-clamp. The discrete decoder maps an integer code to a named
command. Raw values are not clamped here; they are interpreted in [-1, 1].
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
from gymnasium import spaces

from ..actions import (
    BALANCER_ACTION_DIM,
    HUMMINGBIRD_ACTION_DIM,
    JUMPER_ACTION_BRANCHES,
    FlightIndex,
    JumpCommand,
    TiltIndex,
)
from ..config import BalancerConfig, HummingbirdConfig, JumperConfig
from ..control.smoothing import SmoothedAxis, wrap_angle, wrap_then_clamp
from ..errors import SchemaViolation


@dataclass(frozen=True)
class ActionSpec:
    continuous_size: int = 0
    discrete_branches: tuple[int, ...] = ()

    def __post_init__(self) -> None:
        if (self.continuous_size > 0) == bool(self.discrete_branches):
            raise ValueError("ActionSpec must be either continuous or discrete")

    @property
    def is_discrete(self) -> bool:
        return bool(self.discrete_branches)

    @property
    def size(self) -> int:
        return len(self.discrete_branches) if self.is_discrete else self.continuous_size

    def zeros(self) -> np.ndarray:
        if self.is_discrete:
            return np.zeros(self.size, dtype=np.int64)
        return np.zeros(self.size, dtype=np.float32)

    def to_space(self) -> spaces.Space:
        if self.is_discrete:
            return spaces.MultiDiscrete(list(self.discrete_branches))
        return spaces.Box(low=-1.0, high=1.0, shape=(self.continuous_size,), dtype=np.float32)


@dataclass(frozen=True, eq=False)
class ControlCommand:
    """What the agent asks the physics collaborator to do this tick."""

    force: np.ndarray  # world-space force, float64[3]
    rotation: np.ndarray | None = None  # absolute Euler target in degrees
    discrete: JumpCommand | None = None


class ActionDecoder(ABC):
    spec: ActionSpec

    def _check(self, raw: Sequence[float] | np.ndarray) -> np.ndarray:
        arr = np.asarray(raw).reshape(-1)
        if arr.shape[0] != self.spec.size:
            raise SchemaViolation(f"action schema expects {self.spec.size} values, got {arr.shape[0]}")
        return arr

    @abstractmethod
    def decode(
        self,
        raw: Sequence[float] | np.ndarray,
        axes: Sequence[SmoothedAxis],
        rotation: np.ndarray,
        dt: float,
    ) -> ControlCommand: ...

class FlightDecoder(ActionDecoder):
    """Hummingbird: world-space move force plus smoothed pitch/yaw."""

    spec = ActionSpec(continuous_size=HUMMINGBIRD_ACTION_DIM)

    def __init__(self, config: HummingbirdConfig):
        self.config = config

    def decode(self, raw, axes, rotation, dt):
        a = self._check(raw).astype(np.float64)
        if len(axes) != 2:
            raise ValueError(f"FlightDecoder needs 2 axes (pitch, yaw), got {len(axes)}")
        cfg = self.config
        move = a[FlightIndex.MOVE_X : FlightIndex.MOVE_Z + 1]
        force = move * cfg.move_force

        smooth_pitch = axes[0].update(float(a[FlightIndex.PITCH]), dt)
        smooth_yaw = axes[1].update(float(a[FlightIndex.YAW]), dt)

        # Clamp pitch so the bird never flips upside down.
        pitch = wrap_then_clamp(rotation[0] + smooth_pitch * dt * cfg.pitch_speed, cfg.max_pitch_angle)
        yaw = wrap_angle(rotation[1] + smooth_yaw * dt * cfg.yaw_speed)
        return ControlCommand(force=force, rotation=np.array([pitch, yaw, 0.0]))


class TiltDecoder(ActionDecoder):
    """Balancer: smoothed tilt about the x (right) and z (up) axes."""

    spec = ActionSpec(continuous_size=BALANCER_ACTION_DIM)

    def __init__(self, config: BalancerConfig):
        self.config = config

    def decode(self, raw, axes, rotation, dt):
        a = self._check(raw).astype(np.float64)
        if len(axes) != 2:
            raise ValueError(f"TiltDecoder needs 2 axes (right, up), got {len(axes)}")
        cfg = self.config
        smooth_right = axes[0].update(float(a[TiltIndex.RIGHT]), dt)
        smooth_up = axes[1].update(float(a[TiltIndex.UP]), dt)

        right = wrap_then_clamp(rotation[0] + smooth_right * dt * cfg.rotation_speed, cfg.max_rotation_angle)
        up = wrap_then_clamp(rotation[2] + smooth_up * dt * cfg.rotation_speed, cfg.max_rotation_angle)
        return ControlCommand(force=np.zeros(3), rotation=np.array([right, 0.0, up]))


class JumpDecoder(ActionDecoder):
    """Jumper: 0 = idle, 1 = apply upward force."""

    spec = ActionSpec(discrete_branches=JUMPER_ACTION_BRANCHES)

    def __init__(self, config: JumperConfig):
        self.config = config

    def decode(self, raw, axes=(), rotation=None, dt=0.0):
        a = self._check(raw)
        code = int(math.floor(float(a[0])))
        try:
            command = JumpCommand(code)
        except ValueError:
            raise SchemaViolation(f"unknown jump command code {code}") from None
        force = np.zeros(3)
        if command == JumpCommand.FLY:
            force[1] = self.config.upward_force
        return ControlCommand(force=force, discrete=command)

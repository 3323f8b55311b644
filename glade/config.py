from __future__ import annotations

from dataclasses import dataclass

from .constants import TAG_TARGET


@dataclass(frozen=True)
class LoopConfig:
    dt: float = 0.02  # fixed physics timestep (50 Hz)
    training_mode: bool = True
    # 0 means unlimited; only enforced in training mode.
    max_steps: int = 5000
    seed: int | None = None


@dataclass(frozen=True)
class HummingbirdConfig:
    move_force: float = 2.0
    pitch_speed: float = 100.0
    yaw_speed: float = 100.0
    max_pitch_angle: float = 80.0
    smoothing_rate: float = 2.0
    # Beak tip sits this far ahead of the body centre along the forward axis.
    beak_length: float = 0.12
    beak_tip_radius: float = 0.008
    feed_amount: float = 0.01  # nectar per fixed tick (50x per second)
    # Training episode begin refills and re-poses every flower in the (possibly shared) area.
    reset_flowers_on_begin: bool = True
    spawn_in_front_prob: float = 0.5  # training only; gameplay always spawns in front
    spawn_distance: tuple[float, float] = (0.1, 0.2)
    spawn_height: tuple[float, float] = (1.2, 2.5)
    spawn_radius: tuple[float, float] = (2.0, 7.0)
    spawn_pitch: tuple[float, float] = (-60.0, 60.0)


@dataclass(frozen=True)
class BalancerConfig:
    rotation_speed: float = 100.0
    max_rotation_angle: float = 45.0
    smoothing_rate: float = 2.0
    initial_tilt: float = 30.0  # episode begin samples each axis in [-tilt, tilt]
    end_on_boundary: bool = True


@dataclass(frozen=True)
class JumperConfig:
    upward_force: float = 100.0
    target_tag: str = TAG_TARGET
    target_height: tuple[float, float] = (1.0, 5.0)
    # Target spawns at this (x, z) offset from the game origin.
    target_offset: tuple[float, float] = (0.0, 0.65)
    ceiling_height: float = 10.0
    episode_seconds: float = 10.0  # countdown; 0 disables the timeout

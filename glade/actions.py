from __future__ import annotations

from enum import IntEnum

HUMMINGBIRD_ACTION_DIM = 5
BALANCER_ACTION_DIM = 2
JUMPER_ACTION_BRANCHES = (2,)


class FlightIndex(IntEnum):
    MOVE_X = 0  # +1 right, -1 left
    MOVE_Y = 1  # +1 up, -1 down
    MOVE_Z = 2  # +1 forward, -1 backward
    PITCH = 3  # +1 raises the x rotation (nose down), -1 lowers it
    YAW = 4  # +1 turn right, -1 turn left


class TiltIndex(IntEnum):
    RIGHT = 0  # rotation about x
    UP = 1  # rotation about z


class JumpCommand(IntEnum):
    """Discrete jumper commands."""

    IDLE = 0
    FLY = 1  # apply upward force this tick

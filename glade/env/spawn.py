from __future__ import annotations

import logging
from collections.abc import Callable

import numpy as np

from ..constants import MAX_SPAWN_ATTEMPTS, SAFE_SPAWN_RADIUS
from ..errors import UnsafeSpawnExhausted

logger = logging.getLogger(__name__)

Pose = tuple[np.ndarray, np.ndarray]  # (position, Euler rotation in degrees)


def find_safe_pose(
    sample: Callable[[], Pose],
    overlap_count: Callable[[np.ndarray, float], int],
    radius: float = SAFE_SPAWN_RADIUS,
    max_attempts: int = MAX_SPAWN_ATTEMPTS,
) -> Pose:
    """Sample candidate poses until one overlaps nothing within `radius`.

    Raises:
        UnsafeSpawnExhausted: After exactly `max_attempts` unsafe samples.
    """
    if max_attempts <= 0:
        raise ValueError(f"max_attempts must be positive, got {max_attempts}")
    for attempt in range(1, max_attempts + 1):
        position, rotation = sample()
        if overlap_count(position, radius) == 0:
            if attempt > 1:
                logger.debug(f"Safe spawn found after {attempt} attempts")
            return position, rotation
    raise UnsafeSpawnExhausted(max_attempts)

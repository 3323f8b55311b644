"""Fixed-schema observation vectors.

Policies consume a flat float vector of a declared length. Producers are
checked against that length on every call; the only sanctioned substitute is
the all-zero vector of the same length, used when the agent has nothing to
observe (for example no flower with nectar left).
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

import numpy as np
from gymnasium import spaces

from ..errors import SchemaViolation


def empty_observation(schema_slots: int) -> np.ndarray:
    return np.zeros(int(schema_slots), dtype=np.float32)


def build_observation(schema_slots: int, producer: Callable[[], Sequence[float] | np.ndarray]) -> np.ndarray:
    """Call the producer and validate its output against the schema length.

    Raises:
        SchemaViolation: If the producer yields a different number of values.
    """
    obs = np.asarray(producer(), dtype=np.float32).reshape(-1)
    if obs.shape[0] != schema_slots:
        raise SchemaViolation(f"observation schema expects {schema_slots} values, got {obs.shape[0]}")
    return obs


class ObservationBuilder:
    def __init__(self, schema_slots: int):
        if schema_slots <= 0:
            raise ValueError(f"schema_slots must be positive, got {schema_slots}")
        self.schema_slots = int(schema_slots)

    def build(self, producer: Callable[[], Sequence[float] | np.ndarray]) -> np.ndarray:
        return build_observation(self.schema_slots, producer)

    def empty(self) -> np.ndarray:
        return empty_observation(self.schema_slots)

    def to_space(self) -> spaces.Box:
        return spaces.Box(low=-np.inf, high=np.inf, shape=(self.schema_slots,), dtype=np.float32)

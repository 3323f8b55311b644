"""Error taxonomy for the agent/environment loop.

- SchemaViolation: observation or action does not match its declared schema.
  Fatal configuration bug; never silently truncated or padded.
- UnsafeSpawnExhausted: no collision-free spawn pose within the attempt budget. Fatal.
- MissingTarget: no resource entity with capacity left. Recoverable; the agent
  emits the all-zero observation and polls again on the next tick.
"""

from __future__ import annotations


class SchemaViolation(ValueError):
    pass


class UnsafeSpawnExhausted(RuntimeError):
    def __init__(self, attempts: int):
        super().__init__(f"could not find a safe position to spawn after {attempts} attempts")
        self.attempts = attempts


class MissingTarget(LookupError):
    pass

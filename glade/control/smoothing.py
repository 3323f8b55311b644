"""Rate-limited control smoothing and Euler angle saturation."""

from __future__ import annotations

from dataclasses import dataclass


def wrap_angle(deg: float) -> float:
    """Wrap an angle in degrees into (-180, 180]."""
    deg = float(deg) % 360.0
    if deg > 180.0:
        deg -= 360.0
    return deg


def wrap_then_clamp(deg: float, max_deg: float) -> float:
    """Wrap into (-180, 180] and then clamp to [-max_deg, max_deg].

    The order matters at the boundary: 190 wraps to -170 and saturates at
    -max_deg, whereas clamping first would saturate at +max_deg.
    """
    deg = wrap_angle(deg)
    return max(-max_deg, min(max_deg, deg))


@dataclass
class SmoothedAxis:
    """Tracks a raw control target with a bounded rate of change.

    Each update moves `current` toward the target by at most `max_rate * dt`
    and never overshoots. This is a rate limiter, not a low-pass filter.
    """

    max_rate: float
    current: float = 0.0

    def update(self, target: float, dt: float) -> float:
        if dt <= 0.0:
            return self.current
        max_delta = self.max_rate * dt
        delta = float(target) - self.current
        if abs(delta) <= max_delta:
            self.current = float(target)
        else:
            self.current += max_delta if delta > 0.0 else -max_delta
        return self.current

    def reset(self) -> None:
        self.current = 0.0

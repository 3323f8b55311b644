"""Score and timer display state.

Purely presentational: the loop pushes "score incremented" and "timer
elapsed" events in, nothing flows back into the loop.
"""

from __future__ import annotations

from typing import Any


class Scoreboard:
    def __init__(self, countdown_s: float = 0.0):
        # countdown_s > 0 shows remaining time; otherwise the timer counts up.
        self.countdown_s = float(countdown_s)
        self.score = 0
        self.elapsed_s = 0.0
        self.episodes = 0

    def reset(self) -> None:
        self.score = 0
        self.elapsed_s = 0.0
        self.episodes += 1

    def on_score_incremented(self, amount: int = 1) -> None:
        self.score += int(amount)

    def on_timer_elapsed(self, seconds: float) -> None:
        self.elapsed_s += float(seconds)

    @property
    def timer_value(self) -> float:
        if self.countdown_s > 0.0:
            return max(0.0, self.countdown_s - self.elapsed_s)
        return self.elapsed_s

    @property
    def score_text(self) -> str:
        return f"Score: {self.score}"

    @property
    def timer_text(self) -> str:
        return f"Timer: {self.timer_value:.0f}"

    def snapshot(self) -> dict[str, Any]:
        return {
            "score": self.score,
            "timer": self.timer_value,
            "countdown": self.countdown_s > 0.0,
            "episodes": self.episodes,
            "score_text": self.score_text,
            "timer_text": self.timer_text,
        }

"""Keyboard-style input for heuristic control.

Heuristics replace a learned policy with a deterministic mapping from the
input state at a tick to an action vector. The loop polls an input source
once per tick; nothing here talks to a real device.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum


class Key(str, Enum):
    W = "w"
    A = "a"
    S = "s"
    D = "d"
    SPACE = "space"
    LEFT_SHIFT = "left_shift"
    LEFT_COMMAND = "left_command"
    UP_ARROW = "up"
    DOWN_ARROW = "down"
    LEFT_ARROW = "left"
    RIGHT_ARROW = "right"


@dataclass(frozen=True)
class InputState:
    pressed: frozenset[Key] = field(default_factory=frozenset)

    @classmethod
    def of(cls, *keys: Key | str) -> InputState:
        return cls(frozenset(Key(k) for k in keys))

    def is_down(self, key: Key) -> bool:
        return key in self.pressed


NO_INPUT = InputState()


def axis(state: InputState, positive: Key, negative: Key) -> float:
    """+1 if `positive` is held, else -1 if `negative` is held, else 0."""
    if state.is_down(positive):
        return 1.0
    if state.is_down(negative):
        return -1.0
    return 0.0


class ScriptedInput:
    """Replays a fixed sequence of input states, then holds `NO_INPUT`.

    Callable, so it can be handed to the loop as its input source.
    """

    def __init__(self, frames: Iterable[InputState | Sequence[Key]]):
        self.frames: list[InputState] = [
            f if isinstance(f, InputState) else InputState.of(*f) for f in frames
        ]
        self.index = 0

    def __call__(self) -> InputState:
        if self.index >= len(self.frames):
            return NO_INPUT
        state = self.frames[self.index]
        self.index += 1
        return state

    def rewind(self) -> None:
        self.index = 0

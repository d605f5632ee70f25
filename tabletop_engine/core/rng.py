"""
Random sources for dice rolls.

Randomness is passed into the engine as a capability instead of being drawn
from the process-wide generator. Anything with a `randint(a, b)` method
qualifies, so a seeded `random.Random` works out of the box, while
`ScriptedRandom` replays a fixed list of outcomes for tests and replays.
"""

import random
from collections import deque
from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from .error_handling import ScriptExhausted, report


@runtime_checkable
class RandomSource(Protocol):
    """Anything able to draw a uniform integer in the closed range [a, b]."""

    def randint(self, a: int, b: int) -> int: ...


def default_rng(seed: int | None = None) -> random.Random:
    """
    Creates a private generator, optionally seeded for reproducible runs.

    Args:
        seed (int | None): The seed to use. Defaults to None (system entropy).

    Returns:
        random.Random: A generator that is not shared with the `random` module.

    """
    return random.Random(seed)


class ScriptedRandom:
    """
    Replays a fixed sequence of outcomes, one per draw.

    Attributes:
        draws (int): How many values have been consumed so far.

    """

    def __init__(self, values: Iterable[int]) -> None:
        self._values: deque[int] = deque(values)
        self.draws: int = 0

    @property
    def remaining(self) -> int:
        """Number of scripted values not yet consumed."""
        return len(self._values)

    def extend(self, values: Iterable[int]) -> None:
        """Appends more outcomes to the script."""
        self._values.extend(values)

    def randint(self, a: int, b: int) -> int:
        if not self._values:
            raise report(
                ScriptExhausted(
                    "No scripted values left",
                    {"draws": self.draws, "low": a, "high": b},
                )
            )
        value = self._values[0]
        if not a <= value <= b:
            raise ValueError(f"Scripted value {value} outside [{a}, {b}]")
        self._values.popleft()
        self.draws += 1
        return value

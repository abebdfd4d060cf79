"""
Seeded linear congruential generator shared by every generation stage.

The recurrence and scaling below must stay bit-for-bit stable: maps are
reproduced from (config, seed) alone, so the exact sequence of values and the
order in which stages consume them is part of the output. Each stage builds its
own SeededRandom from its seed and passes it explicitly; Python's random and
NumPy's random must not be used in generation code.
"""

import math
import time
from typing import List, Optional, TypeVar

from .models import Position

LCG_MULTIPLIER = 1103515245
LCG_INCREMENT = 12345
LCG_MODULUS = 2**31

T = TypeVar("T")


class SeededRandom:
    """
    Linear congruential generator (java.util.Random style constants).

    state <- (1103515245 * state + 12345) mod 2^31
    """

    def __init__(self, seed: int):
        """Initialize with an integer seed."""
        self.seed = int(seed)
        self.state = self.seed
        # Number of next() calls, for auditing random consumption
        self.call_count = 0

    def next(self) -> float:
        """Generate next random number in [0, 1)."""
        self.call_count += 1
        self.state = (LCG_MULTIPLIER * self.state + LCG_INCREMENT) % LCG_MODULUS
        return self.state / LCG_MODULUS

    def next_int(self, min_val: int, max_val: int) -> int:
        """Random integer in [min_val, max_val)."""
        return math.floor(self.next() * (max_val - min_val)) + min_val

    def choice(self, seq):
        """Choose a random element from a non-empty sequence."""
        if not seq:
            raise IndexError("Cannot choose from an empty sequence")
        return seq[self.next_int(0, len(seq))]

    def random_position(self, width: int, height: int) -> Position:
        """Random (x, y) within [0, width) x [0, height); x is drawn first."""
        x = self.next_int(0, width)
        y = self.next_int(0, height)
        return Position(x, y)


def resolve_seed(seed: Optional[int]) -> int:
    """
    Return the seed to use for a stage.

    Args:
        seed: Configured seed, or None for the current time in milliseconds

    Returns:
        Integer seed
    """
    if seed is None:
        return int(time.time() * 1000)
    return int(seed)


def create_rng(seed: Optional[int]) -> SeededRandom:
    return SeededRandom(resolve_seed(seed))


def shuffle_in_place(items: List[T], rng: SeededRandom) -> None:
    """Fisher-Yates shuffle from the end, drawing j in [0, i]."""
    for i in range(len(items) - 1, 0, -1):
        j = rng.next_int(0, i + 1)
        items[i], items[j] = items[j], items[i]

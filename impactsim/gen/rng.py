"""Lehmer (Park-Miller) generator for cross-runtime reproducible shapes.

`np.random.Generator` is used everywhere reproducibility only has to hold
within Python. Procedural bodies and craters must match bit-for-bit with any
other implementation of the same recurrence, so they draw from this instead.
"""

from __future__ import annotations

import math

MODULUS = 2147483647  # 2^31 - 1
MULTIPLIER = 16807


def fold_seed(seed: int) -> int:
    """Map any integer onto [1, MODULUS - 1].

    Uses truncated (sign-preserving) modulo so negative seeds fold the same
    way they would in C or JavaScript.
    """
    seed = int(seed)
    state = abs(seed) % MODULUS
    if seed < 0:
        state = -state
    if state <= 0:
        state += MODULUS - 1
    return state


class SeededRandom:
    def __init__(self, seed: int) -> None:
        self.seed = int(seed)
        self._state = fold_seed(seed)

    @property
    def state(self) -> int:
        return self._state

    def next(self) -> float:
        """Next float in [0, 1)."""
        self._state = (self._state * MULTIPLIER) % MODULUS
        return (self._state - 1) / (MODULUS - 1)

    def range(self, lo: float, hi: float) -> float:
        return lo + self.next() * (hi - lo)

    def randint(self, lo: int, hi: int) -> int:
        """Integer in [lo, hi], both ends inclusive."""
        return math.floor(self.range(lo, hi + 1))

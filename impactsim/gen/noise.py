from __future__ import annotations

import math

import numpy as np

from .rng import SeededRandom

PERM_SIZE = 256


def fade(t: float) -> float:
    # 6t^5 - 15t^4 + 10t^3
    return t * t * t * (t * (t * 6.0 - 15.0) + 10.0)


def lerp(a: float, b: float, t: float) -> float:
    return a + t * (b - a)


def grad(hash_: int, x: float, y: float) -> float:
    h = hash_ & 3
    u = x if h < 2 else y
    v = y if h < 2 else x
    return (u if (h & 1) == 0 else -u) + (v if (h & 2) == 0 else -v)


def build_permutation(seed: int) -> list[int]:
    """Fisher-Yates shuffle of 0..255 driven by SeededRandom, doubled for wraparound."""
    rng = SeededRandom(seed)
    perm = list(range(PERM_SIZE))
    for i in range(PERM_SIZE - 1, 0, -1):
        j = math.floor(rng.next() * (i + 1))
        perm[i], perm[j] = perm[j], perm[i]
    return perm + perm


class GradientNoise:
    """2D gradient noise over a seeded permutation table. Output is roughly in [-1, 1]."""

    def __init__(self, seed: int) -> None:
        self.seed = int(seed)
        self.perm = build_permutation(self.seed)

    def noise2d(self, x: float, y: float) -> float:
        x0 = math.floor(x)
        y0 = math.floor(y)
        X = x0 & 255
        Y = y0 & 255
        xf = x - x0
        yf = y - y0

        u = fade(xf)
        v = fade(yf)

        p = self.perm
        aa = p[p[X] + Y]
        ab = p[p[X] + Y + 1]
        ba = p[p[X + 1] + Y]
        bb = p[p[X + 1] + Y + 1]

        x1 = lerp(grad(aa, xf, yf), grad(ba, xf - 1.0, yf), u)
        x2 = lerp(grad(ab, xf, yf - 1.0), grad(bb, xf - 1.0, yf - 1.0), u)
        return lerp(x1, x2, v)

    def ring(self, angles: np.ndarray, *, octaves: int, scale: float) -> np.ndarray:
        """Fractal noise sampled along the unit circle at each angle.

        Amplitude halves and frequency doubles per octave.
        """
        out = np.zeros(len(angles), dtype=np.float64)
        for i, angle in enumerate(angles):
            total = 0.0
            amplitude = 1.0
            frequency = 1.0
            c = math.cos(float(angle))
            s = math.sin(float(angle))
            for _ in range(int(octaves)):
                total += self.noise2d(c * frequency * scale, s * frequency * scale) * amplitude
                amplitude *= 0.5
                frequency *= 2.0
            out[i] = total
        return out

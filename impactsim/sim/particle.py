from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple

import numpy as np


@dataclass
class Particle:
    # Screen space: +y points down, units are render units (pixels)
    x: float
    y: float
    vx: float
    vy: float
    max_life: float  # seconds
    size: float
    mass: float
    kind: str  # "ejecta" | "dust" | "plasma" | "fragment" | "vapor"
    color: str
    rotation: float = 0.0
    rotation_speed: float = 0.0  # rad/s

    # State
    life: float = 1.0  # normalized, 1 at spawn, removed at <= 0
    alpha: float = 1.0

    @property
    def alive(self) -> bool:
        return self.life > 0.0

    @property
    def pos(self) -> np.ndarray:
        return np.array([self.x, self.y], dtype=np.float64)

    @property
    def vel(self) -> np.ndarray:
        return np.array([self.vx, self.vy], dtype=np.float64)

    @property
    def speed(self) -> float:
        return float(np.hypot(self.vx, self.vy))

    def view(self) -> ParticleView:
        return ParticleView(
            x=self.x,
            y=self.y,
            alpha=self.alpha,
            rotation=self.rotation,
            size=self.size,
            kind=self.kind,
            color=self.color,
            life=self.life,
        )


class ParticleView(NamedTuple):
    """Immutable per-frame snapshot handed to renderers."""

    x: float
    y: float
    alpha: float
    rotation: float
    size: float
    kind: str
    color: str
    life: float

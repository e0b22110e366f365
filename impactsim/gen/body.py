"""Procedural asteroid bodies.

A body is a pure function of (diameter, velocity, angle): the seed is derived
from them, every draw comes from `SeededRandom`, and nothing depends on wall
clock or call order. Draw order is part of the contract; reordering draws
changes every generated body.

The procedural composition class ("rocky" / "metallic" / "icy") is its own
seeded draw and is independent of `ImpactParameters.composition`.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import numpy as np

from ..config import BodyConfig
from .noise import GradientNoise
from .rng import SeededRandom

if TYPE_CHECKING:
    from ..physics.impact import ImpactParameters

SEED_MODULUS = 9999

# Cumulative thresholds of the composition draw
COMPOSITION_THRESHOLDS: tuple[tuple[float, str], ...] = (
    (0.75, "rocky"),
    (0.90, "metallic"),
    (1.00, "icy"),
)

ROUGHNESS_RANGE: dict[str, tuple[float, float]] = {
    "rocky": (0.6, 0.9),
    "metallic": (0.3, 0.6),
    "icy": (0.4, 0.7),
}


@dataclass(frozen=True)
class HSL:
    h: float
    s: float
    l: float  # noqa: E741

    def css(self) -> str:
        return f"hsl({_num(self.h)}, {_num(self.s)}%, {_num(self.l)}%)"

    def to_list(self) -> list[float]:
        return [self.h, self.s, self.l]


def _num(x: float) -> str:
    # Integral floats print without a trailing ".0"
    return str(int(x)) if float(x).is_integer() else repr(float(x))


@dataclass(frozen=True)
class Palette:
    base: HSL
    dark: HSL
    bright: HSL
    accent: HSL

    def to_dict(self) -> dict[str, str]:
        return {
            "base": self.base.css(),
            "dark": self.dark.css(),
            "bright": self.bright.css(),
            "accent": self.accent.css(),
        }


@dataclass(frozen=True)
class CraterMark:
    angle: float  # radians
    distance: float  # fraction of base radius, [0.2, 0.9]
    size: float  # fraction of base radius, [0.05, 0.15]


@dataclass(frozen=True)
class ProceduralBody:
    seed: int
    composition: str
    complexity: float
    roughness: float
    base_radius: float
    vertex_ring: tuple[tuple[float, float], ...]  # (angle rad, radius)
    palette: Palette
    crater_layout: tuple[CraterMark, ...]

    @property
    def vertex_count(self) -> int:
        return len(self.vertex_ring)

    @property
    def crater_count(self) -> int:
        return len(self.crater_layout)

    def outline(self) -> np.ndarray:
        """Vertex ring as float64[N, 2] cartesian points around the origin."""
        ring = np.asarray(self.vertex_ring, dtype=np.float64).reshape(-1, 2)
        return np.stack([np.cos(ring[:, 0]) * ring[:, 1], np.sin(ring[:, 0]) * ring[:, 1]], axis=1)

    def to_dict(self) -> dict[str, Any]:
        return {
            "seed": self.seed,
            "composition": self.composition,
            "complexity": self.complexity,
            "roughness": self.roughness,
            "base_radius": self.base_radius,
            "vertex_ring": [[a, r] for a, r in self.vertex_ring],
            "palette": self.palette.to_dict(),
            "crater_layout": [[c.angle, c.distance, c.size] for c in self.crater_layout],
        }


def generate_seed(diameter: float, velocity: float, angle: float) -> int:
    return math.floor(diameter * 1000 + velocity * 100 + angle * 10) % SEED_MODULUS


def determine_composition(diameter: float, velocity: float) -> str:
    value = SeededRandom(math.floor(diameter * velocity)).next()
    for upper, name in COMPOSITION_THRESHOLDS:
        if value < upper:
            return name
    return COMPOSITION_THRESHOLDS[-1][1]


def complexity_for(diameter: float) -> float:
    return min(max(math.log10(max(diameter, 0.0) + 1.0) / 3.0, 0.0), 1.0)


def generate_palette(composition: str, rng: SeededRandom) -> Palette:
    if composition == "metallic":
        # Blue-grey
        h, s, l = rng.range(200, 240), rng.range(5, 15), rng.range(45, 65)  # noqa: E741
        return Palette(
            base=HSL(h, s, l),
            dark=HSL(h, s, l - 20),
            bright=HSL(h, s, l + 20),
            accent=HSL(h + 20, s + 10, l + 10),
        )
    if composition == "icy":
        # Cyan to blue
        h, s, l = rng.range(180, 220), rng.range(30, 60), rng.range(50, 70)  # noqa: E741
        return Palette(
            base=HSL(h, s, l),
            dark=HSL(h, s + 10, l - 20),
            bright=HSL(h, s - 10, l + 15),
            accent=HSL(h + 30, s, l + 10),
        )
    # Rocky: brown to red-brown
    h, s, l = rng.range(0, 40), rng.range(20, 50), rng.range(20, 40)  # noqa: E741
    return Palette(
        base=HSL(h, s, l),
        dark=HSL(h, s + 10, l - 15),
        bright=HSL(h, s - 10, l + 15),
        accent=HSL(h + 10, s + 5, l + 5),
    )


def generate_crater_layout(complexity: float, rng: SeededRandom) -> tuple[CraterMark, ...]:
    base_count = math.floor(complexity * 15) + 5
    count = rng.randint(base_count, base_count + 10)
    marks = []
    for _ in range(count):
        size = rng.range(0.05, 0.15)
        angle = rng.range(0.0, math.pi * 2.0)
        distance = rng.range(0.2, 0.9)
        marks.append(CraterMark(angle=angle, distance=distance, size=size))
    return tuple(marks)


def generate_vertex_ring(
    seed: int,
    vertex_count: int,
    roughness: float,
    base_radius: float,
    config: BodyConfig | None = None,
) -> tuple[tuple[float, float], ...]:
    cfg = config or BodyConfig()
    noise = GradientNoise(seed)
    # Fresh stream from the same seed; independent of the data draws
    rng = SeededRandom(seed)

    angles = np.array([(i / vertex_count) * math.pi * 2.0 for i in range(vertex_count)], dtype=np.float64)
    deformation = noise.ring(angles, octaves=cfg.noise_octaves, scale=cfg.noise_scale) * roughness

    ring = []
    for angle, d in zip(angles, deformation):
        d = float(d)
        if rng.next() < cfg.bump_chance:
            d += rng.range(-cfg.bump_amplitude, cfg.bump_amplitude)
        multiplier = 1.0 + d * 0.5
        ring.append((float(angle), base_radius * max(cfg.min_radius_mult, multiplier)))
    return tuple(ring)


def generate_body(
    params: ImpactParameters,
    base_radius: float | None = None,
    config: BodyConfig | None = None,
) -> ProceduralBody:
    """Build the procedural body for an impactor.

    Args:
        params: Only diameter, velocity and angle are read.
        base_radius: Radius of the undeformed ring; defaults to half the diameter.
    """
    seed = generate_seed(params.diameter, params.velocity, params.angle)
    rng = SeededRandom(seed)
    composition = determine_composition(params.diameter, params.velocity)
    complexity = complexity_for(params.diameter)

    lo, hi = ROUGHNESS_RANGE[composition]
    roughness = rng.range(lo, hi)
    vertex_count = math.floor(20 + complexity * 30)
    palette = generate_palette(composition, rng)
    craters = generate_crater_layout(complexity, rng)

    radius = float(params.diameter) / 2.0 if base_radius is None else float(base_radius)
    ring = generate_vertex_ring(seed, vertex_count, roughness, radius, config)

    return ProceduralBody(
        seed=seed,
        composition=composition,
        complexity=complexity,
        roughness=roughness,
        base_radius=radius,
        vertex_ring=ring,
        palette=palette,
        crater_layout=craters,
    )

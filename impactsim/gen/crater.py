"""Procedural impact craters, seeded from the impactor and its physics result."""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

import numpy as np

from ..config import CraterConfig
from .body import HSL, ROUGHNESS_RANGE, ProceduralBody
from .noise import GradientNoise
from .rng import SeededRandom

if TYPE_CHECKING:
    from ..physics.impact import ImpactResult

CRATER_SEED_MODULUS = 999999

RIM_COMPOSITION_FACTOR: dict[str, float] = {
    "rocky": 1.2,
    "metallic": 0.8,
    "icy": 0.9,
}

# (hue, saturation, lightness) ranges per palette slot, drawn in this order.
_Ranges = tuple[tuple[float, float], tuple[float, float], tuple[float, float]]
CRATER_COLOR_RANGES: dict[str, dict[str, _Ranges]] = {
    "rocky": {
        "floor_center": ((15, 35), (25, 45), (15, 25)),
        "floor_mid": ((20, 40), (30, 50), (25, 35)),
        "floor_edge": ((25, 45), (35, 55), (35, 45)),
        "rim_outer": ((30, 50), (40, 60), (45, 55)),
        "rim_inner": ((20, 40), (35, 55), (40, 50)),
        "rim_highlight": ((35, 55), (45, 65), (55, 65)),
        "ejecta_primary": ((25, 45), (40, 60), (45, 55)),
        "ejecta_secondary": ((20, 40), (35, 55), (35, 45)),
        "ejecta_dust": ((30, 50), (20, 40), (60, 80)),
        "shadow": ((15, 35), (20, 40), (10, 20)),
    },
    "metallic": {
        "floor_center": ((200, 240), (10, 20), (20, 30)),
        "floor_mid": ((200, 240), (15, 25), (30, 40)),
        "floor_edge": ((200, 240), (20, 30), (40, 50)),
        "rim_outer": ((200, 240), (25, 35), (50, 60)),
        "rim_inner": ((200, 240), (20, 30), (45, 55)),
        "rim_highlight": ((200, 240), (30, 40), (60, 70)),
        "ejecta_primary": ((200, 240), (25, 35), (50, 60)),
        "ejecta_secondary": ((200, 240), (20, 30), (40, 50)),
        "ejecta_dust": ((200, 240), (15, 25), (70, 80)),
        "shadow": ((200, 240), (10, 20), (15, 25)),
    },
    "icy": {
        "floor_center": ((200, 240), (30, 50), (25, 35)),
        "floor_mid": ((190, 230), (35, 55), (35, 45)),
        "floor_edge": ((180, 220), (40, 60), (45, 55)),
        "rim_outer": ((180, 220), (45, 65), (55, 65)),
        "rim_inner": ((190, 230), (40, 60), (50, 60)),
        "rim_highlight": ((170, 210), (50, 70), (65, 75)),
        "ejecta_primary": ((180, 220), (45, 65), (55, 65)),
        "ejecta_secondary": ((190, 230), (40, 60), (45, 55)),
        "ejecta_dust": ((170, 210), (30, 50), (75, 85)),
        "shadow": ((200, 240), (25, 45), (20, 30)),
    },
}


@dataclass(frozen=True)
class EjectaBlob:
    angle: float  # radians
    distance: float  # m from crater center
    size: float  # fraction of crater radius
    density: float  # 0.3 - 1.0


@dataclass(frozen=True)
class ProceduralCrater:
    seed: int
    composition: str
    diameter: float
    depth: float
    rim_height: float
    complexity: float
    rim_segments: int
    inner_rings: int
    irregularity: float
    central_uplift: float
    ray_count: int
    colors: Mapping[str, HSL]
    ejecta: tuple[EjectaBlob, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "colors", MappingProxyType(dict(self.colors)))

    def __hash__(self) -> int:
        return hash((self.seed, self.composition, self.diameter, self.ejecta))

    def to_dict(self) -> dict[str, Any]:
        return {
            "seed": self.seed,
            "composition": self.composition,
            "diameter": self.diameter,
            "depth": self.depth,
            "rim_height": self.rim_height,
            "complexity": self.complexity,
            "rim_segments": self.rim_segments,
            "inner_rings": self.inner_rings,
            "irregularity": self.irregularity,
            "central_uplift": self.central_uplift,
            "ray_count": self.ray_count,
            "colors": {k: v.css() for k, v in self.colors.items()},
            "ejecta": [[e.angle, e.distance, e.size, e.density] for e in self.ejecta],
        }


@dataclass(frozen=True)
class CraterRim:
    vertices: tuple[tuple[float, float], ...]  # (angle rad, radius)
    heights: tuple[float, ...]
    base_radius: float

    def outline(self) -> np.ndarray:
        ring = np.asarray(self.vertices, dtype=np.float64).reshape(-1, 2)
        return np.stack([np.cos(ring[:, 0]) * ring[:, 1], np.sin(ring[:, 0]) * ring[:, 1]], axis=1)


def generate_crater_seed(body_diameter: float, velocity: float, angle: float, result: ImpactResult) -> int:
    value = (
        body_diameter * 1000
        + velocity * 100
        + angle * 10
        + result.energy_megatons * 1000
        + result.crater_diameter_m * 10
    )
    return math.floor(value) % CRATER_SEED_MODULUS


def rim_height_for(crater_diameter: float, angle: float, composition: str) -> float:
    height = crater_diameter * 0.05 * RIM_COMPOSITION_FACTOR.get(composition, 1.0)
    # Oblique impacts pile up a lower, asymmetric rim
    angle_factor = abs(math.sin(math.radians(angle)))
    return height * (0.7 + angle_factor * 0.6)


def generate_crater_colors(composition: str, rng: SeededRandom) -> dict[str, HSL]:
    colors = {}
    for slot, (hr, sr, lr) in CRATER_COLOR_RANGES[composition].items():
        colors[slot] = HSL(rng.range(*hr), rng.range(*sr), rng.range(*lr))
    return colors


def generate_ejecta(crater_diameter: float, rng: SeededRandom) -> tuple[EjectaBlob, ...]:
    count = math.floor(15 + rng.range(0, 10))
    blobs = []
    for _ in range(count):
        angle = rng.range(0.0, math.pi * 2.0)
        distance = crater_diameter * (0.5 + rng.range(0, 1.5))
        # Closer blobs are larger chunks
        falloff = 1.0 - distance / (crater_diameter * 2.0) if crater_diameter > 0.0 else 0.0
        size = falloff * (0.05 + rng.range(0, 0.1))
        density = rng.range(0.3, 1.0)
        blobs.append(EjectaBlob(angle=angle, distance=distance, size=size, density=density))
    return tuple(blobs)


def generate_crater(
    body: ProceduralBody,
    result: ImpactResult,
    *,
    diameter: float,
    velocity: float,
    angle: float,
) -> ProceduralCrater:
    """Build the crater left by `body`.

    `diameter`, `velocity` and `angle` are the impactor inputs the body was
    generated from; they feed the crater seed together with the result.
    """
    seed = generate_crater_seed(diameter, velocity, angle, result)
    rng = SeededRandom(seed)
    composition = body.composition

    complexity = min(max(math.log10(max(result.energy_megatons, 0.0) + 1.0) / 3.0, 0.0), 1.0)
    lo, hi = ROUGHNESS_RANGE[composition]
    irregularity = rng.range(lo, hi)
    central_uplift = rng.range(0.1, 0.3) if complexity > 0.6 else 0.0
    ray_count = rng.randint(3, 8) if composition == "icy" else rng.randint(0, 3)
    colors = generate_crater_colors(composition, rng)
    ejecta = generate_ejecta(result.crater_diameter_m, rng)

    return ProceduralCrater(
        seed=seed,
        composition=composition,
        diameter=result.crater_diameter_m,
        depth=result.crater_depth_m,
        rim_height=rim_height_for(result.crater_diameter_m, angle, composition),
        complexity=complexity,
        rim_segments=math.floor(12 + complexity * 20),
        inner_rings=math.floor(complexity * 3) + 1,
        irregularity=irregularity,
        central_uplift=central_uplift,
        ray_count=ray_count,
        colors=colors,
        ejecta=ejecta,
    )


def crater_rim(crater: ProceduralCrater, base_radius: float, config: CraterConfig | None = None) -> CraterRim:
    cfg = config or CraterConfig()
    noise = GradientNoise(crater.seed)
    rng = SeededRandom(crater.seed)

    n = crater.rim_segments
    angles = np.array([(i / n) * math.pi * 2.0 for i in range(n)], dtype=np.float64)
    variation = noise.ring(angles, octaves=cfg.noise_octaves, scale=cfg.noise_scale) * crater.irregularity

    vertices = []
    heights = []
    for angle, v in zip(angles, variation):
        v = float(v)
        if rng.next() < cfg.bump_chance:
            v += rng.range(-cfg.bump_amplitude, cfg.bump_amplitude)
        radius = base_radius * max(cfg.min_radius_mult, 1.0 + v * 0.3)
        vertices.append((float(angle), radius))
        heights.append(crater.rim_height * (0.8 + rng.range(0, 0.4)))
    return CraterRim(vertices=tuple(vertices), heights=tuple(heights), base_radius=float(base_radius))

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class SpawnCaps:
    # A phase only emits while the live set is below its cap.
    entry: int = 100
    thermal: int = 300
    crater: int = 500
    explosion: int = 1000
    # Hard ceiling on the live set regardless of phase
    total: int = 2000


@dataclass(frozen=True)
class SimConfig:
    dt: float = 1.0 / 60.0
    # Render units per metre before energy scaling; 800 px viewport by default
    viewport_px: float = 800.0
    base_viewport_px: float = 800.0
    air_resistance: float = 0.02
    caps: SpawnCaps = field(default_factory=SpawnCaps)
    # Explosion burst happens during the first half second of the phase
    explosion_burst_window_s: float = 0.5
    # Per-tick emission probabilities (crater: 50%, thermal dust: 30%)
    crater_emit_chance: float = 0.5
    thermal_emit_chance: float = 0.3
    min_crater_radius_px: float = 20.0
    min_meteor_radius_px: float = 2.0
    seed: int | None = None


@dataclass(frozen=True)
class BodyConfig:
    noise_octaves: int = 4
    noise_scale: float = 2.0
    bump_chance: float = 0.3
    bump_amplitude: float = 0.2
    min_radius_mult: float = 0.5


@dataclass(frozen=True)
class CraterConfig:
    noise_octaves: int = 3
    noise_scale: float = 3.0
    bump_chance: float = 0.4
    bump_amplitude: float = 0.15
    min_radius_mult: float = 0.7

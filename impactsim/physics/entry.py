"""Atmospheric entry, fireball and ejecta estimates that parameterize the timeline."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from ..constants import (
    COMPOSITION_STRENGTH_PA,
    ENTRY_ALTITUDE_M,
    SCALE_HEIGHT_M,
    SEA_LEVEL_AIR_DENSITY,
    SPEED_OF_SOUND_M_S,
)
from .impact import ImpactParameters, crater_size, fireball_effects, to_megatons

# Breakups above this altitude for bodies below AIRBURST_MAX_DIAMETER_M dump
# their energy in the air (Chelyabinsk / Tunguska class).
AIRBURST_MIN_ALTITUDE_M = 5000.0
AIRBURST_MAX_DIAMETER_M = 200.0
MAX_FRAGMENTS = 64
# Shallowest path considered when computing atmospheric path length
MIN_PATH_SIN = 0.01


@dataclass(frozen=True)
class EntryProfile:
    ram_pressure_pa: float
    strength_pa: float
    fragments: bool
    fragment_count: int
    breakup_altitude_m: float
    airburst: bool
    sonic_boom: bool
    path_length_m: float
    entry_duration_s: float
    trail_length_m: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "ram_pressure_pa": self.ram_pressure_pa,
            "strength_pa": self.strength_pa,
            "fragments": self.fragments,
            "fragment_count": self.fragment_count,
            "breakup_altitude_m": self.breakup_altitude_m,
            "airburst": self.airburst,
            "sonic_boom": self.sonic_boom,
            "path_length_m": self.path_length_m,
            "entry_duration_s": self.entry_duration_s,
            "trail_length_m": self.trail_length_m,
        }


@dataclass(frozen=True)
class FireballProfile:
    max_radius_km: float
    peak_temp_c: float
    duration_s: float
    luminosity: str  # "faint" | "bright" | "blinding"

    def to_dict(self) -> dict[str, Any]:
        return {
            "max_radius_km": self.max_radius_km,
            "peak_temp_c": self.peak_temp_c,
            "duration_s": self.duration_s,
            "luminosity": self.luminosity,
        }


@dataclass(frozen=True)
class EjectaProfile:
    excavated_volume_m3: float
    max_throw_m: float
    launch_angle_min_deg: float
    launch_angle_max_deg: float

    @property
    def has_ejecta(self) -> bool:
        return self.excavated_volume_m3 > 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "excavated_volume_m3": self.excavated_volume_m3,
            "max_throw_m": self.max_throw_m,
            "launch_angle_min_deg": self.launch_angle_min_deg,
            "launch_angle_max_deg": self.launch_angle_max_deg,
        }


def atmospheric_entry(params: ImpactParameters) -> EntryProfile:
    """Pancake-style breakup estimate.

    The body fragments where ram pressure rho(h) v^2 first exceeds its
    tensile strength; with an exponential atmosphere that altitude is
    H * ln(rho0 v^2 / S).
    """
    velocity_ms = max(0.0, params.velocity * 1000.0)
    ram = SEA_LEVEL_AIR_DENSITY * velocity_ms**2
    strength = COMPOSITION_STRENGTH_PA.get(params.composition, COMPOSITION_STRENGTH_PA["rocky"])

    fragments = ram > strength
    if fragments:
        ratio = ram / strength
        breakup_alt = min(ENTRY_ALTITUDE_M, SCALE_HEIGHT_M * math.log(ratio))
        fragment_count = min(MAX_FRAGMENTS, 1 + int(math.log2(ratio)))
    else:
        breakup_alt = 0.0
        fragment_count = 1

    path_sin = max(MIN_PATH_SIN, math.sin(math.radians(params.angle)))
    path_length = ENTRY_ALTITUDE_M / path_sin
    duration = path_length / velocity_ms if velocity_ms > 0.0 else 0.0

    return EntryProfile(
        ram_pressure_pa=ram,
        strength_pa=strength,
        fragments=fragments,
        fragment_count=fragment_count,
        breakup_altitude_m=breakup_alt,
        airburst=fragments and breakup_alt >= AIRBURST_MIN_ALTITUDE_M and params.diameter <= AIRBURST_MAX_DIAMETER_M,
        sonic_boom=velocity_ms > SPEED_OF_SOUND_M_S,
        path_length_m=path_length,
        entry_duration_s=duration,
        trail_length_m=max(0.0, params.diameter) * (2.0 + max(0.0, params.velocity) / 10.0),
    )


def enhanced_fireball(energy_j: float, params: ImpactParameters) -> FireballProfile:
    radius_km, temp_c = fireball_effects(energy_j)
    megatons = to_megatons(energy_j)
    if megatons < 0.01:
        luminosity = "faint"
    elif megatons < 100.0:
        luminosity = "bright"
    else:
        luminosity = "blinding"
    # Icy bodies vaporize faster and flash shorter
    vapor_scale = 0.7 if params.composition == "icy" else 1.0
    duration = vapor_scale * 2.0 * megatons**0.25 if megatons > 0.0 else 0.0
    return FireballProfile(max_radius_km=radius_km, peak_temp_c=temp_c, duration_s=duration, luminosity=luminosity)


def ejecta_profile(params: ImpactParameters, energy_j: float) -> EjectaProfile:
    diameter, depth = crater_size(params, energy_j)
    # Paraboloid bowl
    volume = math.pi / 8.0 * diameter**2 * depth
    return EjectaProfile(
        excavated_volume_m3=volume,
        max_throw_m=2.0 * diameter,
        launch_angle_min_deg=45.0,
        launch_angle_max_deg=90.0,
    )

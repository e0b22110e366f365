"""Closed-form impact effects.

Everything here is a pure function of the inputs. The coefficients are
illustrative order-of-magnitude scaling laws, not a validated impact model.
None of these functions validate their inputs; use `validate_parameters`
before calling them with user data. Degenerate inputs (zero diameter or
velocity) yield an all-zero, finite result, and `calculate_impact` saturates
energy at MAX_IMPACT_ENERGY_J so its result is always finite.
"""

from __future__ import annotations

import math
import numbers
import sys
from dataclasses import dataclass, field, replace
from typing import Any

import numpy as np

from ..constants import (
    CASUALTY_RATIO,
    COMPOSITION_DENSITY,
    COMPOSITIONS,
    CRATER_COEFF,
    CRATER_DEPTH_RATIO,
    CRATER_EXPONENT,
    DEFAULT_POPULATION_DENSITY,
    FIREBALL_BASE_TEMP_C,
    FIREBALL_RADIUS_COEFF,
    FIREBALL_RADIUS_EXPONENT,
    FIREBALL_TEMP_PER_MT,
    JOULES_PER_MEGATON,
    MAX_IMPACT_ENERGY_J,
    MAX_POPULATION_DENSITY,
    MAX_VELOCITY_KM_S,
    OVERPRESSURE_COEFF,
    OVERPRESSURE_EXPONENT,
    RANDOM_ANGLE_RANGE_DEG,
    RANDOM_DIAMETER_RANGE_M,
    RANDOM_VELOCITY_RANGE_KM_S,
    SEISMIC_MAGNITUDE_MAX,
    SEISMIC_MAGNITUDE_MIN,
    SEISMIC_OFFSET,
    SEISMIC_RADIUS_COEFF,
    SEISMIC_RADIUS_EXPONENT,
    SEISMIC_REFERENCE_J,
    SHOCKWAVE_COEFF,
    SHOCKWAVE_EXPONENT,
    THERMAL_RADIUS_COEFF,
    THERMAL_RADIUS_EXPONENT,
)


class ImpactValidationError(ValueError):
    """Raised when impact parameters are outside the physical domain."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


@dataclass(frozen=True)
class ImpactParameters:
    diameter: float  # m
    velocity: float  # km/s
    angle: float  # degrees from horizontal, 90 is vertical
    density: float  # kg/m^3
    composition: str = "rocky"  # "rocky" | "iron" | "icy"

    @classmethod
    def for_composition(
        cls,
        diameter: float,
        velocity: float,
        angle: float,
        composition: str = "rocky",
        density: float | None = None,
    ) -> ImpactParameters:
        """Build parameters with density looked up from the composition unless given."""
        if density is None:
            density = density_for_composition(composition)
        return cls(
            diameter=float(diameter),
            velocity=float(velocity),
            angle=float(angle),
            density=float(density),
            composition=composition,
        )

    def with_changes(self, **changes: Any) -> ImpactParameters:
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "diameter": self.diameter,
            "velocity": self.velocity,
            "angle": self.angle,
            "density": self.density,
            "composition": self.composition,
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> ImpactParameters:
        return cls.for_composition(
            diameter=d["diameter"],
            velocity=d["velocity"],
            angle=d["angle"],
            composition=d.get("composition", "rocky"),
            density=d.get("density"),
        )


@dataclass(frozen=True)
class ImpactResult:
    energy_joules: float
    energy_megatons: float
    crater_diameter_m: float
    crater_depth_m: float
    fireball_radius_km: float
    fireball_temp_c: float
    overpressure_radius_km: float
    shockwave_radius_km: float
    seismic_magnitude: float
    seismic_radius_km: float
    thermal_radius_km: float
    casualties_estimated: int
    affected_population: int
    population_density: float = field(default=DEFAULT_POPULATION_DENSITY)

    @property
    def max_effect_radius_km(self) -> float:
        return max(self.fireball_radius_km, self.overpressure_radius_km, self.thermal_radius_km)

    def to_dict(self) -> dict[str, Any]:
        return {
            "energy_joules": self.energy_joules,
            "energy_megatons": self.energy_megatons,
            "crater_diameter_m": self.crater_diameter_m,
            "crater_depth_m": self.crater_depth_m,
            "fireball_radius_km": self.fireball_radius_km,
            "fireball_temp_c": self.fireball_temp_c,
            "overpressure_radius_km": self.overpressure_radius_km,
            "shockwave_radius_km": self.shockwave_radius_km,
            "seismic_magnitude": self.seismic_magnitude,
            "seismic_radius_km": self.seismic_radius_km,
            "thermal_radius_km": self.thermal_radius_km,
            "casualties_estimated": self.casualties_estimated,
            "affected_population": self.affected_population,
            "population_density": self.population_density,
        }


def density_for_composition(composition: str) -> float:
    return COMPOSITION_DENSITY.get(composition, COMPOSITION_DENSITY["rocky"])


def _is_number(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, (bool, np.bool_)) and math.isfinite(value)


def _saturate(value: float) -> float:
    """Clamp +-inf to the largest finite float and NaN to zero."""
    if math.isnan(value):
        return 0.0
    return max(-sys.float_info.max, min(value, sys.float_info.max))


def validate_parameters(params: ImpactParameters, population_density: float | None = None) -> None:
    """Reject inputs the model would silently turn into zero/negative/NaN output.

    Raises:
        ImpactValidationError: listing every problem found.
    """
    errors: list[str] = []
    for name in ("diameter", "velocity", "density"):
        value = getattr(params, name)
        if not _is_number(value):
            errors.append(f"{name} must be a finite number, got {value!r}")
        elif value <= 0.0:
            errors.append(f"{name} must be positive, got {value!r}")
    if not errors:
        energy = kinetic_energy(params)
        if params.velocity > MAX_VELOCITY_KM_S:
            errors.append(f"velocity must not exceed {MAX_VELOCITY_KM_S} km/s, got {params.velocity!r}")
        elif not math.isfinite(energy) or energy > MAX_IMPACT_ENERGY_J:
            errors.append(f"kinetic energy must not exceed {MAX_IMPACT_ENERGY_J:g} J, got {energy:g}")
    if not _is_number(params.angle):
        errors.append(f"angle must be a finite number, got {params.angle!r}")
    elif not 0.0 <= params.angle <= 90.0:
        errors.append(f"angle must be within [0, 90] degrees, got {params.angle!r}")
    if params.composition not in COMPOSITIONS:
        errors.append(f"composition must be one of {list(COMPOSITIONS)}, got {params.composition!r}")
    if population_density is not None:
        if not _is_number(population_density) or population_density < 0.0:
            errors.append(f"population_density must be a non-negative number, got {population_density!r}")
        elif population_density > MAX_POPULATION_DENSITY:
            errors.append(f"population_density must not exceed {MAX_POPULATION_DENSITY:g}, got {population_density!r}")
    if errors:
        raise ImpactValidationError(errors)


def _power(megatons: float, coeff: float, exponent: float) -> float:
    if megatons <= 0.0:
        return 0.0
    return coeff * megatons**exponent


def mass_kg(params: ImpactParameters) -> float:
    radius = params.diameter / 2.0
    volume = (4.0 / 3.0) * math.pi * radius * radius * radius
    return volume * params.density


def kinetic_energy(params: ImpactParameters) -> float:
    """KE = 1/2 m v^2 in joules, velocity converted from km/s.

    Unvalidated inputs may overflow to inf (or NaN for inf * 0); this never raises.
    """
    velocity_ms = params.velocity * 1000.0
    return 0.5 * mass_kg(params) * velocity_ms * velocity_ms


def to_megatons(energy_j: float) -> float:
    return energy_j / JOULES_PER_MEGATON


def crater_size(params: ImpactParameters, energy_j: float) -> tuple[float, float]:
    """Return (diameter_m, depth_m).

    Effective energy is scaled by sin(angle); a grazing impact (angle 0)
    couples no energy and leaves a zero crater.
    """
    effective = energy_j * math.sin(math.radians(params.angle))
    if effective <= 0.0:
        return 0.0, 0.0
    diameter = CRATER_COEFF * effective**CRATER_EXPONENT
    return diameter, diameter / CRATER_DEPTH_RATIO


def fireball_effects(energy_j: float) -> tuple[float, float]:
    """Return (radius_km, temperature_c)."""
    megatons = to_megatons(energy_j)
    radius = _power(megatons, FIREBALL_RADIUS_COEFF, FIREBALL_RADIUS_EXPONENT)
    temperature = FIREBALL_BASE_TEMP_C + megatons * FIREBALL_TEMP_PER_MT
    return radius, temperature


def airblast_effects(energy_j: float) -> tuple[float, float]:
    """Return (overpressure_radius_km, shockwave_radius_km)."""
    megatons = to_megatons(energy_j)
    return (
        _power(megatons, OVERPRESSURE_COEFF, OVERPRESSURE_EXPONENT),
        _power(megatons, SHOCKWAVE_COEFF, SHOCKWAVE_EXPONENT),
    )


def seismic_magnitude(energy_j: float) -> float:
    if energy_j <= 0.0:
        return SEISMIC_MAGNITUDE_MIN
    magnitude = (2.0 / 3.0) * math.log10(energy_j / SEISMIC_REFERENCE_J) - SEISMIC_OFFSET
    return min(SEISMIC_MAGNITUDE_MAX, max(SEISMIC_MAGNITUDE_MIN, magnitude))


def seismic_effects(energy_j: float) -> tuple[float, float]:
    """Return (magnitude, effective_radius_km)."""
    megatons = to_megatons(energy_j)
    return seismic_magnitude(energy_j), _power(megatons, SEISMIC_RADIUS_COEFF, SEISMIC_RADIUS_EXPONENT)


def thermal_effects(energy_j: float) -> float:
    """Return the third-degree burn radius in km."""
    return _power(to_megatons(energy_j), THERMAL_RADIUS_COEFF, THERMAL_RADIUS_EXPONENT)


def estimate_casualties(
    fireball_radius_km: float,
    overpressure_radius_km: float,
    thermal_radius_km: float,
    population_density: float = DEFAULT_POPULATION_DENSITY,
) -> tuple[int, int]:
    """Return (estimated_casualties, affected_population).

    Single circle of the largest damage radius; casualties are a flat share of
    everyone inside it.
    """
    radius = max(fireball_radius_km, overpressure_radius_km, thermal_radius_km)
    area_km2 = math.pi * radius * radius
    affected = math.floor(_saturate(area_km2 * population_density))
    return math.floor(affected * CASUALTY_RATIO), affected


def calculate_impact(
    params: ImpactParameters,
    population_density: float = DEFAULT_POPULATION_DENSITY,
) -> ImpactResult:
    energy = min(_saturate(kinetic_energy(params)), MAX_IMPACT_ENERGY_J)
    crater_d, crater_depth = crater_size(params, energy)
    fireball_r, fireball_t = fireball_effects(energy)
    overpressure_r, shockwave_r = airblast_effects(energy)
    magnitude, seismic_r = seismic_effects(energy)
    thermal_r = thermal_effects(energy)
    casualties, affected = estimate_casualties(fireball_r, overpressure_r, thermal_r, population_density)

    return ImpactResult(
        energy_joules=energy,
        energy_megatons=to_megatons(energy),
        crater_diameter_m=crater_d,
        crater_depth_m=crater_depth,
        fireball_radius_km=fireball_r,
        fireball_temp_c=fireball_t,
        overpressure_radius_km=overpressure_r,
        shockwave_radius_km=shockwave_r,
        seismic_magnitude=magnitude,
        seismic_radius_km=seismic_r,
        thermal_radius_km=thermal_r,
        casualties_estimated=casualties,
        affected_population=affected,
        population_density=_saturate(float(population_density)),
    )


def default_parameters() -> ImpactParameters:
    # Tunguska-scale rocky body
    return ImpactParameters(diameter=100.0, velocity=20.0, angle=45.0, density=3000.0, composition="rocky")


def random_parameters(rng: np.random.Generator) -> ImpactParameters:
    """Draw a plausible impactor: uniform size, speed and angle, one of the three compositions."""
    composition = COMPOSITIONS[int(rng.integers(len(COMPOSITIONS)))]
    return ImpactParameters.for_composition(
        diameter=float(rng.uniform(*RANDOM_DIAMETER_RANGE_M)),
        velocity=float(rng.uniform(*RANDOM_VELOCITY_RANGE_KM_S)),
        angle=float(rng.uniform(*RANDOM_ANGLE_RANGE_DEG)),
        composition=composition,
    )

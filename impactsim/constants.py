from __future__ import annotations

# ==============================================================================
# Units
# ==============================================================================

# 1 megaton of TNT in joules
JOULES_PER_MEGATON = 4.184e15

# Reference energy for the Richter relation: M = (2/3) * log10(E / 1e10) - 3.2
SEISMIC_REFERENCE_J = 1e10
SEISMIC_OFFSET = 3.2
SEISMIC_MAGNITUDE_MIN = 0.0
SEISMIC_MAGNITUDE_MAX = 10.0

# ==============================================================================
# Compositions
# ==============================================================================

# Bulk density lookup (kg/m^3). Explicit density on ImpactParameters overrides it.
COMPOSITION_DENSITY: dict[str, float] = {
    "rocky": 3000.0,
    "iron": 7800.0,
    "icy": 1000.0,
}
COMPOSITIONS = tuple(COMPOSITION_DENSITY)

# Tensile strength (Pa) used for the atmospheric breakup threshold
COMPOSITION_STRENGTH_PA: dict[str, float] = {
    "rocky": 2.0e7,
    "iron": 1.0e8,
    "icy": 1.0e6,
}

# ==============================================================================
# Scaling laws (illustrative, order-of-magnitude)
# ==============================================================================

# Crater: D [m] = CRATER_COEFF * (E_eff [J]) ** CRATER_EXPONENT, depth = D / 5
CRATER_COEFF = 0.035
CRATER_EXPONENT = 0.25
CRATER_DEPTH_RATIO = 5.0

# Fireball: radius [km] = 0.28 * MT ** 0.33, temperature [C] = 5000 + 10 * MT
FIREBALL_RADIUS_COEFF = 0.28
FIREBALL_RADIUS_EXPONENT = 0.33
FIREBALL_BASE_TEMP_C = 5000.0
FIREBALL_TEMP_PER_MT = 10.0

# Air blast (km): 5 psi overpressure and perceptible shockwave
OVERPRESSURE_COEFF = 2.2
OVERPRESSURE_EXPONENT = 0.33
SHOCKWAVE_COEFF = 8.5
SHOCKWAVE_EXPONENT = 0.4

# Seismic damage radius (km)
SEISMIC_RADIUS_COEFF = 15.0
SEISMIC_RADIUS_EXPONENT = 0.4

# Third-degree burn radius (km)
THERMAL_RADIUS_COEFF = 3.5
THERMAL_RADIUS_EXPONENT = 0.41

# Population
DEFAULT_POPULATION_DENSITY = 100.0  # people per km^2
CASUALTY_RATIO = 0.7

# ==============================================================================
# Input domain
# ==============================================================================

# Nothing travels faster than light
MAX_VELOCITY_KM_S = 299_792.458
# Kinetic energy ceiling (J). Roughly a Mars-sized impactor; every derived
# radius stays a finite float below it.
MAX_IMPACT_ENERGY_J = 1e32
# Densest real cities are a few 1e4 per km^2
MAX_POPULATION_DENSITY = 1e6

# Random impactor ranges
RANDOM_DIAMETER_RANGE_M = (10.0, 1000.0)
RANDOM_VELOCITY_RANGE_KM_S = (11.0, 72.0)
RANDOM_ANGLE_RANGE_DEG = (0.0, 90.0)

# ==============================================================================
# Atmosphere
# ==============================================================================

SEA_LEVEL_AIR_DENSITY = 1.225  # kg/m^3
SCALE_HEIGHT_M = 8500.0
ENTRY_ALTITUDE_M = 120_000.0
SPEED_OF_SOUND_M_S = 343.0

# ==============================================================================
# Timeline
# ==============================================================================

PHASE_ENTRY = "atmospheric_entry"
PHASE_TERMINAL = "terminal_phase"
PHASE_EXPLOSION = "impact_explosion"
PHASE_CRATER = "crater_formation"
PHASE_THERMAL = "thermal_effects"

# Ordered (name, duration_s). Total is 18 s.
PHASE_DURATIONS_S: tuple[tuple[str, float], ...] = (
    (PHASE_ENTRY, 3.0),
    (PHASE_TERMINAL, 2.0),
    (PHASE_EXPLOSION, 1.0),
    (PHASE_CRATER, 4.0),
    (PHASE_THERMAL, 8.0),
)

# ==============================================================================
# Particle physics
# ==============================================================================

# Gravity in meters per second squared (Earth standard)
GRAVITY_M_S2 = 9.81

# Life span in seconds by particle type; anything not listed lives 3 s
PARTICLE_MAX_LIFE_S: dict[str, float] = {
    "dust": 10.0,
    "ejecta": 5.0,
}
DEFAULT_PARTICLE_MAX_LIFE_S = 3.0

PARTICLE_COLORS: dict[str, str] = {
    "ejecta": "#8B4513",
    "dust": "#D2B48C",
    "plasma": "#FFD700",
    "fragment": "#A9A9A9",
    "vapor": "#FFA500",
}
PARTICLE_TYPES = tuple(PARTICLE_COLORS)

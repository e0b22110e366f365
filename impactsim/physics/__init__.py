from .entry import EjectaProfile, EntryProfile, FireballProfile, atmospheric_entry, ejecta_profile, enhanced_fireball
from .impact import (
    ImpactParameters,
    ImpactResult,
    ImpactValidationError,
    calculate_impact,
    default_parameters,
    density_for_composition,
    kinetic_energy,
    random_parameters,
    validate_parameters,
)
from .severity import Severity, historical_comparison, impact_severity

__all__ = [
    "EjectaProfile",
    "EntryProfile",
    "FireballProfile",
    "ImpactParameters",
    "ImpactResult",
    "ImpactValidationError",
    "Severity",
    "atmospheric_entry",
    "calculate_impact",
    "default_parameters",
    "density_for_composition",
    "ejecta_profile",
    "enhanced_fireball",
    "historical_comparison",
    "impact_severity",
    "kinetic_energy",
    "random_parameters",
    "validate_parameters",
]

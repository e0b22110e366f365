from .config import SimConfig
from .gen.body import ProceduralBody, generate_body
from .physics.impact import ImpactParameters, ImpactResult, ImpactValidationError, calculate_impact, validate_parameters
from .sim.particles import ParticleSystem
from .sim.simulation import ImpactSimulation
from .sim.timeline import PhaseTimeline, build_timeline, current_phase
from .sites import ImpactLocation, ImpactSite, SiteRegistry

__all__ = [
    "ImpactLocation",
    "ImpactParameters",
    "ImpactResult",
    "ImpactSimulation",
    "ImpactSite",
    "ImpactValidationError",
    "ParticleSystem",
    "PhaseTimeline",
    "ProceduralBody",
    "SimConfig",
    "SiteRegistry",
    "build_timeline",
    "calculate_impact",
    "current_phase",
    "generate_body",
    "validate_parameters",
]

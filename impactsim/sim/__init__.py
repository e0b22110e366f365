from .particle import Particle, ParticleView
from .particles import ParticleSystem
from .simulation import Frame, ImpactSimulation
from .timeline import Phase, PhaseTimeline, build_timeline, crater_reveal_progress, current_phase, phase_progress

__all__ = [
    "Frame",
    "ImpactSimulation",
    "Particle",
    "ParticleSystem",
    "ParticleView",
    "Phase",
    "PhaseTimeline",
    "build_timeline",
    "crater_reveal_progress",
    "current_phase",
    "phase_progress",
]

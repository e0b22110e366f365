"""Fixed five-phase event timeline.

Durations are constants; only the per-phase effect flags depend on the
impactor. Time is always passed in explicitly as `elapsed_s` so phase lookup
is a pure function and restarts begin again from zero.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from ..constants import (
    PHASE_CRATER,
    PHASE_DURATIONS_S,
    PHASE_ENTRY,
    PHASE_EXPLOSION,
    PHASE_TERMINAL,
    PHASE_THERMAL,
)
from ..physics.entry import atmospheric_entry, ejecta_profile, enhanced_fireball
from ..physics.impact import thermal_effects, to_megatons

if TYPE_CHECKING:
    from ..physics.impact import ImpactParameters

# Energy at which the explosion renders at full intensity
FULL_INTENSITY_MT = 50.0
# Impacts at or above this loft a lingering dust cloud
DUST_CLOUD_MIN_MT = 1.0


def _freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, list):
        return tuple(_freeze(v) for v in value)
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [_thaw(v) for v in value]
    return value


@dataclass(frozen=True)
class Phase:
    name: str
    start_time_s: float
    duration_s: float
    effect_flags: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "effect_flags", _freeze(self.effect_flags))

    def __hash__(self) -> int:
        return hash((self.name, self.start_time_s, self.duration_s))

    @property
    def end_time_s(self) -> float:
        return self.start_time_s + self.duration_s

    def contains(self, elapsed_s: float) -> bool:
        return self.start_time_s <= elapsed_s < self.end_time_s

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "start_time_s": self.start_time_s,
            "duration_s": self.duration_s,
            "effect_flags": _thaw(self.effect_flags),
        }


@dataclass(frozen=True)
class PhaseTimeline:
    phases: tuple[Phase, ...]
    energy_joules: float

    @property
    def total_duration_s(self) -> float:
        return sum(p.duration_s for p in self.phases)

    def phase(self, name: str) -> Phase:
        for p in self.phases:
            if p.name == name:
                return p
        raise KeyError(name)

    def current_phase(self, elapsed_s: float) -> Phase | None:
        return current_phase(self, elapsed_s)

    def to_dict(self) -> dict[str, Any]:
        return {
            "energy_joules": self.energy_joules,
            "total_duration_s": self.total_duration_s,
            "phases": [p.to_dict() for p in self.phases],
        }


def _phase_flags(params: ImpactParameters, energy_j: float) -> dict[str, dict[str, Any]]:
    entry = atmospheric_entry(params)
    fireball = enhanced_fireball(energy_j, params)
    ejecta = ejecta_profile(params, energy_j)
    megatons = to_megatons(energy_j)
    return {
        PHASE_ENTRY: {
            "fragmentation": {
                "fragments": entry.fragments,
                "fragment_count": entry.fragment_count,
                "breakup_altitude_m": entry.breakup_altitude_m,
            },
            "trail_length_m": entry.trail_length_m,
            "plasma": entry.sonic_boom,
        },
        PHASE_TERMINAL: {
            "fragments": entry.fragments,
            "fragment_count": entry.fragment_count,
            "sonic_boom": entry.sonic_boom,
            "airburst": entry.airburst,
        },
        PHASE_EXPLOSION: {
            "fireball": fireball.to_dict(),
            "intensity": min(megatons / FULL_INTENSITY_MT, 1.0),
        },
        PHASE_CRATER: {
            "ejecta": ejecta.has_ejecta,
            "max_throw_m": ejecta.max_throw_m,
        },
        PHASE_THERMAL: {
            "thermal_radius_km": thermal_effects(energy_j),
            "dust_cloud": megatons >= DUST_CLOUD_MIN_MT,
        },
    }


def build_timeline(params: ImpactParameters, energy_j: float) -> PhaseTimeline:
    flags = _phase_flags(params, energy_j)
    phases = []
    start = 0.0
    for name, duration in PHASE_DURATIONS_S:
        phases.append(Phase(name=name, start_time_s=start, duration_s=duration, effect_flags=flags[name]))
        start += duration
    return PhaseTimeline(phases=tuple(phases), energy_joules=float(energy_j))


def current_phase(timeline: PhaseTimeline, elapsed_s: float) -> Phase | None:
    """Phase active at `elapsed_s`, or None before t=0 and after the last phase."""
    for p in timeline.phases:
        if p.contains(elapsed_s):
            return p
    return None


def phase_progress(timeline: PhaseTimeline, name: str, elapsed_s: float) -> float:
    """0 before the phase starts, 1 once it has ended, linear in between."""
    p = timeline.phase(name)
    if elapsed_s <= p.start_time_s:
        return 0.0
    if elapsed_s >= p.end_time_s:
        return 1.0
    return (elapsed_s - p.start_time_s) / p.duration_s


def crater_reveal_progress(timeline: PhaseTimeline, elapsed_s: float) -> float:
    return phase_progress(timeline, PHASE_CRATER, elapsed_s)

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

import numpy as np

from ..config import SimConfig
from ..constants import (
    DEFAULT_PARTICLE_MAX_LIFE_S,
    GRAVITY_M_S2,
    PARTICLE_COLORS,
    PARTICLE_MAX_LIFE_S,
    PHASE_CRATER,
    PHASE_ENTRY,
    PHASE_EXPLOSION,
    PHASE_TERMINAL,
    PHASE_THERMAL,
)
from .particle import Particle, ParticleView
from .timeline import FULL_INTENSITY_MT, Phase, PhaseTimeline, current_phase

if TYPE_CHECKING:
    from ..physics.impact import ImpactParameters, ImpactResult

logger = logging.getLogger(__name__)

# Particles per emission event
ENTRY_BATCH = 5
FRAGMENT_BATCH = 8
CRATER_BATCH = 10
DUST_BATCH = 5
# Full-intensity explosion burst before capping
EXPLOSION_BURST = 500


def pixels_per_meter(viewport_px: float, base_viewport_px: float, megatons: float) -> float:
    """Render scale: larger events get a little more room."""
    base = viewport_px / base_viewport_px
    energy_scale = math.log10(max(megatons, 0.0) + 1.0) / 3.0
    return base * (1.0 + energy_scale * 0.5)


class ParticleSystem:
    """Stepped particle integrator driven by the phase timeline.

    The system exclusively owns its live particles. Callers advance it once
    per frame with `step` and receive an immutable snapshot; nothing outside
    this class mutates a particle.
    """

    def __init__(
        self,
        params: ImpactParameters,
        result: ImpactResult,
        timeline: PhaseTimeline,
        config: SimConfig | None = None,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.config = config or SimConfig()
        self.timeline = timeline
        self.rng = rng if rng is not None else np.random.default_rng(self.config.seed)
        self.particles: list[Particle] = []
        self.stopped = False
        self.tick = 0

        megatons = result.energy_megatons
        self.ppm = pixels_per_meter(self.config.viewport_px, self.config.base_viewport_px, megatons)
        self.gravity = GRAVITY_M_S2 * self.ppm
        self.crater_radius = max(result.crater_diameter_m / 2.0 * self.ppm, self.config.min_crater_radius_px)
        self.meteor_radius = max(params.diameter / 2.0 * self.ppm, self.config.min_meteor_radius_px)
        self.energy_intensity = min(megatons / FULL_INTENSITY_MT, 1.0)

    def __len__(self) -> int:
        return len(self.particles)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def stop(self) -> None:
        """Drop every live particle and refuse further steps until `reset`."""
        self.particles = []
        self.stopped = True
        logger.debug(f"Particle system stopped at tick {self.tick}")

    def reset(self) -> None:
        self.particles = []
        self.stopped = False
        self.tick = 0

    def snapshot(self) -> list[ParticleView]:
        return [p.view() for p in self.particles]

    def positions(self) -> np.ndarray:
        if not self.particles:
            return np.zeros((0, 2), dtype=np.float64)
        return np.array([(p.x, p.y) for p in self.particles], dtype=np.float64)

    # ------------------------------------------------------------------
    # Spawning
    # ------------------------------------------------------------------

    def _room(self, cap: int) -> int:
        return max(0, min(cap, self.config.caps.total) - len(self.particles))

    def _make(self, x: float, y: float, heading: float, speed: float, kind: str, mass: float) -> Particle:
        rng = self.rng
        if kind == "ejecta":
            size = 3.0 + rng.random() * 4.0
        elif kind == "dust":
            size = 1.0 + rng.random() * 2.0
        else:
            size = 2.0 + rng.random() * 3.0
        return Particle(
            x=float(x),
            y=float(y),
            vx=math.cos(heading) * speed,
            vy=math.sin(heading) * speed,
            max_life=PARTICLE_MAX_LIFE_S.get(kind, DEFAULT_PARTICLE_MAX_LIFE_S),
            size=float(size),
            mass=float(mass),
            kind=kind,
            color=PARTICLE_COLORS[kind],
            rotation=float(rng.random() * math.pi * 2.0),
            rotation_speed=float((rng.random() - 0.5) * 12.0),
        )

    def _emit(self, new: list[Particle], cap: int) -> None:
        room = self._room(cap)
        if len(new) > room:
            logger.debug(f"Particle cap {cap} reached, dropping {len(new) - room}")
            new = new[:room]
        self.particles.extend(new)

    def _spawn_entry(self, cx: float, cy: float) -> None:
        cap = self.config.caps.entry
        if len(self.particles) >= cap:
            return
        rng = self.rng
        batch = []
        for _ in range(ENTRY_BATCH):
            a = rng.random() * math.pi * 2.0
            dist = self.meteor_radius * (1.0 + rng.random() * 2.0)
            batch.append(
                self._make(
                    cx + math.cos(a) * dist,
                    cy - self.meteor_radius * 3.0 + rng.random() * 50.0,
                    math.pi / 2.0 + (rng.random() - 0.5) * 0.5,
                    50.0 + rng.random() * 50.0,
                    "plasma",
                    0.1,
                )
            )
        self._emit(batch, cap)

    def _spawn_fragments(self, phase: Phase, cx: float, cy: float) -> None:
        if not phase.effect_flags.get("fragments"):
            return
        cap = self.config.caps.entry
        if len(self.particles) >= cap:
            return
        rng = self.rng
        count = min(int(phase.effect_flags.get("fragment_count", 1)), FRAGMENT_BATCH)
        batch = []
        for _ in range(count):
            a = math.pi / 2.0 + (rng.random() - 0.5) * 1.2
            batch.append(
                self._make(
                    cx + (rng.random() - 0.5) * self.meteor_radius * 4.0,
                    cy - self.meteor_radius * 2.0,
                    a,
                    80.0 + rng.random() * 120.0,
                    "fragment",
                    0.5 + rng.random(),
                )
            )
        self._emit(batch, cap)

    def _spawn_explosion(self, phase: Phase, elapsed_s: float, cx: float, cy: float) -> None:
        if elapsed_s - phase.start_time_s >= self.config.explosion_burst_window_s:
            return
        cap = self.config.caps.explosion
        count = min(math.floor(self.energy_intensity * EXPLOSION_BURST), cap, self._room(cap))
        if count <= 0:
            return
        rng = self.rng
        batch = []
        for i in range(count):
            a = (i / count) * math.pi * 2.0
            dist = rng.random() * 10.0
            kind = "plasma" if rng.random() > 0.5 else "vapor"
            batch.append(
                self._make(cx + math.cos(a) * dist, cy + math.sin(a) * dist, a, 100.0 + rng.random() * 300.0, kind, 0.5)
            )
        self._emit(batch, cap)

    def _spawn_crater(self, phase: Phase, cx: float, cy: float) -> None:
        if not phase.effect_flags.get("ejecta", True):
            return
        cap = self.config.caps.crater
        if len(self.particles) >= cap or self.rng.random() <= 1.0 - self.config.crater_emit_chance:
            return
        rng = self.rng
        batch = []
        for _ in range(CRATER_BATCH):
            a = rng.random() * math.pi * 2.0
            # 45-90 degrees above the local horizontal (-y is up)
            lift = -math.pi / 4.0 - rng.random() * math.pi / 4.0
            batch.append(
                self._make(
                    cx + math.cos(a) * self.crater_radius,
                    cy + math.sin(a) * self.crater_radius,
                    a + lift,
                    50.0 + rng.random() * 150.0,
                    "ejecta",
                    1.0 + rng.random() * 5.0,
                )
            )
        self._emit(batch, cap)

    def _spawn_dust(self, cx: float, cy: float) -> None:
        cap = self.config.caps.thermal
        if len(self.particles) >= cap or self.rng.random() <= 1.0 - self.config.thermal_emit_chance:
            return
        rng = self.rng
        batch = []
        for _ in range(DUST_BATCH):
            a = rng.random() * math.pi * 2.0
            dist = self.crater_radius * (1.0 + rng.random())
            batch.append(
                self._make(cx + math.cos(a) * dist, cy + math.sin(a) * dist, a, 10.0 + rng.random() * 30.0, "dust", 0.1)
            )
        self._emit(batch, cap)

    def spawn(self, elapsed_s: float, center: tuple[float, float]) -> Phase | None:
        phase = current_phase(self.timeline, elapsed_s)
        if phase is None:
            return None
        cx, cy = float(center[0]), float(center[1])
        if phase.name == PHASE_ENTRY:
            self._spawn_entry(cx, cy)
        elif phase.name == PHASE_TERMINAL:
            self._spawn_fragments(phase, cx, cy)
        elif phase.name == PHASE_EXPLOSION:
            self._spawn_explosion(phase, elapsed_s, cx, cy)
        elif phase.name == PHASE_CRATER:
            self._spawn_crater(phase, cx, cy)
        elif phase.name == PHASE_THERMAL:
            self._spawn_dust(cx, cy)
        return phase

    # ------------------------------------------------------------------
    # Integration
    # ------------------------------------------------------------------

    def _integrate(self, p: Particle, dt: float) -> None:
        p.vy += self.gravity * dt

        # Quadratic drag opposing motion, never strong enough to reverse it
        speed = math.hypot(p.vx, p.vy)
        if speed > 0.0:
            dv = self.config.air_resistance * speed * speed * dt
            if dv >= speed:
                p.vx = 0.0
                p.vy = 0.0
            else:
                scale = 1.0 - dv / speed
                p.vx *= scale
                p.vy *= scale

        p.x += p.vx * dt
        p.y += p.vy * dt
        p.rotation += p.rotation_speed * dt

        p.life -= dt / p.max_life
        p.alpha = max(0.0, p.life)

    def step(self, elapsed_s: float, dt: float, center: tuple[float, float]) -> list[ParticleView]:
        """Spawn for the phase active at `elapsed_s`, advance by `dt`, cull the dead.

        Returns the live set after the tick as immutable views.
        """
        if self.stopped:
            return []
        self.tick += 1
        self.spawn(elapsed_s, center)

        dt = float(dt)
        keep = []
        for p in self.particles:
            self._integrate(p, dt)
            if p.alive:
                keep.append(p)
        self.particles = keep
        return self.snapshot()

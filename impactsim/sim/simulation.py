from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import numpy as np

from ..config import SimConfig
from .particles import ParticleSystem
from .timeline import PhaseTimeline, build_timeline, crater_reveal_progress, current_phase

if TYPE_CHECKING:
    from ..physics.impact import ImpactParameters, ImpactResult
    from .particle import ParticleView

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Frame:
    tick: int
    elapsed_s: float
    phase: str | None
    crater_progress: float
    particles: list[ParticleView]

    def to_dict(self) -> dict[str, Any]:
        return {
            "tick": self.tick,
            "elapsed_s": self.elapsed_s,
            "phase": self.phase,
            "crater_progress": self.crater_progress,
            "particles": [
                {"x": p.x, "y": p.y, "alpha": p.alpha, "rotation": p.rotation, "size": p.size, "kind": p.kind}
                for p in self.particles
            ],
        }


class ImpactSimulation:
    """Frame-driven playback of one impact.

    Holds its own simulation clock; the host loop calls `advance` once per
    rendered frame. Stopping clears all particles and the clock. A restart
    rebuilds the timeline and begins again at t=0.

    Every state change holds a reentrant lock, so ticks of one simulation
    never interleave when several threads drive it.
    """

    def __init__(
        self,
        params: ImpactParameters,
        result: ImpactResult,
        config: SimConfig | None = None,
        center: tuple[float, float] = (0.0, 0.0),
    ) -> None:
        self.params = params
        self.result = result
        self.config = config or SimConfig()
        self.center = (float(center[0]), float(center[1]))
        self.timeline: PhaseTimeline = build_timeline(params, result.energy_joules)
        self.particles = self._new_particles()
        self.elapsed_s = 0.0
        self.running = False
        self._lock = threading.RLock()

    def _new_particles(self) -> ParticleSystem:
        rng = np.random.default_rng(self.config.seed)
        return ParticleSystem(self.params, self.result, self.timeline, self.config, rng)

    @property
    def finished(self) -> bool:
        return self.elapsed_s >= self.timeline.total_duration_s

    def start(self) -> None:
        with self._lock:
            self.running = True

    def stop(self) -> None:
        with self._lock:
            self.running = False
            self.elapsed_s = 0.0
            self.particles.stop()

    def restart(self) -> None:
        with self._lock:
            self.stop()
            self.timeline = build_timeline(self.params, self.result.energy_joules)
            self.particles = self._new_particles()
            logger.debug(f"Simulation restarted ({self.timeline.total_duration_s:.1f} s timeline)")
            self.start()

    def advance(self, dt: float | None = None) -> Frame:
        dt = self.config.dt if dt is None else float(dt)
        with self._lock:
            if not self.running:
                return Frame(self.particles.tick, self.elapsed_s, None, 0.0, [])

            views = self.particles.step(self.elapsed_s, dt, self.center)
            phase = current_phase(self.timeline, self.elapsed_s)
            frame = Frame(
                tick=self.particles.tick,
                elapsed_s=self.elapsed_s,
                phase=phase.name if phase is not None else None,
                crater_progress=crater_reveal_progress(self.timeline, self.elapsed_s),
                particles=views,
            )
            self.elapsed_s += dt
            if self.finished:
                self.running = False
            return frame

    def run(self, *, every: int = 1, restart: bool = False) -> list[Frame]:
        """Play the timeline headless to its end, keeping every `every`-th frame.

        Continues a running playback, otherwise (or when `restart` is set)
        starts over from t=0. The whole playback holds the lock.
        """
        with self._lock:
            if restart or not self.running:
                self.restart()
            frames = []
            while self.running:
                frame = self.advance()
                if frame.tick % max(1, every) == 0:
                    frames.append(frame)
            return frames

import math

import numpy as np
import pytest
from hypothesis import settings
from hypothesis import strategies as st
from hypothesis.stateful import RuleBasedStateMachine, initialize, invariant, rule

from impactsim.config import SimConfig, SpawnCaps
from impactsim.constants import PARTICLE_TYPES
from impactsim.physics.impact import ImpactParameters, calculate_impact
from impactsim.sim.particle import Particle
from impactsim.sim.particles import ParticleSystem, pixels_per_meter
from impactsim.sim.timeline import build_timeline

DT = 1.0 / 60.0
CENTER = (400.0, 400.0)


def make_system(params, result, config=None, seed=0):
    timeline = build_timeline(params, result.energy_joules)
    return ParticleSystem(params, result, timeline, config or SimConfig(), np.random.default_rng(seed))


def run_phase(system, start, end, dt=DT):
    t = start
    while t < end:
        system.step(t, dt, CENTER)
        t += dt
    return t


def test_empty_step_is_fine(default_params, default_result):
    system = make_system(default_params, default_result)
    # Outside the timeline nothing spawns and nothing breaks
    assert system.step(100.0, DT, CENTER) == []
    assert system.tick == 1


def test_zero_dt_step(default_params, default_result):
    system = make_system(default_params, default_result)
    views = system.step(0.0, 0.0, CENTER)
    assert len(views) == 5
    assert all(v.life == 1.0 for v in views)


def test_entry_spawns_plasma_up_to_cap(default_params, default_result):
    system = make_system(default_params, default_result)
    views = system.step(0.0, DT, CENTER)
    assert len(views) == 5
    assert {v.kind for v in views} == {"plasma"}

    t = DT
    while t < 2.0:
        system.step(t, DT, CENTER)
        assert len(system) <= SpawnCaps().entry
        t += DT
    # 20 batches fill the cap long before the first plasma expires
    assert len(system) == SpawnCaps().entry


def test_life_strictly_decreases_until_removed(default_params, default_result):
    system = make_system(default_params, default_result)
    system.step(0.0, DT, CENTER)
    tracked = list(system.particles)
    previous = {id(p): p.life for p in tracked}

    for _ in range(10):
        system.step(100.0, DT, CENTER)
        for p in tracked:
            assert p.life < previous[id(p)]
            previous[id(p)] = p.life

    # Plasma lives 3 s; nothing survives 4 s past the timeline
    for _ in range(8):
        system.step(100.0, 0.5, CENTER)
    assert len(system) == 0
    assert all(p.life <= 0.0 for p in tracked)


def test_alpha_tracks_life(default_params, default_result):
    system = make_system(default_params, default_result)
    system.step(0.0, DT, CENTER)
    for _ in range(30):
        for v in system.step(100.0, DT, CENTER):
            assert v.alpha == pytest.approx(max(0.0, v.life))
            assert 0.0 <= v.alpha <= 1.0


def test_explosion_respects_cap(default_params, default_result):
    system = make_system(default_params, default_result)
    t = run_phase(system, 0.0, 5.0)
    for _ in range(5):
        system.step(t, DT, CENTER)
        assert len(system) <= SpawnCaps().explosion
        t += DT
    assert len(system) > 500
    kinds = {p.kind for p in system.particles}
    assert kinds & {"plasma", "vapor"}


def test_explosion_burst_only_in_first_half_second(default_params, default_result):
    system = make_system(default_params, default_result)
    system.step(5.6, DT, CENTER)
    assert len(system) == 0


def test_weak_impact_has_no_burst(small_params, small_result):
    system = make_system(small_params, small_result)
    system.step(5.0, DT, CENTER)
    assert len(system) == 0


def test_terminal_phase_sheds_fragments(default_params, default_result):
    system = make_system(default_params, default_result)
    views = system.step(3.0, DT, CENTER)
    assert views
    assert {v.kind for v in views} == {"fragment"}


def test_crater_and_thermal_kinds(default_params, default_result):
    system = make_system(default_params, default_result, seed=3)
    run_phase(system, 6.0, 7.0)
    assert "ejecta" in {p.kind for p in system.particles}
    assert len(system) <= SpawnCaps().crater

    system.reset()
    run_phase(system, 10.0, 11.0)
    assert {p.kind for p in system.particles} == {"dust"}
    assert len(system) <= SpawnCaps().thermal


def test_gravity_pulls_down(default_params, default_result):
    system = make_system(default_params, default_result)
    p = Particle(x=0.0, y=0.0, vx=0.0, vy=0.0, max_life=10.0, size=1.0, mass=1.0, kind="dust", color="#fff")
    system.particles = [p]
    system.step(100.0, DT, CENTER)
    assert p.vy > 0.0
    assert p.y > 0.0
    assert p.vx == 0.0


def test_drag_never_reverses_velocity(default_params, default_result):
    system = make_system(default_params, default_result, SimConfig(air_resistance=50.0))
    p = Particle(x=0.0, y=0.0, vx=500.0, vy=0.0, max_life=10.0, size=1.0, mass=1.0, kind="dust", color="#fff")
    system.particles = [p]
    system.step(100.0, 0.1, CENTER)
    assert p.vx == 0.0
    assert p.vy == 0.0
    assert p.x == 0.0


def test_rotation_advances(default_params, default_result):
    system = make_system(default_params, default_result)
    p = Particle(
        x=0.0, y=0.0, vx=0.0, vy=0.0, max_life=10.0, size=1.0, mass=1.0, kind="dust", color="#fff",
        rotation=0.0, rotation_speed=2.0,
    )
    system.particles = [p]
    system.step(100.0, 0.5, CENTER)
    assert p.rotation == pytest.approx(1.0)


def test_stop_clears_and_freezes(default_params, default_result):
    system = make_system(default_params, default_result)
    run_phase(system, 0.0, 1.0)
    assert len(system) > 0
    tick = system.tick
    system.stop()
    assert len(system) == 0
    assert system.step(1.0, DT, CENTER) == []
    assert system.tick == tick

    system.reset()
    assert system.step(0.0, DT, CENTER)


def test_seeded_systems_match(default_params, default_result):
    a = make_system(default_params, default_result, seed=11)
    b = make_system(default_params, default_result, seed=11)
    run_phase(a, 0.0, 1.0)
    run_phase(b, 0.0, 1.0)
    np.testing.assert_array_equal(a.positions(), b.positions())


def test_positions_shape(default_params, default_result):
    system = make_system(default_params, default_result)
    assert system.positions().shape == (0, 2)
    system.step(0.0, DT, CENTER)
    assert system.positions().shape == (5, 2)


def test_render_scale_grows_with_energy():
    assert pixels_per_meter(800.0, 800.0, 0.0) == 1.0
    assert pixels_per_meter(800.0, 800.0, 999.0) == pytest.approx(1.5)
    assert pixels_per_meter(400.0, 800.0, 0.0) == 0.5


class ParticleSystemMachine(RuleBasedStateMachine):
    def __init__(self):
        super().__init__()
        self.caps = SpawnCaps(entry=50, thermal=80, crater=120, explosion=200, total=250)
        self.system = None

    @initialize(
        diameter=st.floats(min_value=5.0, max_value=2000.0),
        velocity=st.floats(min_value=11.0, max_value=72.0),
        angle=st.floats(min_value=0.0, max_value=90.0),
        seed=st.integers(min_value=0, max_value=2**16),
    )
    def build(self, diameter, velocity, angle, seed):
        params = ImpactParameters.for_composition(diameter, velocity, angle)
        result = calculate_impact(params)
        self.system = make_system(params, result, SimConfig(caps=self.caps), seed=seed)

    @rule(
        elapsed=st.floats(min_value=-1.0, max_value=20.0),
        dt=st.floats(min_value=0.0, max_value=0.25),
    )
    def step(self, elapsed, dt):
        tick = self.system.tick
        views = self.system.step(elapsed, dt, CENTER)
        if self.system.stopped:
            assert views == []
            assert self.system.tick == tick
        else:
            assert len(views) == len(self.system)
            assert self.system.tick == tick + 1

    @rule()
    def stop(self):
        self.system.stop()
        assert len(self.system) == 0

    @rule()
    def reset(self):
        self.system.reset()
        assert self.system.tick == 0

    @invariant()
    def bounded_and_alive(self):
        if self.system is None:
            return
        assert len(self.system) <= self.caps.total
        for p in self.system.particles:
            assert p.life > 0.0
            assert p.life <= 1.0
            assert 0.0 <= p.alpha <= 1.0
            assert p.kind in PARTICLE_TYPES
            assert math.isfinite(p.x) and math.isfinite(p.y)


ParticleSystemMachine.TestCase.settings = settings(max_examples=25, stateful_step_count=30, deadline=None)
TestParticleSystem = ParticleSystemMachine.TestCase

import pytest

from impactsim.config import SimConfig
from impactsim.physics.impact import ImpactParameters, calculate_impact
from impactsim.sites import SiteRegistry


@pytest.fixture
def default_params() -> ImpactParameters:
    # 100 m rocky body at 20 km/s, 45 degrees
    return ImpactParameters.for_composition(100.0, 20.0, 45.0)


@pytest.fixture
def small_params() -> ImpactParameters:
    # Chelyabinsk-class; too weak for an explosion burst
    return ImpactParameters.for_composition(10.0, 11.0, 45.0)


@pytest.fixture
def default_result(default_params):
    return calculate_impact(default_params)


@pytest.fixture
def small_result(small_params):
    return calculate_impact(small_params)


@pytest.fixture
def sim_config() -> SimConfig:
    return SimConfig(seed=7)


@pytest.fixture
def registry(sim_config) -> SiteRegistry:
    return SiteRegistry(sim_config)

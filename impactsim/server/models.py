"""Pydantic models for API requests/responses."""

from typing import Literal

from pydantic import BaseModel, Field

from impactsim.constants import DEFAULT_POPULATION_DENSITY
from impactsim.physics.impact import ImpactParameters

Composition = Literal["rocky", "iron", "icy"]


class ImpactRequest(BaseModel):
    """Impactor description; density defaults to the composition's."""

    diameter: float = 100.0
    velocity: float = 20.0
    angle: float = 45.0
    composition: Composition = "rocky"
    density: float | None = None
    population_density: float = DEFAULT_POPULATION_DENSITY

    def to_parameters(self) -> ImpactParameters:
        return ImpactParameters.for_composition(
            diameter=self.diameter,
            velocity=self.velocity,
            angle=self.angle,
            composition=self.composition,
            density=self.density,
        )


class BodyRequest(ImpactRequest):
    """Request for a procedural body, optionally with its crater."""

    base_radius: float | None = None
    include_crater: bool = False


class LocationModel(BaseModel):
    lat: float = Field(ge=-90.0, le=90.0)
    lng: float = Field(ge=-180.0, le=180.0)
    address: str | None = None


class LaunchRequest(BaseModel):
    """Launch a new impact site."""

    impact: ImpactRequest = Field(default_factory=ImpactRequest)
    location: LocationModel


class FramesRequest(BaseModel):
    """Headless playback of a site's simulation."""

    every: int | None = Field(default=None, ge=1)
    restart: bool = False
    include_particles: bool = True


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    sites: int
    uptime_s: float
    body_cache: dict[str, int]

"""Launched impact sites, held in a registry owned by the caller."""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Any

from .config import SimConfig
from .constants import DEFAULT_POPULATION_DENSITY
from .physics.impact import ImpactParameters, ImpactResult, calculate_impact, validate_parameters
from .sim.simulation import ImpactSimulation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImpactLocation:
    lat: float
    lng: float
    address: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"lat": self.lat, "lng": self.lng, "address": self.address}


@dataclass
class ImpactSite:
    site_id: str
    location: ImpactLocation
    parameters: ImpactParameters
    result: ImpactResult
    timestamp: float
    simulation: ImpactSimulation | None = field(default=None, repr=False, compare=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "site_id": self.site_id,
            "location": self.location.to_dict(),
            "parameters": self.parameters.to_dict(),
            "result": self.result.to_dict(),
            "timestamp": self.timestamp,
        }


class SiteRegistry:
    """Ordered collection of launched sites with one optional active site."""

    def __init__(self, sim_config: SimConfig | None = None) -> None:
        self.sim_config = sim_config or SimConfig()
        self._sites: dict[str, ImpactSite] = {}
        self.active_id: str | None = None

    def __len__(self) -> int:
        return len(self._sites)

    def __contains__(self, site_id: object) -> bool:
        return site_id in self._sites

    def launch(
        self,
        params: ImpactParameters,
        location: ImpactLocation,
        population_density: float = DEFAULT_POPULATION_DENSITY,
    ) -> ImpactSite:
        """Validate, compute and record a new impact, and start its simulation.

        Raises:
            ImpactValidationError: nothing is recorded when validation fails.
        """
        validate_parameters(params, population_density)
        result = calculate_impact(params, population_density)
        site = ImpactSite(
            site_id=f"impact-{uuid.uuid4().hex[:12]}",
            location=location,
            parameters=params,
            result=result,
            timestamp=time.time(),
        )
        site.simulation = ImpactSimulation(params, result, self.sim_config)
        site.simulation.start()
        self._sites[site.site_id] = site
        self.active_id = site.site_id
        logger.info(f"Launched {site.site_id}: {result.energy_megatons:.3g} MT at ({location.lat}, {location.lng})")
        return site

    def get(self, site_id: str) -> ImpactSite | None:
        return self._sites.get(site_id)

    @property
    def active(self) -> ImpactSite | None:
        return self._sites.get(self.active_id) if self.active_id else None

    def list(self) -> list[ImpactSite]:
        return list(self._sites.values())

    def clear(self, site_id: str) -> bool:
        site = self._sites.pop(site_id, None)
        if site is None:
            return False
        if site.simulation is not None:
            site.simulation.stop()
        if self.active_id == site_id:
            self.active_id = None
        return True

    def clear_all(self) -> int:
        count = len(self._sites)
        for site in self._sites.values():
            if site.simulation is not None:
                site.simulation.stop()
        self._sites.clear()
        self.active_id = None
        return count

"""Impact site endpoints."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from fastapi import APIRouter, HTTPException

from impactsim.sites import ImpactLocation, ImpactSite

from ..config import settings
from ..models import FramesRequest, LaunchRequest
from .impact import validated

if TYPE_CHECKING:
    from impactsim.sites import SiteRegistry

logger = logging.getLogger("impactsim.server")

router = APIRouter(prefix="/sites", tags=["sites"])

# Module-level state set by init_site_routes
_registry: SiteRegistry | None = None


def init_site_routes(registry: SiteRegistry) -> None:
    """Initialize routes with a site registry."""
    global _registry
    _registry = registry


def _get_registry() -> SiteRegistry:
    if _registry is None:
        raise HTTPException(503, "Site registry not initialized")
    return _registry


def _get_site(site_id: str) -> ImpactSite:
    site = _get_registry().get(site_id)
    if site is None:
        raise HTTPException(404, f"Site '{site_id}' not found")
    return site


def _summary(site: ImpactSite, active_id: str | None) -> dict[str, Any]:
    data = site.to_dict()
    data["active"] = site.site_id == active_id
    return data


@router.post("")
def launch_site(req: LaunchRequest) -> dict[str, Any]:
    """Validate and launch a new impact; it becomes the active site."""
    registry = _get_registry()
    if len(registry) >= settings.MAX_SITES:
        raise HTTPException(409, f"Site limit {settings.MAX_SITES} reached")
    params = validated(req.impact)
    location = ImpactLocation(lat=req.location.lat, lng=req.location.lng, address=req.location.address)
    site = registry.launch(params, location, req.impact.population_density)
    return _summary(site, registry.active_id)


@router.get("")
def list_sites() -> dict[str, Any]:
    registry = _get_registry()
    return {
        "active_id": registry.active_id,
        "sites": [_summary(s, registry.active_id) for s in registry.list()],
    }


@router.get("/{site_id}")
def get_site(site_id: str) -> dict[str, Any]:
    site = _get_site(site_id)
    return _summary(site, _get_registry().active_id)


@router.delete("/{site_id}")
def clear_site(site_id: str) -> dict[str, Any]:
    if not _get_registry().clear(site_id):
        raise HTTPException(404, f"Site '{site_id}' not found")
    return {"cleared": site_id}


@router.delete("")
def clear_all_sites() -> dict[str, Any]:
    count = _get_registry().clear_all()
    logger.info(f"Cleared {count} sites")
    return {"cleared": count}


@router.post("/{site_id}/frames")
def run_frames(site_id: str, req: FramesRequest | None = None) -> dict[str, Any]:
    """Play the site's simulation headless and return sampled frames."""
    req = req or FramesRequest()
    site = _get_site(site_id)
    sim = site.simulation
    if sim is None:
        raise HTTPException(409, f"Site '{site_id}' has no simulation")
    every = req.every or settings.FRAME_EVERY_DEFAULT
    frames = sim.run(every=every, restart=req.restart)

    out = []
    for frame in frames:
        data = frame.to_dict()
        data["particle_count"] = len(frame.particles)
        if not req.include_particles:
            data.pop("particles")
        out.append(data)
    return {
        "site_id": site_id,
        "duration_s": sim.timeline.total_duration_s,
        "every": every,
        "frames": out,
    }

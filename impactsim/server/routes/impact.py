"""Stateless impact endpoints: physics, procedural body and timeline."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException

from impactsim.gen.body import generate_body
from impactsim.gen.crater import generate_crater
from impactsim.gen.recipe import build_recipe
from impactsim.physics.entry import atmospheric_entry, ejecta_profile, enhanced_fireball
from impactsim.physics.impact import ImpactParameters, ImpactValidationError, calculate_impact, validate_parameters
from impactsim.physics.severity import historical_comparison, impact_severity
from impactsim.sim.timeline import build_timeline

from ..body_cache import body_cache
from ..models import BodyRequest, ImpactRequest

router = APIRouter(tags=["impact"])


def validated(req: ImpactRequest) -> ImpactParameters:
    """Convert a request into parameters, mapping validation failures to 422."""
    params = req.to_parameters()
    try:
        validate_parameters(params, req.population_density)
    except ImpactValidationError as e:
        raise HTTPException(422, e.errors) from e
    return params


@router.post("/impact")
def post_impact(req: ImpactRequest) -> dict[str, Any]:
    """Compute effects, severity and entry profile for one impactor."""
    params = validated(req)
    result = calculate_impact(params, req.population_density)
    severity = impact_severity(result.energy_megatons)
    return {
        "parameters": params.to_dict(),
        "result": result.to_dict(),
        "severity": severity._asdict(),
        "comparison": historical_comparison(result.energy_megatons),
        "entry": atmospheric_entry(params).to_dict(),
        "fireball": enhanced_fireball(result.energy_joules, params).to_dict(),
        "ejecta": ejecta_profile(params, result.energy_joules).to_dict(),
    }


@router.post("/body")
def post_body(req: BodyRequest) -> dict[str, Any]:
    """Generate (or fetch from cache) the procedural body for an impactor."""
    params = validated(req)
    inputs = {**params.to_dict(), "base_radius": req.base_radius, "crater": req.include_crater}
    return body_cache.get_or_build(inputs, lambda: _build_body(req, params))


def _build_body(req: BodyRequest, params: ImpactParameters) -> dict[str, Any]:
    body = generate_body(params, base_radius=req.base_radius)
    crater = None
    if req.include_crater:
        result = calculate_impact(params, req.population_density)
        crater = generate_crater(
            body, result, diameter=params.diameter, velocity=params.velocity, angle=params.angle
        )
    payload: dict[str, Any] = {
        "body": body.to_dict(),
        "recipe": build_recipe(params=params, body=body, crater=crater),
    }
    if crater is not None:
        payload["crater"] = crater.to_dict()
    return payload


@router.post("/timeline")
def post_timeline(req: ImpactRequest) -> dict[str, Any]:
    """Phase schedule for an impactor."""
    params = validated(req)
    result = calculate_impact(params, req.population_density)
    return build_timeline(params, result.energy_joules).to_dict()

from __future__ import annotations

import copy
import hashlib
import json
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..physics.impact import ImpactParameters
    from .body import ProceduralBody
    from .crater import ProceduralCrater

GENERATOR_ID = "impactsim.body"
GENERATOR_VERSION = "1"


def canonical_json_bytes(obj: Any) -> bytes:
    return json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def body_digest(body: ProceduralBody) -> str:
    return sha256_hex(canonical_json_bytes(body.to_dict()))


def crater_digest(crater: ProceduralCrater) -> str:
    return sha256_hex(canonical_json_bytes(crater.to_dict()))


def build_recipe(
    *,
    params: ImpactParameters,
    body: ProceduralBody,
    crater: ProceduralCrater | None = None,
) -> dict[str, Any]:
    """Everything needed to regenerate and verify a body (and optionally its crater)."""
    recipe: dict[str, Any] = {
        "schema_version": 1,
        "generator": {"id": GENERATOR_ID, "version": GENERATOR_VERSION},
        "inputs": {"diameter": params.diameter, "velocity": params.velocity, "angle": params.angle},
        "seed": int(body.seed),
        "composition": body.composition,
        "counts": {"vertices": body.vertex_count, "craters": body.crater_count},
        "hashes": {},
    }
    if crater is not None:
        recipe["crater_seed"] = int(crater.seed)

    # Avoid hashing the hash fields themselves.
    recipe_for_hash = copy.deepcopy(recipe)
    recipe_for_hash.pop("hashes", None)
    hashes = {"recipe": sha256_hex(canonical_json_bytes(recipe_for_hash)), "body": body_digest(body)}
    if crater is not None:
        hashes["crater"] = crater_digest(crater)
    recipe["hashes"] = hashes
    return recipe

from .body import ProceduralBody, determine_composition, generate_body, generate_seed
from .crater import ProceduralCrater, crater_rim, generate_crater
from .noise import GradientNoise
from .recipe import body_digest, build_recipe
from .rng import SeededRandom

__all__ = [
    "GradientNoise",
    "ProceduralBody",
    "ProceduralCrater",
    "SeededRandom",
    "body_digest",
    "build_recipe",
    "crater_rim",
    "determine_composition",
    "generate_body",
    "generate_crater",
    "generate_seed",
]

# ruff: noqa: E402
from __future__ import annotations

import argparse
import json
import logging
import sys
from collections import Counter
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import numpy as np

from impactsim.config import SimConfig
from impactsim.physics.impact import (
    ImpactParameters,
    ImpactValidationError,
    calculate_impact,
    random_parameters,
    validate_parameters,
)
from impactsim.physics.severity import historical_comparison, impact_severity
from impactsim.sim.simulation import ImpactSimulation


def main() -> None:
    parser = argparse.ArgumentParser(description="Run an impact simulation headless and print a JSON summary")
    parser.add_argument("--diameter", type=float, default=100.0, help="Impactor diameter (m)")
    parser.add_argument("--velocity", type=float, default=20.0, help="Impact velocity (km/s)")
    parser.add_argument("--angle", type=float, default=45.0, help="Entry angle from horizontal (deg)")
    parser.add_argument("--composition", type=str, default="rocky", choices=["rocky", "iron", "icy"])
    parser.add_argument("--density", type=float, default=None, help="Override composition density (kg/m^3)")
    parser.add_argument("--population-density", type=float, default=100.0, help="People per km^2")
    parser.add_argument("--seed", type=int, default=0, help="Seed for particle spawn jitter")
    parser.add_argument("--random", action="store_true", help="Draw a random impactor from --seed instead")
    parser.add_argument("--every", type=int, default=60, help="Keep every N-th frame in the timeline trace")
    parser.add_argument("--out", type=str, default=None, help="Write the summary here instead of stdout")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
    )

    if args.random:
        params = random_parameters(np.random.default_rng(args.seed))
    else:
        params = ImpactParameters.for_composition(
            args.diameter, args.velocity, args.angle, composition=args.composition, density=args.density
        )
    try:
        validate_parameters(params, args.population_density)
    except ImpactValidationError as e:
        raise SystemExit("invalid parameters:\n  " + "\n  ".join(e.errors)) from e

    result = calculate_impact(params, args.population_density)
    sim = ImpactSimulation(params, result, SimConfig(seed=args.seed))
    frames = sim.run(every=args.every)

    peak = max((len(f.particles) for f in frames), default=0)
    trace = []
    for f in frames:
        kinds = Counter(p.kind for p in f.particles)
        trace.append(
            {
                "tick": f.tick,
                "t": round(f.elapsed_s, 3),
                "phase": f.phase,
                "crater_progress": round(f.crater_progress, 3),
                "particles": len(f.particles),
                "kinds": dict(kinds),
            }
        )

    severity = impact_severity(result.energy_megatons)
    summary = {
        "parameters": params.to_dict(),
        "result": result.to_dict(),
        "severity": severity.level,
        "comparison": historical_comparison(result.energy_megatons),
        "timeline": sim.timeline.to_dict(),
        "ticks": sim.particles.tick,
        "peak_sampled_particles": peak,
        "trace": trace,
    }

    text = json.dumps(summary, indent=2)
    if args.out:
        out_path = Path(args.out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(text, encoding="utf-8")
        print(f"wrote {out_path}")
    else:
        print(text)


if __name__ == "__main__":
    main()

# ruff: noqa: E402
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from impactsim.gen.body import generate_body
from impactsim.gen.crater import generate_crater
from impactsim.gen.recipe import GENERATOR_ID, GENERATOR_VERSION, build_recipe
from impactsim.physics.impact import ImpactParameters, calculate_impact


def parse_case(text: str) -> tuple[float, float, float]:
    """Parse "diameter:velocity:angle"."""
    parts = [p.strip() for p in text.split(":")]
    if len(parts) != 3:
        raise ValueError(f"Expected diameter:velocity:angle, got {text!r}")
    d, v, a = (float(p) for p in parts)
    return d, v, a


def generate_hashes(diameter: float, velocity: float, angle: float) -> dict:
    params = ImpactParameters.for_composition(diameter, velocity, angle)
    body = generate_body(params)
    result = calculate_impact(params)
    crater = generate_crater(body, result, diameter=diameter, velocity=velocity, angle=angle)
    recipe = build_recipe(params=params, body=body, crater=crater)
    return {
        "case": f"{diameter:g}:{velocity:g}:{angle:g}",
        "seed": int(body.seed),
        "composition": body.composition,
        "hashes": dict(recipe["hashes"]),
    }


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--golden", type=str, default="runs/body_golden.json")
    parser.add_argument(
        "--write", action="store_true", help="Write/update the golden file instead of checking it"
    )
    parser.add_argument("--cases", type=str, default="100:20:45,10:11:90,500:30:30,2000:70:15,50:12:60")
    args = parser.parse_args()

    cases = [parse_case(c) for c in args.cases.split(",") if c.strip()]
    if not cases:
        raise SystemExit("No cases provided")

    out_path = Path(args.golden)
    if not args.write and not out_path.exists():
        raise SystemExit(f"Golden file not found: {out_path} (run with --write to create)")

    generated = [generate_hashes(*c) for c in cases]
    payload = {
        "generator": {"id": GENERATOR_ID, "version": GENERATOR_VERSION},
        "entries": generated,
    }

    if args.write:
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        print(f"wrote {out_path}")
        return

    golden = json.loads(out_path.read_text(encoding="utf-8"))
    golden_entries = {e["case"]: e for e in golden.get("entries", [])}

    ok = True
    for e in generated:
        g = golden_entries.get(e["case"])
        if g is None:
            ok = False
            print(f"missing case in golden: {e['case']}")
            continue

        exp = g.get("hashes") or {}
        got = e.get("hashes") or {}
        for key in ("recipe", "body", "crater"):
            if exp.get(key) != got.get(key):
                ok = False
                print(f"case {e['case']}: {key} hash mismatch expected={exp.get(key)} got={got.get(key)}")

    if ok:
        print("ok: all golden hashes match")
        return
    raise SystemExit(1)


if __name__ == "__main__":
    main()

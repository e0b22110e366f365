"""Entry point: python -m impactsim.server"""

from __future__ import annotations

import argparse

import uvicorn

from .config import settings


def main() -> None:
    parser = argparse.ArgumentParser(description="Impact Simulation Server")
    parser.add_argument("--host", type=str, default=settings.HOST)
    parser.add_argument("--port", type=int, default=settings.PORT)
    parser.add_argument("--seed", type=int, default=None, help="Seed for particle spawn jitter")
    args = parser.parse_args()

    from impactsim.config import SimConfig

    from . import create_app

    app = create_app(sim_config=SimConfig(seed=args.seed))
    uvicorn.run(app, host=args.host, port=args.port)


if __name__ == "__main__":
    main()

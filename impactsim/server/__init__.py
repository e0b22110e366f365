"""Impact simulation server - physics, procedural bodies and headless playback over HTTP."""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI

from impactsim.config import SimConfig
from impactsim.sites import SiteRegistry

from .body_cache import body_cache
from .config import settings

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger("impactsim.server")

_server_start_time: float = 0.0


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    global _server_start_time
    _server_start_time = time.time()
    logger.info(f"Impact simulation server starting on {settings.HOST}:{settings.PORT}")
    yield
    count = app.state.registry.clear_all()
    logger.info(f"Impact simulation server shutting down, cleared {count} sites")


def create_app(*, registry: SiteRegistry | None = None, sim_config: SimConfig | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        registry: Site registry to serve; a fresh one is created if omitted.
        sim_config: Simulation tuning for a freshly created registry.
    """
    from .models import HealthResponse
    from .routes import impact
    from .routes import sites as site_routes

    if registry is None:
        registry = SiteRegistry(sim_config)

    app = FastAPI(lifespan=lifespan, title="Impact Simulation Server")
    app.state.registry = registry

    app.include_router(impact.router)
    site_routes.init_site_routes(registry)
    app.include_router(site_routes.router)

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return HealthResponse(
            status="ok",
            sites=len(registry),
            uptime_s=time.time() - _server_start_time if _server_start_time else 0.0,
            body_cache=body_cache.stats(),
        )

    return app

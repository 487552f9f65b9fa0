"""
FastAPI application factory.

* Registers routes for shortest-path routing, city nodes, step playback
  and admin.
* Starts / stops the playback session worker via lifespan events.
* Applies rate-limiting middleware.
* Swagger / OpenAPI UI available at ``/docs``.
"""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from src.api.middleware import limiter
from src.api.routes import admin, nodes, playback, routing
from src.workers import playback as _playback_worker

logging.basicConfig(level=logging.INFO)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start the playback worker on startup; stop it (and every session) on shutdown."""
    await _playback_worker.start_playback_worker()
    yield
    await _playback_worker.stop_playback_worker()


def create_app() -> FastAPI:
    app = FastAPI(
        title="City Route Visualizer API",
        description=(
            "Computes shortest routes on a city street graph with Dijkstra's "
            "algorithm and returns every algorithm step so the search can "
            "be replayed step by step for teaching."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )

    # Rate limiter
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Routers
    app.include_router(routing.router, prefix="/api/v1")
    app.include_router(nodes.router, prefix="/api/v1")
    app.include_router(playback.router, prefix="/api/v1")
    app.include_router(admin.router, prefix="/api/v1")

    return app

"""FastAPI application entry point for the track sampler API."""

import logging
import sys

import httpx
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from config import settings
from errors import register_error_handlers
from services.sampler import TrackSampler
from services.spotify import SpotifyClient
from services.store import CacheStore

# Structured logging: JSON for production, human-readable for local
if settings.is_production:
    logging.basicConfig(
        level=logging.INFO,
        format='{"time":"%(asctime)s","level":"%(levelname)s","logger":"%(name)s","message":"%(message)s"}',
        stream=sys.stdout,
    )
else:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(title="Track Sampler API", version="1.0.0")

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    # Security headers
    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        response: Response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        if settings.is_production:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response

    # Centralized error handlers
    register_error_handlers(app)

    from routes.health import router as health_router
    from routes.tracks import router as tracks_router

    app.include_router(health_router)
    app.include_router(tracks_router)

    @app.on_event("startup")
    async def _validate_config() -> None:
        missing = settings.validate()
        if missing:
            logger.warning("Missing env vars (token refresh will fail): %s", ", ".join(missing))

    @app.on_event("startup")
    async def _open_clients() -> None:
        # One Redis pool and one HTTP pool per process, shared by every request
        app.state.http = httpx.AsyncClient(timeout=settings.upstream_timeout_seconds)
        app.state.store = CacheStore.from_url(settings.redis_url, prefix=settings.cache_prefix)
        app.state.sampler = TrackSampler.from_settings(
            settings, app.state.store, SpotifyClient(app.state.http)
        )

    @app.on_event("shutdown")
    async def _close_clients() -> None:
        await app.state.http.aclose()
        await app.state.store.close()

    return app


app = create_app()

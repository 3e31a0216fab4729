"""Health and readiness check routes."""

import logging

from fastapi import APIRouter, Depends, Request

from config import settings
from errors import StoreUnavailableError
from services.store import CacheStore

logger = logging.getLogger(__name__)

router = APIRouter()


def get_store(request: Request) -> CacheStore:
    return request.app.state.store


@router.get("/ready")
async def ready() -> dict:
    """Lightweight readiness check — no external calls."""
    return {"status": "ok", "service": "track-sampler-api", "commit": settings.git_sha}


@router.get("/health")
async def health(store: CacheStore = Depends(get_store)) -> dict:
    """Deep health check that verifies Redis connectivity."""
    result = {"status": "ok", "service": "track-sampler-api", "commit": settings.git_sha, "store": "not_tested"}

    try:
        await store.ping()
        result["store"] = "connected"
    except StoreUnavailableError as e:
        logger.exception("Redis health check failed")
        result["store"] = "error"
        result["store_error"] = str(e)

    return result

"""Custom exceptions and centralized FastAPI error handlers."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class SamplerError(Exception):
    """Base exception with HTTP status code."""

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.status_code = status_code


class BadRequestError(SamplerError):
    def __init__(self, message: str = "No playlistId provided"):
        super().__init__(message, status_code=400)


class AuthUnavailableError(SamplerError):
    def __init__(self, message: str = "Unable to fetch access token"):
        super().__init__(message, status_code=500)


class UpstreamUnavailableError(SamplerError):
    def __init__(self, message: str):
        super().__init__(message, status_code=500)


class UpstreamTimeoutError(SamplerError):
    def __init__(self, deadline: float):
        super().__init__(f"Upstream did not respond within {deadline:g}s", status_code=500)


class StoreUnavailableError(SamplerError):
    """Raised by the cache store; callers degrade instead of surfacing it."""

    def __init__(self, message: str):
        super().__init__(message, status_code=500)


def register_error_handlers(app: FastAPI) -> None:
    """Register centralized exception handlers on the FastAPI app."""

    @app.exception_handler(SamplerError)
    async def handle_sampler_error(_request: Request, exc: SamplerError):
        if exc.status_code >= 500:
            logger.error("Request failed (%d): %s", exc.status_code, exc)
        return JSONResponse({"error": str(exc)}, status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def handle_unexpected(_request: Request, exc: Exception):
        logger.exception("Unhandled error: %s", exc)
        return JSONResponse(
            {"error": "Internal server error"},
            status_code=500,
        )

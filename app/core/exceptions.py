"""Custom exceptions and exception handlers."""

import logging

from fastapi import Request
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.cors import CORS_HEADERS

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base application error."""

    def __init__(self, message: str, status_code: int = 500):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class InvalidPayloadError(AppError):
    """Request body is not valid JSON or has the wrong shape."""

    def __init__(self, message: str = "Invalid JSON"):
        super().__init__(message, status_code=400)


class InvalidServerIndexError(AppError):
    """serverIdx does not point at a configured upstream target."""

    def __init__(self, server_idx: int):
        self.server_idx = server_idx
        super().__init__(f"Invalid server index: {server_idx}", status_code=400)


class UpstreamError(AppError):
    """Upstream completion service failed or answered with an error status."""

    def __init__(self, message: str):
        super().__init__(message, status_code=502)


class AllModelsFailedError(UpstreamError):
    """Every candidate model in a fallback chain failed."""

    def __init__(self, last_error: str):
        self.last_error = last_error
        super().__init__(f"All models failed. Last error: {last_error}")


class PdfExtractionError(AppError):
    """Remote PDF could not be fetched or parsed."""

    def __init__(self, message: str):
        super().__init__(message, status_code=500)


async def app_exception_handler(request: Request, exc: AppError) -> PlainTextResponse:
    """Handle custom application exceptions raised before a response starts."""
    logger.warning("%s %s -> %d: %s", request.method, request.url.path, exc.status_code, exc.message)
    return PlainTextResponse(exc.message, status_code=exc.status_code)


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> PlainTextResponse:
    """Unknown paths and unsupported methods both answer 404."""
    if exc.status_code in (404, 405):
        return PlainTextResponse("Not found", status_code=404)
    return PlainTextResponse(str(exc.detail), status_code=exc.status_code)


async def general_exception_handler(request: Request, exc: Exception) -> PlainTextResponse:
    """Handle unhandled exceptions.

    This handler runs in ServerErrorMiddleware, outside the CORS middleware,
    so the CORS headers are set here.
    """
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return PlainTextResponse("Internal server error", status_code=500, headers=CORS_HEADERS)

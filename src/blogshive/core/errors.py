"""Domain exceptions and their HTTP translation.

Services raise these instead of ``HTTPException`` so they stay usable outside a
request. ``register_exception_handlers`` maps them onto JSON responses of the
form ``{"detail": message}``, the same shape FastAPI uses for its own errors.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from blogshive.core.settings import settings

logger = logging.getLogger(__name__)

GENERIC_ERROR_DETAIL = "Unable to complete request"


class BlogsHiveError(Exception):
    """Base class for errors that carry an HTTP status code."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(BlogsHiveError):
    """Invalid identifiers, empty content, or self-targeting actions."""

    status_code = status.HTTP_400_BAD_REQUEST


class ForbiddenError(BlogsHiveError):
    """Acting on someone else's resource or across a block."""

    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(BlogsHiveError):
    """Target user, post, comment or notification does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(BlogsHiveError):
    """Uniqueness violations surfaced to the caller."""

    status_code = status.HTTP_409_CONFLICT


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the domain and catch-all exception handlers to ``app``."""

    @app.exception_handler(BlogsHiveError)
    async def handle_domain_error(request: Request, exc: BlogsHiveError) -> JSONResponse:
        logger.warning(
            "%s %s -> %s: %s",
            request.method,
            request.url.path,
            exc.status_code,
            exc.message,
        )
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        detail = GENERIC_ERROR_DETAIL
        if settings.debug:
            detail = f"{GENERIC_ERROR_DETAIL}: {exc}"
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": detail},
        )

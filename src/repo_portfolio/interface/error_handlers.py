"""Global exception handlers — translate domain errors to HTTP responses.

Each domain exception maps to a specific HTTP status code and the
standard ``{"status": "error", "message": "..."}`` envelope.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from repo_portfolio.domain.exceptions import (
    ConfigurationError,
    HostAccessDeniedError,
    HostAuthenticationError,
    HostError,
    HostNotFoundError,
    HostQueryError,
    HostRateLimitError,
    PortfolioError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: dict[type[PortfolioError], int] = {
    ConfigurationError: 500,
    HostNotFoundError: 404,
    HostAccessDeniedError: 403,
    HostAuthenticationError: 502,
    HostRateLimitError: 429,
    HostQueryError: 422,
    HostError: 502,
}


def status_for(exc: PortfolioError) -> int:
    """Return the HTTP status of the most specific mapped class of *exc*."""
    for cls in type(exc).__mro__:
        if cls in _STATUS_BY_ERROR:
            return _STATUS_BY_ERROR[cls]
    return 500


def _error_json(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"status": "error", "message": message},
    )


def register_error_handlers(app: FastAPI) -> None:
    """Attach exception handlers to the FastAPI application."""

    # ── Domain exceptions ───────────────────────────────────────────────

    @app.exception_handler(PortfolioError)
    async def domain_handler(request: Request, exc: PortfolioError) -> JSONResponse:
        status_code = status_for(exc)
        upstream = getattr(exc, "status", None)
        logger.warning(
            "%s on %s %s -> %d (upstream status %s): %s",
            type(exc).__name__,
            request.method,
            request.url.path,
            status_code,
            upstream,
            exc,
        )
        return _error_json(status_code, str(exc))

    # ── Pydantic / FastAPI validation errors ────────────────────────────

    @app.exception_handler(RequestValidationError)
    async def validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        messages = []
        for err in exc.errors():
            loc = " → ".join(str(p) for p in err.get("loc", []))
            messages.append(f"{loc}: {err.get('msg', 'validation error')}")
        return _error_json(422, "; ".join(messages))

    # ── Catch-all for unexpected errors ─────────────────────────────────

    @app.exception_handler(Exception)
    async def generic_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled exception")
        return _error_json(500, "An unexpected error occurred. Please try again later.")

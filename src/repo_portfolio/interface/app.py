"""FastAPI application factory."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from repo_portfolio.infrastructure.config import Settings, load_settings
from repo_portfolio.interface.dependencies import shutdown, startup
from repo_portfolio.interface.error_handlers import register_error_handlers
from repo_portfolio.interface.routes import router


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build and wire the FastAPI application.

    Settings are read from the environment when not passed explicitly.
    """
    settings = settings or load_settings()

    @asynccontextmanager
    async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Manage startup / shutdown of shared resources."""
        await startup(app, settings)
        yield
        await shutdown(app)

    app = FastAPI(
        title="GitHub Repository Portfolio",
        version="1.0.0",
        description=(
            "Lists a GitHub user's repositories or searches GitHub, and "
            "returns each repository with its languages, star count, "
            "pull-request count and last push time."
        ),
        lifespan=_lifespan,
    )

    register_error_handlers(app)
    app.include_router(router)

    # ── Health check (simple liveness probe) ────────────────────────────

    @app.get("/health", include_in_schema=False)
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app

"""FastAPI dependency injection wiring.

Shared resources live on ``app.state`` rather than in module globals, so
several differently configured applications can run side by side.
"""

from __future__ import annotations

import httpx
from fastapi import FastAPI, Request

from repo_portfolio.infrastructure.config import Settings
from repo_portfolio.infrastructure.github_rest_adapter import GitHubRestAdapter
from repo_portfolio.services.portfolio_pipeline import PortfolioPipeline


async def startup(app: FastAPI, settings: Settings) -> None:
    """Initialise shared resources — called from the lifespan context manager."""
    client = httpx.AsyncClient(timeout=httpx.Timeout(settings.request_timeout))
    host = GitHubRestAdapter(
        client=client,
        token=settings.github_token.get_secret_value(),
        api_url=settings.github_api_url,
    )
    app.state.http_client = client
    app.state.pipeline = PortfolioPipeline(
        host=host,
        default_user=settings.github_user,
        policy=settings.call_policy(),
    )


async def shutdown(app: FastAPI) -> None:
    """Release shared resources."""
    client: httpx.AsyncClient | None = getattr(app.state, "http_client", None)
    if client is not None:
        await client.aclose()
        app.state.http_client = None
    app.state.pipeline = None


def get_pipeline(request: Request) -> PortfolioPipeline:
    """Return the pipeline built at startup."""
    pipeline: PortfolioPipeline | None = getattr(request.app.state, "pipeline", None)
    assert pipeline is not None, "startup() was not called"
    return pipeline

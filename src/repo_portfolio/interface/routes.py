"""API routes — thin controllers that delegate to the pipeline."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from repo_portfolio.interface.dependencies import get_pipeline
from repo_portfolio.interface.schemas import FollowerCountResponse, RepositoryDetailsResponse
from repo_portfolio.services.portfolio_pipeline import PortfolioPipeline

router = APIRouter()

_HOST_ERRORS = {
    403: {"description": "GitHub denied access"},
    404: {"description": "User or repository not found"},
    429: {"description": "GitHub API rate limit exceeded"},
    502: {"description": "GitHub API error"},
}


@router.get(
    "/portfolio",
    response_model=list[RepositoryDetailsResponse],
    responses={500: {"description": "No default GitHub user configured"}, **_HOST_ERRORS},
)
async def get_portfolio(
    pipeline: PortfolioPipeline = Depends(get_pipeline),
) -> list[RepositoryDetailsResponse]:
    """List the configured user's repositories with languages and PR counts."""
    details = await pipeline.get_portfolio()
    return [RepositoryDetailsResponse.from_domain(d) for d in details]


@router.get(
    "/users/{user_name}/followers",
    response_model=FollowerCountResponse,
    responses=_HOST_ERRORS,
)
async def get_follower_count(
    user_name: str,
    pipeline: PortfolioPipeline = Depends(get_pipeline),
) -> FollowerCountResponse:
    """Return the follower count of a GitHub user."""
    followers = await pipeline.get_follower_count(user_name)
    return FollowerCountResponse(user=user_name, followers=followers)


@router.get(
    "/repositories/search",
    response_model=list[RepositoryDetailsResponse],
    responses={422: {"description": "Search query rejected by GitHub"}, **_HOST_ERRORS},
)
async def search_repositories(
    query: str | None = None,
    language: str | None = None,
    user: str | None = None,
    pipeline: PortfolioPipeline = Depends(get_pipeline),
) -> list[RepositoryDetailsResponse]:
    """Search repositories; ``language`` is space-separated and all must match."""
    details = await pipeline.search_repositories(query=query, language=language, user=user)
    return [RepositoryDetailsResponse.from_domain(d) for d in details]

"""Pydantic response DTOs for the API boundary."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from repo_portfolio.domain.entities import RepositoryDetails


class RepositoryDetailsResponse(BaseModel):
    """One enriched repository."""

    name: str
    owner: str
    description: str | None = None
    stars: int = Field(ge=0)
    last_commit: datetime
    languages: list[str]
    pull_requests: int = Field(ge=0)
    html_url: str
    language: str | None = None

    @classmethod
    def from_domain(cls, details: RepositoryDetails) -> RepositoryDetailsResponse:
        return cls(
            name=details.name,
            owner=details.owner,
            description=details.description,
            stars=details.stars,
            last_commit=details.last_commit,
            languages=list(details.languages),
            pull_requests=details.pull_requests,
            html_url=details.html_url,
            language=details.language,
        )


class FollowerCountResponse(BaseModel):
    """Successful response from ``GET /users/{user_name}/followers``."""

    user: str
    followers: int = Field(ge=0)


class ErrorResponse(BaseModel):
    """Standard error envelope returned on all failure paths."""

    status: str = "error"
    message: str

"""Domain entities — pure data structures with no external dependencies."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class RepositorySummary:
    """A repository as listed or searched on the host, before enrichment."""

    name: str
    owner: str
    html_url: str
    updated_at: datetime
    stars: int = 0
    description: str | None = None
    pushed_at: datetime | None = None
    language: str | None = None

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    @property
    def last_commit(self) -> datetime:
        """Push time when the host knows it, otherwise the last update time."""
        return self.pushed_at if self.pushed_at is not None else self.updated_at


@dataclass(frozen=True, slots=True)
class RepositoryDetails:
    """The enriched record returned to the caller, one per repository."""

    name: str
    owner: str
    html_url: str
    last_commit: datetime
    stars: int
    pull_requests: int
    languages: tuple[str, ...] = ()
    description: str | None = None
    language: str | None = None

    def __post_init__(self) -> None:
        if self.stars < 0:
            raise ValueError(f"stars must be non-negative, got {self.stars}")
        if self.pull_requests < 0:
            raise ValueError(
                f"pull_requests must be non-negative, got {self.pull_requests}"
            )

    @classmethod
    def from_summary(
        cls,
        repo: RepositorySummary,
        languages: list[str] | tuple[str, ...],
        pull_requests: int,
    ) -> RepositoryDetails:
        """Combine a host summary with the two per-repository lookups."""
        return cls(
            name=repo.name,
            owner=repo.owner,
            html_url=repo.html_url,
            last_commit=repo.last_commit,
            stars=repo.stars,
            pull_requests=pull_requests,
            languages=tuple(dict.fromkeys(languages)),
            description=repo.description,
            language=repo.language,
        )

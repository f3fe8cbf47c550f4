"""Port: repository host — defined by the domain, implemented by infrastructure."""

from __future__ import annotations

from typing import Protocol

from repo_portfolio.domain.entities import RepositorySummary


class RepositoryHost(Protocol):
    """Abstract contract for the remote version-control host.

    Implementations must be safe to call concurrently from many tasks.
    Every failure is raised as a :class:`~repo_portfolio.domain.exceptions.HostError`.
    """

    async def list_repositories_for_user(self, user_name: str) -> list[RepositorySummary]:
        """Return every repository owned by *user_name*."""
        ...

    async def search_repositories(self, query: str) -> list[RepositorySummary] | None:
        """Return repositories matching a host search query."""
        ...

    async def list_languages(self, owner: str, name: str) -> list[str]:
        """Return the language names used by a repository, in host order."""
        ...

    async def count_pull_requests(self, owner: str, name: str) -> int:
        """Return the number of pull requests in any state."""
        ...

    async def count_followers(self, user_name: str) -> int:
        """Return the number of followers of an account."""
        ...

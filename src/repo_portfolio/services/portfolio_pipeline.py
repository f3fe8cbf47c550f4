"""Portfolio pipeline — the entry points of the business logic.

Depends only on the :class:`RepositoryHost` port and the filter / enricher
services.  The interface layer injects a concrete host at runtime.
"""

from __future__ import annotations

import logging

from repo_portfolio.domain.entities import RepositoryDetails, RepositorySummary
from repo_portfolio.domain.exceptions import ConfigurationError
from repo_portfolio.domain.ports.repository_host import RepositoryHost
from repo_portfolio.domain.value_objects import LanguageSpec, SearchQuery
from repo_portfolio.services.call_policy import HostCallPolicy
from repo_portfolio.services.detail_enricher import DetailEnricher
from repo_portfolio.services.language_filter import LanguageFilter

logger = logging.getLogger(__name__)


class PortfolioPipeline:
    """Lists or searches repositories and enriches them with host details.

    Parameters
    ----------
    host:
        Adapter for the remote repository host.
    default_user:
        Account whose repositories :meth:`get_portfolio` returns.
    policy:
        Scheduling policy for per-repository host calls.  The default is
        unbounded fan-out without retries.
    """

    def __init__(
        self,
        host: RepositoryHost,
        default_user: str | None = None,
        policy: HostCallPolicy | None = None,
    ) -> None:
        self._host = host
        self._default_user = default_user
        self._policy = policy or HostCallPolicy()
        self._filter = LanguageFilter(host)
        self._enricher = DetailEnricher(host)

    # ── Public entry points ─────────────────────────────────────────────

    async def get_portfolio(self) -> list[RepositoryDetails]:
        """Return enriched details for every repository of the default user."""
        if not self._default_user or not self._default_user.strip():
            raise ConfigurationError("GitHub username is not provided.")

        user = self._default_user.strip()
        logger.info("Building portfolio for %s", user)
        repositories = await self._host.list_repositories_for_user(user)
        return await self._process(repositories)

    async def get_follower_count(self, user_name: str) -> int:
        """Return how many followers *user_name* has."""
        return await self._host.count_followers(user_name)

    async def search_repositories(
        self,
        query: str | None = None,
        language: str | None = None,
        user: str | None = None,
    ) -> list[RepositoryDetails]:
        """Search the host, optionally keep only *language* matches, then enrich.

        *language* is a space-separated list; a repository must use all of
        them.
        """
        search = SearchQuery.build(query=query, user=user)
        logger.info("Searching repositories: %r (language=%r)", str(search), language)
        repositories = await self._host.search_repositories(str(search)) or []
        return await self._process(repositories, LanguageSpec.parse(language))

    # ── Filter + enrich ─────────────────────────────────────────────────

    async def _process(
        self,
        repositories: list[RepositorySummary],
        spec: LanguageSpec | None = None,
    ) -> list[RepositoryDetails]:
        scope = self._policy.open_scope()
        if spec:
            repositories = await self._filter.filter(repositories, spec, scope)
        details = await self._enricher.enrich(repositories, scope)
        logger.info("Returning %d repositories", len(details))
        return details

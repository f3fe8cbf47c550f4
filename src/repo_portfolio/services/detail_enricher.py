"""Detail enricher — turn host summaries into :class:`RepositoryDetails`."""

from __future__ import annotations

import asyncio
import logging
from typing import Sequence

from repo_portfolio.domain.entities import RepositoryDetails, RepositorySummary
from repo_portfolio.domain.ports.repository_host import RepositoryHost
from repo_portfolio.services.call_policy import CallScope, HostCallPolicy

logger = logging.getLogger(__name__)


class DetailEnricher:
    """Fetches languages and pull-request counts for every repository.

    All repositories are processed concurrently, and for each one the two
    lookups run concurrently with each other.  The result has one entry per
    input, at the same position.  Any failed lookup fails the whole call.
    """

    def __init__(self, host: RepositoryHost) -> None:
        self._host = host

    async def enrich(
        self,
        repositories: Sequence[RepositorySummary],
        scope: CallScope | None = None,
    ) -> list[RepositoryDetails]:
        scope = scope or HostCallPolicy().open_scope()
        details = await asyncio.gather(
            *(self._enrich_one(repo, scope) for repo in repositories)
        )
        logger.debug("Enriched %d repositories", len(details))
        return list(details)

    async def _enrich_one(self, repo: RepositorySummary, scope: CallScope) -> RepositoryDetails:
        languages, pull_requests = await asyncio.gather(
            scope.list_languages(self._host, repo),
            scope.run(self._host.count_pull_requests, repo.owner, repo.name),
        )
        return RepositoryDetails.from_summary(repo, languages, pull_requests)

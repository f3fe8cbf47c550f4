"""Language filter — keep repositories that use every requested language."""

from __future__ import annotations

import asyncio
import logging
from typing import Sequence

from repo_portfolio.domain.entities import RepositorySummary
from repo_portfolio.domain.ports.repository_host import RepositoryHost
from repo_portfolio.domain.value_objects import LanguageSpec
from repo_portfolio.services.call_policy import CallScope, HostCallPolicy

logger = logging.getLogger(__name__)


class LanguageFilter:
    """Checks each candidate's language list against a :class:`LanguageSpec`.

    One ``list_languages`` call is issued per repository, all concurrently.
    The result keeps input order; a failure in any lookup fails the filter.
    """

    def __init__(self, host: RepositoryHost) -> None:
        self._host = host

    async def filter(
        self,
        repositories: Sequence[RepositorySummary],
        language_spec: LanguageSpec | str,
        scope: CallScope | None = None,
    ) -> list[RepositorySummary]:
        spec = (
            language_spec
            if isinstance(language_spec, LanguageSpec)
            else LanguageSpec.parse(language_spec)
        )
        if not spec:
            return list(repositories)

        scope = scope or HostCallPolicy().open_scope()

        async def _check(repo: RepositorySummary) -> bool:
            languages = await scope.list_languages(self._host, repo)
            return spec.matches(languages)

        keep = await asyncio.gather(*(_check(repo) for repo in repositories))
        kept = [repo for repo, ok in zip(repositories, keep) if ok]

        logger.debug(
            "Language filter %s kept %d of %d repositories",
            sorted(spec.tokens),
            len(kept),
            len(repositories),
        )
        return kept

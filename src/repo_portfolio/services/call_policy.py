"""Per-repository host call policy: optional concurrency cap and retries.

The default policy reproduces plain unbounded fan-out: no semaphore, one
attempt per call, no sharing of language lookups between the filter and
enrichment passes.  Each knob is opt-in.
"""

from __future__ import annotations

import asyncio
import logging
import random
from contextlib import nullcontext
from dataclasses import dataclass
from typing import Awaitable, Callable, TypeVar

from repo_portfolio.domain.entities import RepositorySummary
from repo_portfolio.domain.exceptions import HostRateLimitError, HostTransportError
from repo_portfolio.domain.ports.repository_host import RepositoryHost

logger = logging.getLogger(__name__)

T = TypeVar("T")

_RETRYABLE: tuple[type[Exception], ...] = (HostRateLimitError, HostTransportError)


@dataclass(frozen=True, slots=True)
class HostCallPolicy:
    """How per-repository host calls are scheduled.

    Parameters
    ----------
    max_concurrency:
        Upper bound on in-flight host calls for one pipeline invocation.
        ``None`` means unbounded.
    retry_attempts:
        Total attempts per call for rate-limit and transport failures.
        ``1`` disables retrying.
    retry_backoff:
        Base delay in seconds; doubles with every attempt, plus jitter.
    share_language_lookups:
        Reuse the language list fetched while filtering when enriching the
        same repository in the same invocation.
    """

    max_concurrency: int | None = None
    retry_attempts: int = 1
    retry_backoff: float = 1.0
    share_language_lookups: bool = False

    def __post_init__(self) -> None:
        if self.max_concurrency is not None and self.max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1 or None")
        if self.retry_attempts < 1:
            raise ValueError("retry_attempts must be at least 1")
        if self.retry_backoff < 0:
            raise ValueError("retry_backoff must be non-negative")

    def open_scope(self) -> CallScope:
        """Return fresh per-invocation state (semaphore, language cache)."""
        return CallScope(self)


class CallScope:
    """Runs host calls for a single pipeline invocation under a policy."""

    def __init__(self, policy: HostCallPolicy) -> None:
        self._policy = policy
        self._sem = (
            asyncio.Semaphore(policy.max_concurrency)
            if policy.max_concurrency is not None
            else None
        )
        self._languages: dict[tuple[str, str], list[str]] | None = (
            {} if policy.share_language_lookups else None
        )

    async def run(self, func: Callable[..., Awaitable[T]], *args: object) -> T:
        """Await ``func(*args)``, retrying transient host failures."""
        attempts = self._policy.retry_attempts
        for attempt in range(1, attempts + 1):
            try:
                async with self._sem if self._sem is not None else nullcontext():
                    return await func(*args)
            except _RETRYABLE as exc:
                if attempt >= attempts:
                    raise
                delay = self._policy.retry_backoff * 2 ** (attempt - 1)
                delay += random.uniform(0, self._policy.retry_backoff)
                logger.warning(
                    "%s (attempt %d/%d), retrying in %.1fs",
                    exc,
                    attempt,
                    attempts,
                    delay,
                )
                await asyncio.sleep(delay)
        raise AssertionError("unreachable")

    async def list_languages(self, host: RepositoryHost, repo: RepositorySummary) -> list[str]:
        """Fetch languages for *repo*, reusing a previous lookup when sharing is on."""
        key = (repo.owner, repo.name)
        if self._languages is not None and key in self._languages:
            return self._languages[key]

        languages = await self.run(host.list_languages, repo.owner, repo.name)
        if self._languages is not None:
            self._languages[key] = languages
        return languages

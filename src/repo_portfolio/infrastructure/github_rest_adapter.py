"""GitHub REST API adapter — implements the RepositoryHost port."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, AsyncIterator

import httpx

from repo_portfolio.domain.entities import RepositorySummary
from repo_portfolio.domain.exceptions import (
    ConfigurationError,
    HostAccessDeniedError,
    HostAuthenticationError,
    HostError,
    HostNotFoundError,
    HostQueryError,
    HostRateLimitError,
    HostTransportError,
)

logger = logging.getLogger(__name__)

_GITHUB_API = "https://api.github.com"
_GITHUB_API_VERSION = "2022-11-28"
_USER_AGENT = "repo-portfolio/1.0"
_PER_PAGE = 100


class GitHubRestAdapter:
    """Concrete RepositoryHost backed by the GitHub v3 REST API."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        token: str | None,
        api_url: str = _GITHUB_API,
    ) -> None:
        if not token or not token.strip():
            raise ConfigurationError("GitHub Personal Access Token is not set.")
        self._client = client
        self._api_url = api_url.rstrip("/")
        self._api_headers: dict[str, str] = {
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {token.strip()}",
            "User-Agent": _USER_AGENT,
            "X-GitHub-Api-Version": _GITHUB_API_VERSION,
        }

    async def list_repositories_for_user(self, user_name: str) -> list[RepositorySummary]:
        """GET /users/{user}/repos (all pages) → [RepositorySummary]."""
        repos: list[RepositorySummary] = []
        async for page in self._paginate(f"/users/{user_name}/repos"):
            repos.extend(_to_summary(item) for item in page)
        logger.debug("Listed %d repositories for %s", len(repos), user_name)
        return repos

    async def search_repositories(self, query: str) -> list[RepositorySummary] | None:
        """GET /search/repositories?q=... (first page only) → [RepositorySummary].

        Search ranking can shift between page requests, so only one page is
        read; repeated ``owner/name`` entries are dropped.
        """
        data = await self._get_json(
            "/search/repositories", params={"q": query, "per_page": str(_PER_PAGE)}
        )
        items = data.get("items") if isinstance(data, dict) else None
        if items is None:
            return None

        repos: dict[tuple[str, str], RepositorySummary] = {}
        for item in items:
            repo = _to_summary(item)
            repos.setdefault((repo.owner, repo.name), repo)
        logger.debug("Search %r matched %d repositories", query, len(repos))
        return list(repos.values())

    async def list_languages(self, owner: str, name: str) -> list[str]:
        """GET /repos/{owner}/{repo}/languages → [language]."""
        data = await self._get_json(f"/repos/{owner}/{name}/languages")
        return list(data or {})

    async def count_pull_requests(self, owner: str, name: str) -> int:
        """GET /repos/{owner}/{repo}/pulls?state=all (all pages) → count."""
        total = 0
        async for page in self._paginate(
            f"/repos/{owner}/{name}/pulls", params={"state": "all"}
        ):
            total += len(page)
        return total

    async def count_followers(self, user_name: str) -> int:
        """GET /users/{user} → followers."""
        data = await self._get_json(f"/users/{user_name}")
        try:
            return int(data.get("followers", 0))
        except (AttributeError, TypeError, ValueError) as exc:
            raise HostError(f"Unexpected user payload for {user_name}") from exc

    # ── HTTP helpers ────────────────────────────────────────────────────

    async def _paginate(
        self,
        endpoint: str,
        params: dict[str, str] | None = None,
    ) -> AsyncIterator[Any]:
        """Yield the JSON body of every page, following ``Link: rel="next"``."""
        url: str | None = f"{self._api_url}{endpoint}"
        page_params: dict[str, str] | None = {**(params or {}), "per_page": str(_PER_PAGE)}
        while url:
            resp = await self._request(url, page_params)
            yield _decode_json(resp)
            url = resp.links.get("next", {}).get("url")
            # The next link already carries the query string.
            page_params = None

    async def _get_json(
        self,
        endpoint: str,
        params: dict[str, str] | None = None,
    ) -> Any:
        resp = await self._request(f"{self._api_url}{endpoint}", params)
        return _decode_json(resp)

    async def _request(
        self,
        url: str,
        params: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Perform a GitHub API GET request with error translation."""
        try:
            resp = await self._client.get(url, headers=self._api_headers, params=params)
        except httpx.HTTPError as exc:
            raise HostTransportError(f"Network error fetching {url}: {exc}") from exc

        status = resp.status_code
        if 200 <= status < 300:
            return resp

        if status == 401:
            raise HostAuthenticationError(
                "GitHub rejected the access token. Check GITHUB_TOKEN.", status=status
            )

        if status == 404:
            raise HostNotFoundError(f"Not found on GitHub: {url}", status=status)

        if status == 403:
            if resp.headers.get("x-ratelimit-remaining", "") == "0":
                raise HostRateLimitError(
                    f"GitHub API rate limit exceeded. Resets at {_reset_time(resp)}.",
                    status=status,
                )
            raise HostAccessDeniedError(f"Access denied by GitHub: {url}", status=status)

        if status == 429:
            raise HostRateLimitError(
                "GitHub API rate limit exceeded (HTTP 429).", status=status
            )

        if status == 422:
            raise HostQueryError(
                f"GitHub rejected the request as invalid: {_error_message(resp)}",
                status=status,
            )

        raise HostError(f"GitHub API returned HTTP {status} for {url}", status=status)


# ── Payload translation ─────────────────────────────────────────────────────


def _decode_json(resp: httpx.Response) -> Any:
    try:
        return resp.json()
    except ValueError as exc:
        raise HostError(
            f"GitHub returned a non-JSON body for {resp.request.url}",
            status=resp.status_code,
        ) from exc


def _to_summary(item: dict[str, Any]) -> RepositorySummary:
    """Translate a GitHub repository object into a RepositorySummary."""
    try:
        owner = item.get("owner") or {}
        updated_at = _parse_timestamp(item.get("updated_at"))
        if updated_at is None:
            raise HostError(f"Repository payload for {item.get('full_name')} has no updated_at")

        return RepositorySummary(
            name=item["name"],
            owner=owner.get("login", ""),
            html_url=item.get("html_url", ""),
            updated_at=updated_at,
            stars=item.get("stargazers_count") or 0,
            description=item.get("description"),
            pushed_at=_parse_timestamp(item.get("pushed_at")),
            language=item.get("language"),
        )
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise HostError(f"Unexpected repository payload: {exc!r}") from exc


def _parse_timestamp(raw: str | None) -> datetime | None:
    if not raw:
        return None
    return datetime.fromisoformat(raw.replace("Z", "+00:00"))


def _reset_time(resp: httpx.Response) -> str:
    reset_raw = resp.headers.get("x-ratelimit-reset", "")
    try:
        return datetime.fromtimestamp(int(reset_raw), tz=timezone.utc).strftime(
            "%Y-%m-%d %H:%M:%S UTC"
        )
    except (ValueError, OSError):
        return reset_raw or "unknown"


def _error_message(resp: httpx.Response) -> str:
    try:
        return str(resp.json().get("message", resp.text))
    except ValueError:
        return resp.text

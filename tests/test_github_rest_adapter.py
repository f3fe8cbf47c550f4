import unittest
from datetime import datetime, timezone

import httpx

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
from repo_portfolio.infrastructure.github_rest_adapter import GitHubRestAdapter

API = "https://api.github.com"


def _repo_json(name: str, **overrides) -> dict:
    data = {
        "name": name,
        "full_name": f"octo/{name}",
        "owner": {"login": "octo"},
        "description": None,
        "stargazers_count": 3,
        "pushed_at": "2024-05-01T10:00:00Z",
        "updated_at": "2024-06-01T10:00:00Z",
        "html_url": f"https://github.com/octo/{name}",
        "language": "Go",
    }
    data.update(overrides)
    return data


def _adapter(handler) -> tuple[GitHubRestAdapter, httpx.AsyncClient]:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GitHubRestAdapter(client=client, token="test-token"), client


class TestAdapterConstruction(unittest.TestCase):
    def test_missing_token_is_a_configuration_error(self) -> None:
        client = httpx.AsyncClient()
        for token in (None, "", "  "):
            with self.subTest(token=token):
                with self.assertRaises(ConfigurationError):
                    GitHubRestAdapter(client=client, token=token)


class TestGitHubRestAdapter(unittest.IsolatedAsyncioTestCase):
    async def test_sends_auth_and_version_headers(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"followers": 12})

        adapter, client = _adapter(handler)
        async with client:
            self.assertEqual(await adapter.count_followers("octo"), 12)

        request = seen[0]
        self.assertEqual(request.url.path, "/users/octo")
        self.assertEqual(request.headers["Authorization"], "Bearer test-token")
        self.assertEqual(request.headers["Accept"], "application/vnd.github+json")
        self.assertIn("X-GitHub-Api-Version", request.headers)

    async def test_list_repositories_follows_next_links(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.params.get("page") == "2":
                return httpx.Response(200, json=[_repo_json("b", pushed_at=None)])
            return httpx.Response(
                200,
                json=[_repo_json("a")],
                headers={"Link": f'<{API}/users/octo/repos?per_page=100&page=2>; rel="next"'},
            )

        adapter, client = _adapter(handler)
        async with client:
            repos = await adapter.list_repositories_for_user("octo")

        self.assertEqual([r.name for r in repos], ["a", "b"])
        a, b = repos
        self.assertEqual(a.owner, "octo")
        self.assertEqual(a.stars, 3)
        self.assertEqual(a.language, "Go")
        self.assertEqual(a.pushed_at, datetime(2024, 5, 1, 10, tzinfo=timezone.utc))
        self.assertIsNone(b.pushed_at)
        self.assertEqual(b.last_commit, datetime(2024, 6, 1, 10, tzinfo=timezone.utc))

    async def test_search_sends_query_and_reads_items(self) -> None:
        queries: list[str | None] = []

        def handler(request: httpx.Request) -> httpx.Response:
            queries.append(request.url.params.get("q"))
            return httpx.Response(200, json={"total_count": 1, "items": [_repo_json("a")]})

        adapter, client = _adapter(handler)
        async with client:
            repos = await adapter.search_repositories("user:octo stars:>=0")

        self.assertEqual(queries, ["user:octo stars:>=0"])
        self.assertEqual([r.name for r in repos or []], ["a"])

    async def test_search_without_items_returns_none(self) -> None:
        adapter, client = _adapter(lambda request: httpx.Response(200, json={"total_count": 0}))
        async with client:
            self.assertIsNone(await adapter.search_repositories("stars:>=0"))

    async def test_languages_keep_host_order(self) -> None:
        adapter, client = _adapter(
            lambda request: httpx.Response(200, json={"Python": 900, "Go": 50, "Shell": 3})
        )
        async with client:
            languages = await adapter.list_languages("octo", "a")

        self.assertEqual(languages, ["Python", "Go", "Shell"])

    async def test_pull_requests_are_counted_across_pages(self) -> None:
        states: list[str | None] = []

        def handler(request: httpx.Request) -> httpx.Response:
            states.append(request.url.params.get("state"))
            if request.url.params.get("page") == "2":
                return httpx.Response(200, json=[{"number": 3}])
            return httpx.Response(
                200,
                json=[{"number": 1}, {"number": 2}],
                headers={
                    "Link": f'<{API}/repos/octo/a/pulls?state=all&per_page=100&page=2>; rel="next"'
                },
            )

        adapter, client = _adapter(handler)
        async with client:
            count = await adapter.count_pull_requests("octo", "a")

        self.assertEqual(count, 3)
        self.assertEqual(states, ["all", "all"])

    async def test_status_codes_translate_to_host_errors(self) -> None:
        cases = [
            (httpx.Response(401), HostAuthenticationError),
            (httpx.Response(404), HostNotFoundError),
            (httpx.Response(403), HostAccessDeniedError),
            (
                httpx.Response(
                    403,
                    headers={"x-ratelimit-remaining": "0", "x-ratelimit-reset": "1700000000"},
                ),
                HostRateLimitError,
            ),
            (httpx.Response(429), HostRateLimitError),
            (httpx.Response(422, json={"message": "Validation Failed"}), HostQueryError),
            (httpx.Response(500), HostError),
        ]
        for response, expected in cases:
            with self.subTest(status=response.status_code, expected=expected.__name__):
                adapter, client = _adapter(lambda request, r=response: r)
                async with client:
                    with self.assertRaises(expected) as ctx:
                        await adapter.list_languages("octo", "a")
                self.assertEqual(ctx.exception.status, response.status_code)

    async def test_network_error_is_a_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        adapter, client = _adapter(handler)
        async with client:
            with self.assertRaises(HostTransportError):
                await adapter.count_pull_requests("octo", "a")

    async def test_search_reads_a_single_page_without_duplicates(self) -> None:
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            if request.url.params.get("page") == "2":
                return httpx.Response(200, json={"items": [_repo_json("b"), _repo_json("c")]})
            return httpx.Response(
                200,
                json={"items": [_repo_json("a"), _repo_json("b"), _repo_json("a")]},
                headers={"Link": f'<{API}/search/repositories?q=x&page=2>; rel="next"'},
            )

        adapter, client = _adapter(handler)
        async with client:
            repos = await adapter.search_repositories("stars:>=0")

        self.assertEqual(len(requests), 1)
        self.assertEqual(requests[0].url.params.get("per_page"), "100")
        self.assertEqual([r.name for r in repos or []], ["a", "b"])

    async def test_non_json_body_is_a_host_error(self) -> None:
        adapter, client = _adapter(
            lambda request: httpx.Response(200, text="<html>proxy</html>")
        )
        async with client:
            with self.assertRaises(HostError):
                await adapter.count_followers("octo")
            with self.assertRaises(HostError):
                await adapter.count_pull_requests("octo", "a")

    async def test_repository_without_name_is_a_host_error(self) -> None:
        payload = [{"owner": {"login": "octo"}, "updated_at": "2024-06-01T10:00:00Z"}]
        adapter, client = _adapter(lambda request: httpx.Response(200, json=payload))
        async with client:
            with self.assertRaises(HostError):
                await adapter.list_repositories_for_user("octo")

    async def test_malformed_timestamp_is_a_host_error(self) -> None:
        payload = {"items": [_repo_json("a", updated_at="yesterday")]}
        adapter, client = _adapter(lambda request: httpx.Response(200, json=payload))
        async with client:
            with self.assertRaises(HostError):
                await adapter.search_repositories("stars:>=0")

import asyncio
import unittest
from unittest.mock import AsyncMock, MagicMock

import aiohttp

from src.domain.exceptions import ApiError, NetworkError
from src.infrastructure.github_client import GitHubSearchClient


def _response(status, body, headers=None):
    resp = AsyncMock()
    resp.status = status
    resp.headers = headers or {}
    resp.json = AsyncMock(return_value=body)
    resp.__aenter__ = AsyncMock(return_value=resp)
    resp.__aexit__ = AsyncMock(return_value=False)
    return resp


def _session(*responses):
    session = AsyncMock()
    session.get = MagicMock(side_effect=list(responses))
    return session


class TestGitHubSearchClient(unittest.TestCase):
    def test_headers_carry_bearer_token(self) -> None:
        token = "test-token"
        client = GitHubSearchClient(token=token)

        self.assertIsInstance(client.headers, dict)
        self.assertEqual(client.headers["Authorization"], f"Bearer {token}")

    def test_headers_without_token_are_unauthenticated(self) -> None:
        for token in (None, "", "   "):
            client = GitHubSearchClient(token=token)
            self.assertNotIn("Authorization", client.headers)
            self.assertIn("User-Agent", client.headers)
            self.assertIn("Accept", client.headers)

    def test_query_without_language(self) -> None:
        self.assertEqual(GitHubSearchClient.build_search_query("stars", ""), "stars:>100")

    def test_blank_language_adds_no_clause(self) -> None:
        query = GitHubSearchClient.build_search_query("stars", " \t ")
        self.assertEqual(query, "stars:>100")
        self.assertNotIn("language:", query)

    def test_language_is_trimmed(self) -> None:
        query = GitHubSearchClient.build_search_query("stars", " Go ")
        self.assertEqual(query, "stars:>100 language:Go")
        self.assertEqual(query.count("language:"), 1)

    def test_predicate_follows_category(self) -> None:
        self.assertEqual(
            GitHubSearchClient.build_search_query("forks", "Rust"),
            "forks:>100 language:Rust",
        )

    def test_params(self) -> None:
        self.assertEqual(
            GitHubSearchClient.build_params("stars", ""),
            {"q": "stars:>100", "sort": "stars", "per_page": 10},
        )


class TestSearch(unittest.IsolatedAsyncioTestCase):
    async def test_200_returns_items(self) -> None:
        client = GitHubSearchClient(token="t")
        items = [{"id": 1}, {"id": 2}]
        session = _session(_response(200, {"total_count": 2, "items": items}))

        outcome = await client.search(session, "stars", " Go ")

        self.assertTrue(outcome.ok)
        self.assertEqual(outcome.items, items)
        session.get.assert_called_once()
        args, kwargs = session.get.call_args
        self.assertEqual(args[0], "https://api.github.com/search/repositories")
        self.assertEqual(kwargs["params"], {"q": "stars:>100 language:Go", "sort": "stars", "per_page": 10})
        self.assertEqual(kwargs["headers"]["Authorization"], "Bearer t")

    async def test_403_is_a_failure_with_reason(self) -> None:
        client = GitHubSearchClient()
        session = _session(_response(
            403,
            {"message": "API rate limit exceeded"},
            headers={"X-RateLimit-Remaining": "0"},
        ))

        with self.assertLogs("src.infrastructure.github_client", level="WARNING"):
            outcome = await client.search(session, "stars")

        self.assertFalse(outcome.ok)
        self.assertEqual(outcome.status, 403)
        self.assertEqual(outcome.reason, "API rate limit exceeded")
        with self.assertRaises(ApiError) as ctx:
            outcome.unwrap()
        self.assertEqual(ctx.exception.status, 403)

    async def test_failure_without_message_uses_status(self) -> None:
        client = GitHubSearchClient()
        session = _session(_response(502, None))

        with self.assertLogs("src.infrastructure.github_client", level="WARNING"):
            outcome = await client.search(session, "stars")

        self.assertEqual(outcome.reason, "HTTP 502")

    async def test_transport_error_raises_network_error(self) -> None:
        client = GitHubSearchClient()
        session = AsyncMock()
        session.get = MagicMock(side_effect=aiohttp.ClientConnectionError("boom"))

        with self.assertRaises(NetworkError) as ctx:
            await client.search(session, "stars")
        self.assertIsInstance(ctx.exception.__cause__, aiohttp.ClientConnectionError)

    async def test_timeout_raises_network_error(self) -> None:
        client = GitHubSearchClient()
        session = AsyncMock()
        session.get = MagicMock(side_effect=asyncio.TimeoutError())

        with self.assertRaises(NetworkError):
            await client.search(session, "stars")


class TestFetchTopRepositories(unittest.IsolatedAsyncioTestCase):
    async def test_returns_items_on_200(self) -> None:
        client = GitHubSearchClient()
        session = _session(_response(200, {"items": [{"id": 7}]}))

        items = await client.fetch_top_repositories(session, "stars", "")

        self.assertEqual(items, [{"id": 7}])

    async def test_non_200_returns_empty_list(self) -> None:
        client = GitHubSearchClient()
        for status in (403, 404, 422, 500):
            session = _session(_response(status, {"message": "nope"}))
            with self.assertLogs("src.infrastructure.github_client", level="WARNING"):
                items = await client.fetch_top_repositories(session, "stars", "")
            self.assertEqual(items, [])

    async def test_missing_items_returns_empty_list(self) -> None:
        client = GitHubSearchClient()
        session = _session(_response(200, {"total_count": 0}))

        self.assertEqual(await client.fetch_top_repositories(session, "stars"), [])

    async def test_issues_exactly_one_request(self) -> None:
        client = GitHubSearchClient()
        session = _session(_response(500, {}), _response(200, {"items": [{"id": 1}]}))

        with self.assertLogs("src.infrastructure.github_client", level="WARNING"):
            items = await client.fetch_top_repositories(session, "stars")

        self.assertEqual(items, [])
        self.assertEqual(session.get.call_count, 1)

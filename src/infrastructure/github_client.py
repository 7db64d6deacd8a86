import aiohttp
import asyncio
import logging
from typing import Any, Dict, List, Optional

from src.domain.exceptions import NetworkError
from src.domain.models import SearchFailure, SearchOutcome, SearchSuccess

logger = logging.getLogger(__name__)

# Results are unstable when the category count is small, so the search
# predicate always requires more than this many (stars, forks, ...).
MIN_COUNT_THRESHOLD = 100
PAGE_SIZE = 10

class GitHubSearchClient:
    """
    Client for the GitHub REST repository search endpoint.
    Builds the search query, issues a single request and checks its status.
    """

    def __init__(self, token: Optional[str] = None, api_url: str = "https://api.github.com"):
        self.headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": "top-repos",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        # Without a token requests go out unauthenticated, with a lower rate limit.
        if token and token.strip():
            self.headers["Authorization"] = f"Bearer {token.strip()}"
        self.search_url = f"{api_url.rstrip('/')}/search/repositories"

    @staticmethod
    def build_search_query(category: str, language: str = "") -> str:
        query = f"{category}:>{MIN_COUNT_THRESHOLD}"
        language = (language or "").strip()
        if language:
            query += f" language:{language}"
        return query

    @classmethod
    def build_params(cls, category: str, language: str = "") -> Dict[str, Any]:
        return {
            "q": cls.build_search_query(category, language),
            "sort": category,
            "per_page": PAGE_SIZE,
        }

    async def search(
        self,
        session: aiohttp.ClientSession,
        category: str,
        language: str = "",
    ) -> SearchOutcome:
        """
        Runs one search request for the top repositories in ``category``.

        Returns:
            SearchSuccess with the raw items on HTTP 200, SearchFailure otherwise.

        Raises:
            NetworkError: If the request could not be completed.
        """
        params = self.build_params(category, language)
        try:
            async with session.get(self.search_url, params=params, headers=self.headers) as response:
                if response.status == 200:
                    data = await response.json()
                    return SearchSuccess(items=data.get("items") or [])

                reason = await self._read_error_message(response)
                remaining = response.headers.get("X-RateLimit-Remaining")
                logger.warning(
                    f"Search '{params['q']}' failed with status {response.status}: {reason} "
                    f"(rate limit remaining: {remaining if remaining is not None else 'unknown'})"
                )
                return SearchFailure(status=response.status, reason=reason)

        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise NetworkError(f"Request to {self.search_url} failed: {e}") from e

    async def fetch_top_repositories(
        self,
        session: aiohttp.ClientSession,
        category: str,
        language: str = "",
    ) -> List[Dict[str, Any]]:
        """
        Raw items for the top repositories, or an empty list on any non-200 status.
        An empty list therefore means either "no results" or "request failed";
        use ``search`` to tell them apart.
        """
        outcome = await self.search(session, category, language)
        if not outcome.ok:
            return []
        return outcome.items

    @staticmethod
    async def _read_error_message(response: aiohttp.ClientResponse) -> str:
        try:
            body = await response.json(content_type=None)
        except (aiohttp.ContentTypeError, ValueError):
            body = None
        message = body.get("message") if isinstance(body, dict) else None
        return message or f"HTTP {response.status}"

import logging
from typing import List

import aiohttp

from src.infrastructure.github_client import GitHubSearchClient
from src.infrastructure.acl import GitHubTranslator
from src.domain.models import DisplayRecord

logger = logging.getLogger(__name__)


class TopReposService:
    """
    Fetch-and-normalize pipeline behind the top repositories table.
    One call issues exactly one search request; nothing is retried or cached.
    """

    def __init__(self, github_client: GitHubSearchClient):
        self.github_client = github_client

    async def get_top_repositories(
        self,
        category: str = "stars",
        language: str = "",
        strict: bool = False,
    ) -> List[DisplayRecord]:
        """
        Returns the ranked display records for ``category``, optionally filtered by ``language``.

        By default a non-200 response yields an empty list. With ``strict`` the
        failure is raised as ApiError instead, so "no results" and "request
        failed" can be told apart.
        """
        query = self.github_client.build_search_query(category, language)
        logger.info(f"Fetching top repositories for '{query}'.")

        async with aiohttp.ClientSession() as session:
            if strict:
                outcome = await self.github_client.search(session, category, language)
                raw_items = outcome.unwrap()
            else:
                raw_items = await self.github_client.fetch_top_repositories(session, category, language)

        records = GitHubTranslator.normalize(raw_items)
        logger.info(f"Fetched {len(records)} repositories for '{query}'.")
        return records

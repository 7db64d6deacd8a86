import argparse
import asyncio
import os
import sys
import logging
from dotenv import load_dotenv

from src.infrastructure.github_client import GitHubSearchClient
from src.application.top_repos_service import TopReposService
from src.domain.exceptions import ApiError, NetworkError
from src.presentation.repositories_view import FETCH_DELAY_SECONDS, FORK_ORDERS, RepositoriesView
from src.presentation.table_renderer import render_table

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    handlers=[
        logging.StreamHandler(sys.stdout)
    ]
)
logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Show the top GitHub repositories in a category.")
    parser.add_argument("--category", default="stars", help="Search and sort dimension, e.g. stars or forks")
    parser.add_argument("--language", default="", help="Only search repositories in this language")
    parser.add_argument("--sort-forks", choices=FORK_ORDERS, default=None, help="Sort the table by forks")
    parser.add_argument("--filter-language", default=None, help="Only show rows in this language")
    parser.add_argument("--strict", action="store_true", help="Fail instead of showing an empty table on API errors")
    parser.add_argument("--delay", type=float, default=FETCH_DELAY_SECONDS, help="Seconds to wait before fetching")
    return parser.parse_args(argv)


async def main(argv=None) -> int:
    args = parse_args(argv)

    # Load environment variables from .env file
    load_dotenv()

    github_token = os.getenv("GITHUB_TOKEN")
    if not github_token:
        logger.warning("GITHUB_TOKEN is not set. Using unauthenticated requests (limited rate).")

    github_client = GitHubSearchClient(token=github_token)
    service = TopReposService(github_client=github_client)
    view = RepositoriesView(
        service=service,
        category=args.category,
        language=args.language,
        delay=args.delay,
        strict=args.strict,
    )

    scheduled = view.mount()
    try:
        await scheduled.wait()
        title = f"Top repositories by {args.category}"
        print(render_table(view.rows(fork_order=args.sort_forks, language=args.filter_language), title))
        if view.records:
            logger.info(f"Languages in this result set: {', '.join(view.language_filters()) or 'none'}")
    except (ApiError, NetworkError) as e:
        logger.error(f"Could not fetch repositories: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted by user. Exiting gracefully.")
    except Exception as e:
        logger.exception(f"An unexpected error occurred: {e}")
        return 1
    finally:
        view.unmount()
    return 0

def run() -> None:
    sys.exit(asyncio.run(main()))

if __name__ == "__main__":
    run()

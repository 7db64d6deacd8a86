import asyncio
import logging
from typing import Awaitable, Callable, List, Optional, Tuple

from src.application.top_repos_service import TopReposService
from src.domain.models import DisplayRecord

logger = logging.getLogger(__name__)

# Delay between mounting the view and fetching, so rapid re-mounts don't fire requests.
FETCH_DELAY_SECONDS = 1.0
FORK_ORDERS = ("descend", "ascend")


class ScheduledFetch:
    """
    A callback scheduled once after a fixed delay, cancellable until it completes.
    """

    def __init__(self, delay: float, callback: Callable[[], Awaitable[None]]):
        self.delay = delay
        self.callback = callback
        self.fired = False
        self._task: Optional[asyncio.Task] = None

    def start(self) -> None:
        if self._task is not None:
            raise RuntimeError("Scheduled fetch already started.")
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def _run(self) -> None:
        await asyncio.sleep(self.delay)
        self.fired = True
        await self.callback()

    def cancel(self) -> bool:
        """Returns True if there was still something to cancel."""
        if self._task is None or self._task.done():
            return False
        self._task.cancel()
        return True

    @property
    def done(self) -> bool:
        return self._task is not None and self._task.done()

    async def wait(self) -> None:
        """Waits for the callback, re-raising its error. Returns quietly if cancelled."""
        if self._task is None:
            return
        await asyncio.wait({self._task})
        if not self._task.cancelled():
            self._task.result()


class RepositoriesView:
    """
    State behind the top repositories page.

    Mounting schedules exactly one fetch after ``delay`` seconds; unmounting
    cancels it, so no state is updated after teardown. Sorting and filtering
    work on the records already fetched and never hit the network.
    """

    def __init__(
        self,
        service: TopReposService,
        category: str = "stars",
        language: str = "",
        delay: float = FETCH_DELAY_SECONDS,
        strict: bool = False,
    ):
        self.service = service
        self.category = category
        self.language = language
        self.delay = delay
        self.strict = strict
        self.records: Tuple[DisplayRecord, ...] = ()
        self.loading = False
        self._scheduled: Optional[ScheduledFetch] = None

    @property
    def mounted(self) -> bool:
        return self._scheduled is not None

    def mount(self) -> ScheduledFetch:
        if self.mounted:
            raise RuntimeError("View is already mounted.")
        scheduled = ScheduledFetch(self.delay, self._load)
        scheduled.start()
        self._scheduled = scheduled
        return scheduled

    def unmount(self) -> None:
        if self._scheduled is None:
            return
        if self._scheduled.cancel():
            logger.info("View unmounted before the fetch completed, cancelled it.")
        self._scheduled = None
        self.records = ()
        self.loading = False

    async def _load(self) -> None:
        scheduled = self._scheduled
        self.loading = True
        try:
            records = await self.service.get_top_repositories(
                category=self.category,
                language=self.language,
                strict=self.strict,
            )
        finally:
            if self._scheduled is scheduled:
                self.loading = False

        if self._scheduled is scheduled:
            self.records = tuple(records)

    def language_filters(self) -> List[str]:
        return sorted({record.language for record in self.records if record.language}, key=str)

    def rows(
        self,
        fork_order: Optional[str] = None,
        language: Optional[str] = None,
    ) -> List[DisplayRecord]:
        """
        Records as the table shows them: optionally filtered to one language
        and sorted by forks ("descend" or "ascend").
        """
        if fork_order is not None and fork_order not in FORK_ORDERS:
            raise ValueError(f"fork_order must be one of {FORK_ORDERS}, got {fork_order!r}")

        rows = list(self.records)
        if language:
            rows = [record for record in rows if record.language == language]
        if fork_order:
            rows.sort(key=lambda record: record.forks, reverse=fork_order == "descend")
        return rows

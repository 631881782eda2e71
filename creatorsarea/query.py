"""
Fluent query builder over the job listing.

Example:
    ```python
    page = await (
        client.query()
        .category('DESIGNER')
        .volunteer(True)
        .tags(['tagId1', 'tagId2'])
        .status(JobStatus.ACTIVE)
        .execute()
    )

    async for job in client.query().category('DEVELOPER').stream(delay=1.5):
        print(job.title)
    ```
"""

import asyncio
import logging
from collections import deque
from typing import TYPE_CHECKING, Deque, List, Optional, Union

from .exceptions import ValidationError
from .models import DEFAULT_PAGE_DELAY, Category, Job, JobFilters, JobKind, JobPage, JobStatus

if TYPE_CHECKING:
    from .client import CreatorsAreaClient

logger = logging.getLogger(__name__)


def _coerce(enum_cls, value):
    try:
        return enum_cls(value)
    except ValueError as e:
        allowed = ', '.join(member.value for member in enum_cls)
        raise ValidationError(f"Invalid {enum_cls.__name__} {value!r}, expected one of: {allowed}", value) from e


class JobStream:
    """
    Async iterator over the jobs of every page matching a filter snapshot.

    Pages are fetched lazily: the next page is requested only when the
    consumer asks for an item past the current page, after waiting ``delay``
    seconds. Stopping iteration early leaves no request pending.
    """

    def __init__(
        self,
        client: "CreatorsAreaClient",
        filters: JobFilters,
        delay: float = DEFAULT_PAGE_DELAY,
        max_pages: Optional[int] = None,
    ):
        if max_pages is not None and max_pages < 1:
            raise ValidationError(f"max_pages must be >= 1, got {max_pages}", max_pages)
        self._client = client
        self._filters = filters
        self._delay = delay
        self._max_pages = max_pages

        self._next_page = 0
        self._pages_fetched = 0
        self._buffer: Deque[Job] = deque()
        self._exhausted = False

    @property
    def pages_fetched(self) -> int:
        return self._pages_fetched

    def __aiter__(self) -> "JobStream":
        return self

    async def __anext__(self) -> Job:
        while not self._buffer:
            if self._exhausted:
                raise StopAsyncIteration
            await self._fetch_next_page()
        return self._buffer.popleft()

    async def _fetch_next_page(self) -> None:
        if self._pages_fetched > 0 and self._delay > 0:
            await asyncio.sleep(self._delay)

        page = await self._client.list_jobs(
            self._filters.model_copy(update={'page': self._next_page})
        )
        self._pages_fetched += 1
        self._buffer = deque(page.jobs)
        logger.debug(
            f"Fetched page {page.pagination.page + 1}/{page.pagination.total_pages} "
            f"({len(page.jobs)} jobs)"
        )

        # never walk backwards if the API reports a stale page index
        current = max(self._next_page, page.pagination.page)
        if current >= page.pagination.total_pages - 1:
            self._exhausted = True
        elif self._max_pages is not None and self._pages_fetched >= self._max_pages:
            logger.debug(f"Stopping after {self._pages_fetched} pages (max_pages)")
            self._exhausted = True
        else:
            self._next_page += 1


class JobQueryBuilder:
    """
    Accumulates job filters through chained calls and runs the query.

    Setters return the builder itself. Execution methods read a snapshot of
    the filters, so changing the builder afterwards does not affect a query
    that is already running. The builder can be reused indefinitely.
    """

    def __init__(self, client: "CreatorsAreaClient"):
        self._client = client
        self._filters = JobFilters()

    def volunteer(self, is_volunteer: bool = True) -> "JobQueryBuilder":
        self._filters.volunteer = bool(is_volunteer)
        return self

    def page(self, page_number: int) -> "JobQueryBuilder":
        """Set the page to fetch (0-indexed)"""
        if page_number < 0:
            raise ValidationError(f"Page number must be >= 0, got {page_number}", page_number)
        self._filters.page = page_number
        return self

    def tags(self, tag_ids: Union[str, List[str]]) -> "JobQueryBuilder":
        """Filter by one or more tag ids, replacing any set before"""
        self._filters.tags = [tag_ids] if isinstance(tag_ids, str) else list(tag_ids)
        return self

    def add_tag(self, tag_id: str) -> "JobQueryBuilder":
        """Add one tag id to the tag filter"""
        self._filters.tags = [*(self._filters.tags or []), tag_id]
        return self

    def kind(self, job_kind: Union[JobKind, str]) -> "JobQueryBuilder":
        self._filters.kind = _coerce(JobKind, job_kind)
        return self

    def status(self, job_status: Union[JobStatus, str]) -> "JobQueryBuilder":
        self._filters.status = _coerce(JobStatus, job_status)
        return self

    def category(self, category: Union[Category, str]) -> "JobQueryBuilder":
        self._filters.category = _coerce(Category, category)
        return self

    def reset(self) -> "JobQueryBuilder":
        """Clear every filter"""
        self._filters = JobFilters()
        return self

    def build(self) -> JobFilters:
        """Get a copy of the current filters without running the query"""
        return self._filters.model_copy(deep=True)

    async def execute(self) -> JobPage:
        """Fetch the page selected by the filters"""
        return await self._client.list_jobs(self.build())

    async def execute_and_get_results(self) -> List[Job]:
        """Fetch the page selected by the filters, without pagination info"""
        page = await self.execute()
        return page.jobs

    async def execute_all(self, delay: float = DEFAULT_PAGE_DELAY, max_pages: Optional[int] = None) -> List[Job]:
        """
        Fetch every page and return all jobs in order.

        All jobs are held in memory; prefer ``stream()`` for large listings.

        Args:
            delay: Seconds to wait between page requests
            max_pages: Stop after this many pages
        """
        return [job async for job in self.stream(delay=delay, max_pages=max_pages)]

    def stream(self, delay: float = DEFAULT_PAGE_DELAY, max_pages: Optional[int] = None) -> JobStream:
        """
        Iterate over the jobs of every page, fetching pages lazily.

        Each call starts an independent walk from page 0.

        Args:
            delay: Seconds to wait between page requests
            max_pages: Stop after this many pages
        """
        return JobStream(self._client, self.build(), delay=delay, max_pages=max_pages)

    async def count(self) -> int:
        """Count matching jobs with a single request, without fetching every page"""
        return await self._client.count_jobs(self.build())

"""
High level client for the CreatorsArea.fr job marketplace API.

Example:
    ```python
    async with CreatorsAreaClient() as client:
        page = await client.list_jobs(JobFilters(category=Category.DESIGNER))
        for job in page.jobs:
            print(job.title, build_job_url(job))
    ```
"""

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple, Union

import httpx
from pydantic import ValidationError as PydanticValidationError

from .core import RetryingTransport
from .exceptions import APIError, ValidationError
from .models import ClientConfig, Job, JobFilters, JobPage, Pagination, Tag, TransportStats
from .utils import build_job_url, filters_to_params, is_valid_job_id, normalize_collection

if TYPE_CHECKING:
    from .query import JobQueryBuilder

logger = logging.getLogger(__name__)

# Process-wide defaults applied beneath per-client options
_global_options: Dict[str, Any] = {}


def configure(**options: Any) -> None:
    """
    Set default options for every client created afterwards.

    Accepts the same keyword arguments as ClientConfig. Options passed to a
    client explicitly take precedence.

    Example:
        ```python
        configure(user_agent="my-bot/1.0", min_request_interval=1.0)
        client = CreatorsAreaClient()  # uses the values above
        ```
    """
    ClientConfig(**{**_global_options, **options})
    _global_options.update(options)


class CreatorsAreaClient:
    """
    Async client for the CreatorsArea API.

    Requests are paced, retried on rate limits, server errors and network
    failures, and decoded into pydantic models. Use one client per
    sequential caller; close it with ``aclose()`` or ``async with``.
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        **options: Any,
    ):
        if config is None:
            config = ClientConfig(**{**_global_options, **options})
        elif options:
            config = ClientConfig(**{**config.model_dump(), **options})
        self.config = config
        self._transport_override = transport

        self._http = httpx.AsyncClient(
            timeout=httpx.Timeout(config.timeout),
            transport=transport,
            headers={
                'User-Agent': config.user_agent,
                'Accept': 'application/json',
            },
        )
        self._transport = RetryingTransport(config, self._http)
        self._base_url = config.base_url.rstrip('/')

    async def __aenter__(self) -> "CreatorsAreaClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    def with_options(self, **options: Any) -> "CreatorsAreaClient":
        """
        Create a new client with some options changed.

        The new client has its own connection pool and pacing state.
        """
        return CreatorsAreaClient(
            ClientConfig(**{**self.config.model_dump(), **options}),
            transport=self._transport_override,
        )

    def get_stats(self) -> TransportStats:
        """Get request statistics for this client"""
        return self._transport.get_stats()

    def query(self) -> "JobQueryBuilder":
        """Start a fluent query over the job listing"""
        from .query import JobQueryBuilder
        return JobQueryBuilder(self)

    @staticmethod
    def build_job_url(job_or_slug: Union[Job, str]) -> str:
        return build_job_url(job_or_slug)

    async def list_jobs(self, filters: Optional[JobFilters] = None) -> JobPage:
        """
        Fetch one page of job offers.

        Args:
            filters: Filters to apply; the API's default page is used when
                no page is set

        Returns:
            The jobs of the page and its pagination info

        Raises:
            ValidationError: If the page is negative or the response lacks
                results or pagination
            APIError: If the API answers with a non-2xx status
            NetworkError: On timeout or network failure
        """
        raw_jobs, pagination = await self._fetch_offers(filters)
        jobs = [self._parse(Job, item) for item in raw_jobs]
        return JobPage(jobs=jobs, pagination=pagination)

    async def count_jobs(self, filters: Optional[JobFilters] = None) -> int:
        """
        Count the offers matching the filters.

        Only the first page is requested and job bodies are not decoded.
        """
        filters = (filters or JobFilters()).model_copy(update={'page': 0})
        _, pagination = await self._fetch_offers(filters)
        return pagination.total_items

    async def get_job_by_id(self, job_id: str) -> Optional[Job]:
        """
        Fetch a single job offer.

        Args:
            job_id: The 24 character hexadecimal id of the offer

        Returns:
            The job, or None if the API answers 404

        Raises:
            ValidationError: If job_id is malformed (no request is sent)
            APIError: If the API answers with any other non-2xx status
            NetworkError: On timeout or network failure
        """
        if not is_valid_job_id(job_id):
            raise ValidationError(f"Invalid job id: {job_id!r}", job_id)

        response = await self._transport.execute(f"{self._base_url}/offers/{job_id}")
        if response.status_code == 404:
            logger.debug(f"Job {job_id} not found")
            return None
        self._raise_for_status(response)
        return self._parse(Job, self._decode(response))

    async def list_tags(self) -> List[Tag]:
        """Fetch every tag that can be used to filter offers"""
        response = await self._transport.execute(f"{self._base_url}/tags/offers")
        self._raise_for_status(response)
        data = self._decode(response)
        if not isinstance(data, (dict, list)):
            raise ValidationError("Expected an object of tags from API", data)
        return [self._parse(Tag, item) for item in normalize_collection(data, 'tags')]

    async def _fetch_offers(self, filters: Optional[JobFilters]) -> Tuple[List[Any], Pagination]:
        filters = filters or JobFilters()
        if filters.page is not None and filters.page < 0:
            raise ValidationError(f"Page number must be >= 0, got {filters.page}", filters.page)

        response = await self._transport.execute(
            f"{self._base_url}/offers",
            params=filters_to_params(filters),
        )
        self._raise_for_status(response)
        data = self._decode(response)

        if not isinstance(data, dict) or 'results' not in data or 'pagination' not in data:
            raise ValidationError("Expected results and pagination in API response", data)

        raw_jobs = normalize_collection(data['results'])
        pagination = self._parse(Pagination, data['pagination'])
        return raw_jobs, pagination

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        if not response.is_success:
            raise APIError(
                f"API request failed with status {response.status_code}",
                status_code=response.status_code,
                body=response.text,
            )

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise ValidationError(f"Invalid JSON in API response: {e}", response.text) from e

    @staticmethod
    def _parse(model, data: Any):
        if not isinstance(data, dict):
            raise ValidationError(f"Expected an object for {model.__name__}", data)
        try:
            return model.model_validate(data)
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid {model.__name__} data: {e}", data) from e

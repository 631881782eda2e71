"""
Utility functions for the CreatorsArea client.

This module provides helper functions that can be used independently
of the client classes.
"""

import math
import re
from typing import Any, Dict, List, Optional, Union

from .exceptions import APIError, ValidationError
from .models import JOB_PAGE_URL_PREFIX, MAX_RETRY_AFTER, Job, JobFilters

JOB_ID_PATTERN = re.compile(r'[0-9a-fA-F]{24}')


def is_rate_limit_error(error: Exception) -> bool:
    """
    Determine if an exception is a rate limit rejection from the API.

    The transport already retries 429 responses, so an error seen by the
    caller means the retry budget ran out. Callers can use this to decide
    whether to wait longer and try again.

    Args:
        error: The exception to check

    Returns:
        True if the error is an APIError carrying a 429 status

    Examples:
        ```python
        try:
            page = await client.list_jobs()
        except Exception as e:
            if is_rate_limit_error(e):
                await asyncio.sleep(30)
            else:
                raise
        ```
    """
    return isinstance(error, APIError) and error.status_code == 429


def backoff_delay(retry_delay: float, attempt: int) -> float:
    """Exponential backoff: ``retry_delay * 2 ** attempt`` for attempt 0, 1, 2, ..."""
    return retry_delay * (2 ** attempt)


def parse_retry_after(value: Optional[str], max_delay: float = MAX_RETRY_AFTER) -> Optional[float]:
    """
    Parse a Retry-After header given in seconds, capped at ``max_delay``.

    Returns None when the header is missing or not a number (HTTP-date values
    are not honoured and fall back to exponential backoff).
    """
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    try:
        seconds = float(value)
    except ValueError:
        return None
    if math.isnan(seconds):
        return None
    return min(max(0.0, seconds), max_delay)


def normalize_collection(value: Any, what: str = 'results') -> List[Any]:
    """
    Turn an API collection into a list.

    The API encodes collections either as a JSON array or as an object keyed
    by numeric strings. Objects are read in encounter order.
    """
    if isinstance(value, list):
        return value
    if isinstance(value, dict):
        return list(value.values())
    raise ValidationError(f"Expected {what} to be an array or an object", value)


def is_valid_job_id(job_id: Any) -> bool:
    """Job ids are 24 hexadecimal characters"""
    return isinstance(job_id, str) and JOB_ID_PATTERN.fullmatch(job_id) is not None


def build_job_url(job_or_slug: Union[Job, str]) -> str:
    """
    Build the public URL of a job offer.

    Args:
        job_or_slug: A Job, or the bare slug of an offer

    Returns:
        The creatorsarea.fr page of the offer
    """
    slug = job_or_slug.slug if isinstance(job_or_slug, Job) else job_or_slug
    return JOB_PAGE_URL_PREFIX + slug


def filters_to_params(filters: JobFilters) -> Dict[str, Any]:
    """
    Serialize filters into query parameters.

    Only fields that are set are included. Tags become a list, which httpx
    sends as repeated ``tags=`` parameters.
    """
    params: Dict[str, Any] = {}
    if filters.volunteer is not None:
        params['volunteer'] = 'true' if filters.volunteer else 'false'
    if filters.page is not None:
        params['page'] = str(filters.page)
    if filters.tags:
        params['tags'] = list(filters.tags)
    if filters.kind is not None:
        params['kind'] = filters.kind.value
    if filters.status is not None:
        params['status'] = filters.status.value
    if filters.category is not None:
        params['category'] = filters.category.value
    return params

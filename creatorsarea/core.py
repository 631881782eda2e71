import asyncio
import time
import logging
from typing import Optional, Dict, Any

import httpx

from .exceptions import APIError, NetworkError
from .models import ClientConfig, TransportStats
from .utils import backoff_delay, parse_retry_after

logger = logging.getLogger(__name__)


class PacingGate:
    """
    Enforces a minimum interval between consecutive outbound requests.

    The gate keeps a single "last request" timestamp. Acquiring it waits for
    whatever remains of the interval and then records the current time.
    """

    def __init__(self, min_interval: float = 0):
        self.min_interval = max(0.0, float(min_interval))
        self.last_request_at: Optional[float] = None
        self._lock = asyncio.Lock()

        self.total_wait_time: float = 0
        self.max_wait_time: float = 0

    async def acquire(self) -> float:
        """
        Wait until a request may be sent.

        Returns:
            The number of seconds waited
        """
        async with self._lock:
            wait_time = self._calculate_wait_time(time.time())
            if wait_time > 0:
                logger.debug(f"Pacing requests, waiting for {wait_time:.2f} seconds")
                self.total_wait_time += wait_time
                self.max_wait_time = max(self.max_wait_time, wait_time)
                await asyncio.sleep(wait_time)
            self.last_request_at = time.time()
            return wait_time

    def _calculate_wait_time(self, now: float) -> float:
        if self.last_request_at is None or self.min_interval <= 0:
            return 0
        elapsed = now - self.last_request_at
        return max(0.0, self.min_interval - elapsed)


class RetryingTransport:
    """
    Sends GET requests with pacing, a per-attempt deadline and retries.

    429 responses, 5xx responses and network failures share one retry budget
    of ``max_retries`` retries after the first attempt. Backoff doubles from
    ``retry_delay`` on every retry; a Retry-After header on a 429 overrides it.
    """

    def __init__(self, config: ClientConfig, http: httpx.AsyncClient):
        self.config = config
        self._http = http
        self._gate = PacingGate(config.min_request_interval)
        self._log_level = logging.INFO if config.debug else logging.DEBUG

        # Statistics
        self.total_requests: int = 0
        self.total_retries: int = 0
        self.rate_limit_hits: int = 0

    @property
    def gate(self) -> PacingGate:
        return self._gate

    async def execute(self, url: str, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        """
        Send a GET request, retrying transient failures.

        Args:
            url: Absolute URL to request
            params: Query parameters

        Returns:
            The final response. A 5xx response is returned once retries are
            exhausted; callers turn any non-2xx they do not handle into APIError.

        Raises:
            APIError: If the API keeps answering 429 after all retries
            NetworkError: On a timeout, or a transport failure after all retries
        """
        attempt = 0
        while True:
            await self._gate.acquire()
            self.total_requests += 1
            logger.log(self._log_level, f"GET {url} params={params} (attempt {attempt + 1})")

            try:
                response = await asyncio.wait_for(
                    self._http.get(url, params=params),
                    timeout=self.config.timeout,
                )
            except (asyncio.TimeoutError, httpx.TimeoutException) as e:
                if self.config.retry_on_timeout and attempt < self.config.max_retries:
                    await self._backoff(attempt, f"timeout on {url}")
                    attempt += 1
                    continue
                raise NetworkError(f"Request timeout after {self.config.timeout}s", cause=e) from e
            except httpx.TransportError as e:
                if attempt < self.config.max_retries:
                    await self._backoff(attempt, f"network error on {url}: {e}")
                    attempt += 1
                    continue
                logger.warning(f"Giving up on {url} after {attempt + 1} attempts: {e}")
                raise NetworkError(f"Network error: {e}", cause=e) from e

            status = response.status_code
            logger.log(self._log_level, f"GET {url} -> {status}")

            if status == 429:
                self.rate_limit_hits += 1
                if attempt < self.config.max_retries:
                    retry_after = parse_retry_after(response.headers.get('Retry-After'))
                    if retry_after is not None:
                        logger.info(f"Rate limited on {url}, Retry-After {retry_after} seconds")
                    else:
                        logger.info(f"Rate limited on {url}")
                    await self._backoff(attempt, "rate limited", retry_after)
                    attempt += 1
                    continue
                logger.warning(f"Rate limit retries exhausted for {url} after {attempt + 1} attempts")
                raise APIError(
                    f"API request failed with status {status}",
                    status_code=status,
                    body=response.text,
                )

            if 500 <= status < 600 and attempt < self.config.max_retries:
                await self._backoff(attempt, f"server error {status} on {url}")
                attempt += 1
                continue

            return response

    async def _backoff(self, attempt: int, reason: str, delay: Optional[float] = None) -> None:
        if delay is None:
            delay = backoff_delay(self.config.retry_delay, attempt)
        logger.debug(f"Retry {attempt + 1}/{self.config.max_retries} in {delay:.2f} seconds ({reason})")
        self.total_retries += 1
        await asyncio.sleep(delay)

    def get_stats(self) -> TransportStats:
        """Get current transport statistics"""
        return TransportStats(
            total_requests=self.total_requests,
            total_retries=self.total_retries,
            rate_limit_hits=self.rate_limit_hits,
            total_wait_time=self._gate.total_wait_time,
            max_wait_time=self._gate.max_wait_time,
            last_request_at=self._gate.last_request_at,
        )

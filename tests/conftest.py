from unittest.mock import AsyncMock, patch

import httpx
import pytest
import pytest_asyncio

from creatorsarea import client as client_module
from creatorsarea.client import CreatorsAreaClient

BASE_URL = 'https://creatorsarea.test/api'


@pytest.fixture(autouse=True)
def reset_global_options():
    """Make sure configure() calls do not leak between tests."""
    client_module._global_options.clear()
    yield
    client_module._global_options.clear()


@pytest.fixture
def mock_time():
    """Mock time.time() for deterministic pacing tests."""
    current_time = 1000.0

    with patch('time.time') as mock_time_mod:
        def time_side_effect():
            return current_time

        mock_time_mod.side_effect = time_side_effect

        # Helper to advance time
        def advance(seconds):
            nonlocal current_time
            current_time += seconds
            return current_time

        mock_time_mod.advance = advance
        yield mock_time_mod


@pytest.fixture
def mock_sleep():
    """Fixture to mock asyncio.sleep to avoid actual waiting in tests."""
    with patch('asyncio.sleep', new_callable=AsyncMock) as mock:
        yield mock


def make_job(index, **overrides):
    job = {
        '_id': f'{index:024x}',
        'title': f'Job {index}',
        'slug': f'job-{index}',
        'content': 'Looking for someone',
        'author': {'_id': 'a' * 24, 'avatar': 'abc', 'discord_id': '1234'},
        'pricing': {'value': 50, 'volunteer': False, 'negotiable': True},
        'kind': 'DEVELOPER',
        'status': 'ACTIVE',
        'deadline': None,
        '_tags': [{'_id': 'b' * 24, 'name': 'Python', 'image': 'py.png'}],
        'threads': [],
        'alerts': [{'alert': 'new', 'messageid': '42', '_id': 'c' * 24}],
        'createdAt': '2024-01-01T10:00:00.000Z',
        'updatedAt': '2024-01-02T10:00:00.000Z',
    }
    job.update(overrides)
    return job


class FakeOffersAPI:
    """
    In-memory stand-in for the offers listing.

    Serves ``total_pages`` pages of ``per_page`` jobs and records every
    request it receives.
    """

    def __init__(self, total_pages=3, per_page=2, keyed_results=False):
        self.total_pages = total_pages
        self.per_page = per_page
        self.keyed_results = keyed_results
        self.requests = []

    @property
    def total_items(self):
        return self.total_pages * self.per_page

    @property
    def pages_requested(self):
        return [int(r.url.params.get('page', 0)) for r in self.requests]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        page = int(request.url.params.get('page', 0))
        start = page * self.per_page
        jobs = [make_job(i) for i in range(start, start + self.per_page)] if page < self.total_pages else []
        results = {str(i): job for i, job in enumerate(jobs)} if self.keyed_results else jobs
        return httpx.Response(200, json={
            'results': results,
            'pagination': {
                'totalItems': self.total_items,
                'totalPages': self.total_pages,
                'page': page,
            },
        })


@pytest.fixture
def offers_api():
    return FakeOffersAPI()


@pytest.fixture
def make_offers_api():
    return FakeOffersAPI


@pytest.fixture
def job_payload():
    """Factory for raw job JSON as the API returns it."""
    return make_job


@pytest_asyncio.fixture
async def make_client():
    """Factory building clients backed by an httpx.MockTransport handler, closed on teardown."""
    clients = []

    def factory(handler, **options):
        options.setdefault('base_url', BASE_URL)
        options.setdefault('min_request_interval', 0)
        options.setdefault('retry_delay', 1.0)
        client = CreatorsAreaClient(transport=httpx.MockTransport(handler), **options)
        clients.append(client)
        return client

    yield factory

    for client in clients:
        await client.aclose()


"""
Async client for the CreatorsArea.fr job marketplace API.
"""

from importlib.metadata import PackageNotFoundError, version

from .core import PacingGate, RetryingTransport
from .models import (
    Alert,
    Author,
    Category,
    ClientConfig,
    Job,
    JobFilters,
    JobKind,
    JobPage,
    JobStatus,
    Pagination,
    Pricing,
    Tag,
    TransportStats,
)
from .client import CreatorsAreaClient, configure
from .query import JobQueryBuilder, JobStream
from .exceptions import APIError, CreatorsAreaError, NetworkError, ValidationError
from .utils import build_job_url, is_rate_limit_error

try:
    __version__ = version("creatorsarea")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    'CreatorsAreaClient',
    'configure',
    'JobQueryBuilder',
    'JobStream',
    'PacingGate',
    'RetryingTransport',
    'ClientConfig',
    'TransportStats',
    'Job',
    'JobPage',
    'JobFilters',
    'Pagination',
    'Tag',
    'Author',
    'Pricing',
    'Alert',
    'Category',
    'JobKind',
    'JobStatus',
    'CreatorsAreaError',
    'APIError',
    'NetworkError',
    'ValidationError',
    'build_job_url',
    'is_rate_limit_error',
]

"""
Data models for the CreatorsArea client.

Payload models mirror the JSON returned by the API. They ignore unknown keys
and default missing ones, so only shape-presence is enforced by the client.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

# Constants
DEFAULT_BASE_URL = "https://creatorsarea.fr/api"
DEFAULT_USER_AGENT = "creatorsarea-py/0.1.0"
DEFAULT_TIMEOUT = 10.0
DEFAULT_MAX_RETRIES = 3
DEFAULT_RETRY_DELAY = 1.0
DEFAULT_MIN_REQUEST_INTERVAL = 0.5
DEFAULT_PAGE_DELAY = 0.5
MAX_RETRY_AFTER = 60.0
JOB_PAGE_URL_PREFIX = "https://creatorsarea.fr/offres/"


class Category(str, Enum):
    """Job listing category"""
    DEVELOPER = "DEVELOPER"
    DESIGNER = "DESIGNER"
    EDITOR = "EDITOR"
    TEAM = "TEAM"


class JobKind(str, Enum):
    """Kind of job offer"""
    TEAM = "TEAM"
    DEVELOPER = "DEVELOPER"
    DESIGNER = "DESIGNER"
    EDITOR = "EDITOR"


class JobStatus(str, Enum):
    """Publication status of a job offer"""
    ACTIVE = "ACTIVE"
    CLOSED = "CLOSED"
    DRAFT = "DRAFT"


class ClientConfig(BaseModel):
    """
    Configuration for a CreatorsArea client.

    All durations are in seconds.

    Attributes:
        base_url: Root URL of the API
        user_agent: Identification string sent as the User-Agent header
        timeout: Deadline for a single HTTP attempt
        max_retries: Retries allowed after the first attempt
        retry_delay: Initial backoff delay, doubled on every retry
        min_request_interval: Minimum gap between two outbound requests
        debug: Log every request and response at INFO level
        retry_on_timeout: Treat timeouts like other network errors and retry them
    """
    model_config = ConfigDict(frozen=True)

    base_url: str = DEFAULT_BASE_URL
    user_agent: str = DEFAULT_USER_AGENT
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    max_retries: int = Field(default=DEFAULT_MAX_RETRIES, ge=0)
    retry_delay: float = Field(default=DEFAULT_RETRY_DELAY, ge=0)
    min_request_interval: float = Field(default=DEFAULT_MIN_REQUEST_INTERVAL, ge=0)
    debug: bool = False
    retry_on_timeout: bool = False


class TransportStats(BaseModel):
    """Statistics about requests sent through a client's transport"""
    total_requests: int = 0
    total_retries: int = 0
    rate_limit_hits: int = 0
    total_wait_time: float = 0
    max_wait_time: float = 0
    last_request_at: Optional[float] = None


class _Payload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class Tag(_Payload):
    """A tag that can be attached to job offers"""
    id: str = Field(default="", alias="_id")
    name: str = ""
    image: Optional[str] = None
    is_active: Optional[bool] = Field(default=None, alias="isActive")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")


class Author(_Payload):
    id: str = Field(default="", alias="_id")
    avatar: Optional[str] = None
    discord_id: Optional[str] = None


class Pricing(_Payload):
    value: float = 0
    volunteer: bool = False
    negotiable: bool = False


class Alert(_Payload):
    alert: str = ""
    messageid: Optional[str] = None
    id: Optional[str] = Field(default=None, alias="_id")


class Job(_Payload):
    """
    A job offer as returned by the API.

    ``tags`` holds full Tag records when the API expands them, or bare tag ids
    when it does not.
    """
    id: str = Field(default="", alias="_id")
    title: str = ""
    slug: str = ""
    content: str = ""
    author: Optional[Author] = None
    pricing: Optional[Pricing] = None
    kind: Optional[str] = None
    status: Optional[str] = None
    deadline: Optional[str] = None
    tags: List[Union[Tag, str]] = Field(default_factory=list, alias="_tags")
    threads: List[str] = Field(default_factory=list)
    thread: Optional[str] = None
    alerts: List[Alert] = Field(default_factory=list)
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")

    @property
    def url(self) -> str:
        """Public page of this offer on creatorsarea.fr"""
        return JOB_PAGE_URL_PREFIX + self.slug


class Pagination(_Payload):
    """Pagination block returned alongside each page of jobs"""
    total_items: int = Field(default=0, alias="totalItems")
    total_pages: int = Field(default=0, alias="totalPages")
    page: int = 0


class JobPage(BaseModel):
    """One page of jobs with its pagination info"""
    jobs: List[Job]
    pagination: Pagination


class JobFilters(BaseModel):
    """
    Filters applied to a job listing request.

    Every field is optional; only the fields that are set are sent.
    """
    model_config = ConfigDict(validate_assignment=True)

    volunteer: Optional[bool] = None
    page: Optional[int] = None
    tags: Optional[List[str]] = None
    kind: Optional[JobKind] = None
    status: Optional[JobStatus] = None
    category: Optional[Category] = None

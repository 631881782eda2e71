"""
Exception hierarchy for the CreatorsArea client.

Every error raised by the client derives from CreatorsAreaError so callers
can catch the whole family, or branch on the concrete kind.
"""

from typing import Any, Optional


class CreatorsAreaError(Exception):
    """Base exception for all CreatorsArea client errors."""


class ValidationError(CreatorsAreaError):
    """
    Raised when input or a decoded response does not have the expected shape.

    This is raised before any network activity for malformed caller input
    (negative page, malformed job id) and after decoding for responses that
    are missing required fields. It is never retried.
    """

    def __init__(self, message: str, data: Any = None):
        super().__init__(message)
        self.data = data


class APIError(CreatorsAreaError):
    """
    Raised when the API answers with a non-2xx status after any retries.

    Attributes:
        status_code: The HTTP status code of the final response
        body: The raw response body text
    """

    def __init__(self, message: str, status_code: Optional[int] = None, body: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class NetworkError(CreatorsAreaError):
    """Raised on a timeout or a transport failure once retries are exhausted."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause

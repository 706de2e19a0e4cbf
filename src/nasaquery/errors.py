"""Exception hierarchy shared by every endpoint."""
from __future__ import annotations

from typing import Optional


class NASAQueryError(Exception):
    """Base class for all errors raised by nasaquery."""


class ValidationError(NASAQueryError, ValueError):
    """Raised for bad caller input, before any request is sent."""


class RequestError(NASAQueryError):
    """Raised when the HTTP transport cannot complete a request."""


class ApiError(NASAQueryError):
    """Raised when the NASA API returns a non-success status."""

    def __init__(self, status_code: int, detail: Optional[str] = None) -> None:
        self.status_code = status_code
        self.detail = detail
        message = f"API request failed: {status_code}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class MalformedResponseError(NASAQueryError):
    """Raised when a response body is not JSON or not the expected shape."""


class EmptyResultError(NASAQueryError):
    """Raised when a well-formed response carries no usable records."""

"""
Custom exceptions for the Torneopal API client.
"""
from __future__ import annotations


class APIClientError(RuntimeError):
    """
    A request to the API failed.
    """

    def __init__(self, message: str, *, status_code: int | None = None, endpoint: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.endpoint = endpoint


class APIRateLimitError(APIClientError):
    """
    Raised when a call is refused by the local rate limiter or the API returns 429.
    """


class APINotFoundError(APIClientError):
    """
    Raised when a requested resource is not found.
    """


class APIResponseError(APIClientError):
    """
    Raised when a successful HTTP response carries an API-level error status.
    """

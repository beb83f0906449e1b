"""
HTTP utilities for the Torneopal API client.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

import requests
from requests import Response
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .exceptions import APIClientError, APINotFoundError, APIRateLimitError


class HTTPClient:
    """
    Thin wrapper around requests.Session with retries and error mapping.
    """

    def __init__(
        self,
        base_url: str,
        *,
        headers: Optional[Dict[str, str]] = None,
        timeout: int = 30,
        max_retries: int = 2,
        backoff_factor: float = 0.5,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()
        # 429 is left to the caller so a remote throttle surfaces as APIRateLimitError.
        retry = Retry(
            total=max_retries,
            read=max_retries,
            connect=max_retries,
            backoff_factor=backoff_factor,
            status_forcelist=(500, 502, 503, 504),
            allowed_methods=("GET",),
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry)
        self.session.mount("https://", adapter)
        self.session.mount("http://", adapter)
        self.session.headers.update({"Accept": "application/json"})
        if headers:
            self.session.headers.update(headers)

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Perform an HTTP request and return decoded JSON.
        """
        url = f"{self.base_url}/{path.lstrip('/')}"
        try:
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise APIClientError(str(exc), endpoint=path) from exc

        self._raise_for_status(response, path)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise APIClientError(
                f"Failed to parse JSON response from {path}.", endpoint=path
            ) from exc

    @staticmethod
    def _error_detail(response: Response) -> Optional[str]:
        try:
            payload = response.json()
        except ValueError:
            return None
        if not isinstance(payload, dict):
            return None
        error = payload.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if payload.get("message"):
            return str(payload["message"])
        if isinstance(error, str) and error:
            return error
        return None

    def _raise_for_status(self, response: Response, path: str) -> None:
        """
        Map HTTP errors to custom exceptions.
        """
        if 200 <= response.status_code < 300:
            return
        status = response.status_code
        message = f"API call to {path} failed. Status: {status}"
        detail = self._error_detail(response)
        if detail:
            message = f"{message} - {detail}"
        if status == 404:
            raise APINotFoundError(message, status_code=status, endpoint=path)
        if status == 429:
            raise APIRateLimitError(message, status_code=status, endpoint=path)
        raise APIClientError(message, status_code=status, endpoint=path)

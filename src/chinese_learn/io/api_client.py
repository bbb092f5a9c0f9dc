"""REST transport for the chapters/vocabularies/dialogues backend."""

import logging
from typing import Any, Optional

import requests

logger = logging.getLogger(__name__)


class ApiError(RuntimeError):
    """Raised for any failed backend request.

    Attributes:
        message: Human-readable message; the backend's structured
            ``{"error": ...}`` text when it sent one.
        status_code: HTTP status, or None when no response arrived.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ApiClient:
    """Thin wrapper over a requests session bound to one API root.

    Every request carries a bounded timeout. Responses are decoded from
    JSON; failures are raised as ApiError rather than returned.
    """

    DEFAULT_TIMEOUT = 10.0

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        if not base_url:
            raise ValueError("API base URL must not be empty")
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session if session is not None else requests.Session()

    def url_for(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def get(self, path: str) -> Any:
        return self._request("GET", path)

    def post(self, path: str, **kwargs) -> Any:
        return self._request("POST", path, **kwargs)

    def put(self, path: str, **kwargs) -> Any:
        return self._request("PUT", path, **kwargs)

    def delete(self, path: str) -> Any:
        return self._request("DELETE", path)

    def close(self) -> None:
        self.session.close()

    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = self.url_for(path)
        logger.debug("%s %s", method, url)
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.Timeout as e:
            raise ApiError(f"Request timed out after {self.timeout:g} seconds") from e
        except requests.RequestException as e:
            raise ApiError(str(e) or f"{method} {path} failed") from e

        if not response.ok:
            message = self._error_message(response)
            logger.warning("%s %s -> %s: %s", method, url, response.status_code, message)
            raise ApiError(message, status_code=response.status_code)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise ApiError(f"Invalid JSON in response from {path}", status_code=response.status_code) from e

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        """Prefer the backend's ``error`` field over a generic status message."""
        try:
            payload = response.json()
        except ValueError:
            payload = None
        if isinstance(payload, dict):
            error = payload.get("error")
            if isinstance(error, str) and error.strip():
                return error
        return f"Request failed with status code {response.status_code}"

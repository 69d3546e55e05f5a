"""HTTP transport for the Grafana REST API."""

import time
from typing import Optional

import requests

from grafanabackup.errors import TransportError

RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}


class GrafanaClient:
    """Issues authenticated GET requests with consistent error handling.

    The bearer credential is fixed at construction time; every backup run
    builds its own client so concurrent runs never share credentials.
    """

    def __init__(
        self,
        credential: str,
        logger,
        timeout: float = 30.0,
        retry_count: int = 0,
        retry_backoff_seconds: float = 2.0,
        requests_module=requests,
    ):
        self.logger = logger
        self.timeout = timeout
        self.retry_count = max(0, retry_count)
        self.retry_backoff_seconds = retry_backoff_seconds
        self.requests = requests_module
        self.headers = {
            "Authorization": f"Bearer {credential}",
            "Accept": "application/json",
        }

    def get(self, url: str) -> bytes:
        self.logger.debug("GET %s", url)
        max_attempts = self.retry_count + 1

        for attempt in range(1, max_attempts + 1):
            try:
                response = self.requests.get(url, headers=self.headers, timeout=self.timeout)
                response.raise_for_status()
                return response.content
            except self.requests.RequestException as exc:
                status_code = self._status_code(exc)
                if attempt < max_attempts and self._is_retryable(exc, status_code):
                    self.logger.warning(
                        "Request failed on attempt %s/%s. Retrying in %.1fs: %s (%s)",
                        attempt,
                        max_attempts,
                        self.retry_backoff_seconds,
                        url,
                        exc,
                    )
                    time.sleep(self.retry_backoff_seconds)
                    continue
                raise TransportError(
                    f"GET {url} failed: {exc}",
                    url=url,
                    status_code=status_code,
                ) from exc

    @staticmethod
    def _status_code(exc: Exception) -> Optional[int]:
        response = getattr(exc, "response", None)
        return getattr(response, "status_code", None)

    def _is_retryable(self, exc: Exception, status_code: Optional[int]) -> bool:
        if isinstance(exc, (self.requests.ConnectionError, self.requests.Timeout)):
            return True
        return status_code in RETRYABLE_STATUS_CODES

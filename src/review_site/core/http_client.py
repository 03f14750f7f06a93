"""HTTP access to the content store: timeouts, retries and request pacing."""

import logging
import time
from typing import Any, Dict, Optional

import requests

logger = logging.getLogger(__name__)

USER_AGENT = "review-site/0.1 (+static site builder)"
RETRY_STATUSES = frozenset({429, 500, 502, 503, 504})
MAX_BACKOFF = 8.0


class RetryableHTTPClient:
    """GET-only client used by :class:`~review_site.core.content_store.ContentStore`.

    Throttling and server errors (429, 5xx) and connection failures are retried
    with exponential backoff (``Retry-After`` wins when the server sends one).
    A 404 is not an error here: it returns ``None`` so callers can decide
    whether the missing document matters.

    Args:
        rps: Maximum requests per second (default: 10.0)
        max_retries: Total attempts per request, at least 1 (default: 3)
        timeout: Request timeout in seconds (default: 15)
    """

    def __init__(self, rps: float = 10.0, max_retries: int = 3, timeout: float = 15):
        self.session = requests.Session()
        self.session.headers.update({"User-Agent": USER_AGENT})
        self.attempts = max(1, int(max_retries))
        self.timeout = timeout
        self.min_interval = 1.0 / max(rps, 0.01)
        self._last_request = 0.0

    def _pace(self) -> None:
        wait = self.min_interval - (time.monotonic() - self._last_request)
        if wait > 0:
            time.sleep(wait)
        self._last_request = time.monotonic()

    @staticmethod
    def backoff_seconds(attempt: int, retry_after: Optional[str] = None) -> float:
        """Seconds to wait before retry number *attempt* (0-based)."""
        if retry_after:
            try:
                return max(float(retry_after), 1.0)
            except (TypeError, ValueError):
                pass
        return min(MAX_BACKOFF, 2.0 ** attempt)

    def get_with_retry(
        self,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> Optional[requests.Response]:
        """GET *url*, retrying transient failures.

        Returns:
            The response, or ``None`` when the server answers 404.

        Raises:
            requests.HTTPError: On other 4xx responses, or when retries are
                exhausted on a retryable status
            requests.RequestException: On network errors after the last attempt
        """
        timeout = timeout or self.timeout
        for attempt in range(self.attempts):
            last = attempt == self.attempts - 1
            try:
                self._pace()
                response = self.session.get(url, headers=headers, params=params, timeout=timeout)
            except requests.RequestException as exc:
                if last:
                    raise
                delay = self.backoff_seconds(attempt)
                logger.warning("GET %s failed (%s); retrying in %.1fs", url, exc, delay)
                time.sleep(delay)
                continue

            if response.status_code == 404:
                return None
            if response.status_code in RETRY_STATUSES and not last:
                delay = self.backoff_seconds(attempt, response.headers.get("Retry-After"))
                logger.warning("GET %s returned %s; retrying in %.1fs", url, response.status_code, delay)
                time.sleep(delay)
                continue
            response.raise_for_status()
            return response

    def close(self) -> None:
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

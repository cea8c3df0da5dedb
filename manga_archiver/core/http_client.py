import time
from typing import Any, Optional

import requests
from bs4 import BeautifulSoup
from requests.exceptions import RequestException

from manga_archiver.core.models import RetrievalOptions
from manga_archiver.utils.logger import get_logger
from .exceptions import NetworkError, PayloadError

logger = get_logger(__name__)

USER_AGENT = 'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36'


def is_retryable_status(status_code: int) -> bool:
    """Server errors and 429 Too Many Requests are worth another try."""
    return 500 <= status_code <= 599 or status_code == 429


class HttpClient:
    """
    Rate-limited HTTP client shared by every fetcher.

    Each attempt is preceded by the configured delay. Requests failing with a
    retryable status are retried up to `max_retries` more times; everything
    else fails immediately.
    """

    def __init__(self, options: RetrievalOptions, session: Optional[requests.Session] = None):
        self.delay = options.delay
        self.max_retries = options.max_retries
        self.timeout = options.timeout
        self.session = session or requests.Session()
        self.session.headers.update({'User-Agent': USER_AGENT})

    def fetch_html(self, url: str) -> BeautifulSoup:
        response = self._call(url, {'Accept': 'text/html'})
        try:
            return BeautifulSoup(response.text, 'html.parser')
        except Exception as e:
            logger.error(f"Failed to read HTML from {url}: {e}")
            raise PayloadError(url, str(e)) from e

    def fetch_json(self, url: str) -> Any:
        response = self._call(url, {'Accept': 'application/json'})
        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Failed to read JSON from {url}: {e}")
            raise PayloadError(url, str(e)) from e

    def fetch_bytes(self, url: str, referer_url: str) -> bytes:
        """Downloads raw bytes; some sites reject image requests without a Referer."""
        response = self._call(url, {'Accept': 'image/*', 'Referer': referer_url})
        return response.content

    def _call(self, url: str, headers: dict) -> requests.Response:
        attempt = 0
        while True:
            attempt += 1
            # Don't overload the site.
            time.sleep(self.delay)

            logger.debug(f"GET {url} (attempt {attempt})")
            try:
                response = self.session.get(url, headers=headers, timeout=self.timeout)
            except RequestException as req_err:
                logger.error(f"Request exception occurred while fetching {url}: {req_err}")
                raise NetworkError(url, reason=str(req_err)) from req_err

            status = response.status_code
            if status < 400:
                return response

            if is_retryable_status(status) and attempt <= self.max_retries:
                wait = self._retry_delay(response)
                logger.debug(f"GET {url} failed with status {status}: retry in {int(wait * 1000)} ms")
                time.sleep(wait)
                continue

            logger.error(f"HTTP error occurred while fetching {url} - Status code: {status}")
            raise NetworkError(url, status=status, reason=response.reason)

    def _retry_delay(self, response: requests.Response) -> float:
        """Retry-After (in seconds) when the server sends a usable one, the configured delay otherwise."""
        retry_after = response.headers.get('Retry-After')
        if retry_after is not None:
            try:
                seconds = int(retry_after.strip())
            except ValueError:
                return self.delay
            if seconds >= 0:
                return float(seconds)
        return self.delay

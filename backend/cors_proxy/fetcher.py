"""
Upstream Fetcher

Performs the outbound GET for a proxied URL:
- Origin header set to the target's scheme://host
- Host-specific User-Agent / Accept headers
- Bounded retry on transport errors and 5xx responses (no backoff)
"""

import logging
from typing import Dict, Optional
from urllib.parse import urlsplit

import httpx

from .allow_list import target_host
from .config import MAX_FETCH_ATTEMPTS, FETCH_TIMEOUT_SECONDS
from .errors import ParseError, PermanentError, TransientError, UpstreamIOError

logger = logging.getLogger(__name__)

# The NWS API asks clients to identify themselves and serves DWML on request
IDENTIFIED_HOST = "api.weather.gov"
IDENTIFIED_USER_AGENT = "(WeatherStar 4000+/v1 (https://battaglia.ddns.net/twc; vbguyny@gmail.com)"
IDENTIFIED_ACCEPT = "application/vnd.noaa.dwml+xml"

# Some providers block anything that does not look like a browser
BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/87.0.4280.88 Safari/537.36"
)


def build_headers(url: str) -> Dict[str, str]:
    """Request headers for a target URL."""
    parts = urlsplit(url)
    host = target_host(parts)
    headers = {"Origin": f"{parts.scheme}://{host}"}
    if host == IDENTIFIED_HOST:
        headers["User-Agent"] = IDENTIFIED_USER_AGENT
        headers["Accept"] = IDENTIFIED_ACCEPT
    else:
        headers["User-Agent"] = BROWSER_USER_AGENT
    return headers


class UpstreamFetcher:
    """
    Blocking HTTP fetcher shared by all request threads.

    Usage:
        fetcher = UpstreamFetcher()
        content = fetcher.fetch("https://forecast.weather.gov/...")
        fetcher.close()
    """

    def __init__(
        self,
        max_attempts: int = MAX_FETCH_ATTEMPTS,
        timeout: float = FETCH_TIMEOUT_SECONDS,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.max_attempts = max_attempts
        self.http_client = httpx.Client(
            timeout=timeout,
            follow_redirects=True,
            transport=transport,
        )

    def close(self) -> None:
        """Close HTTP client."""
        self.http_client.close()

    def fetch(self, url: str) -> bytes:
        """
        Fetch a URL, retrying transient failures.

        Returns:
            The full response body of the first 200 response.

        Raises:
            PermanentError: non-200, non-5xx status (not retried)
            TransientError: every attempt failed
            UpstreamIOError: reading the 200 body failed
            ParseError: url is rejected by the HTTP client
        """
        host = target_host(urlsplit(url))
        try:
            request = self.http_client.build_request("GET", url, headers=build_headers(url))
        except httpx.InvalidURL as e:
            raise ParseError(f"parse {url!r}: {e}", host) from e

        for attempt in range(1, self.max_attempts + 1):
            try:
                response = self.http_client.send(request, stream=True)
            except httpx.RequestError as e:  # includes TooManyRedirects
                logger.warning(
                    f"[Fetcher] {host} attempt {attempt}/{self.max_attempts} failed: {e!r}"
                )
                continue

            if response.status_code != httpx.codes.OK:
                response.close()
                status = f"{response.status_code} {response.reason_phrase}".strip()
                if 500 <= response.status_code < 600:
                    logger.warning(
                        f"[Fetcher] {host} attempt {attempt}/{self.max_attempts} got {status}"
                    )
                    continue
                raise PermanentError(host, status)

            try:
                content = response.read()
            except httpx.HTTPError as e:
                raise UpstreamIOError(f"reading {host} response: {e}", host) from e
            finally:
                response.close()

            logger.debug(f"[Fetcher] {host}: {len(content)} bytes on attempt {attempt}")
            return content

        raise TransientError(host, self.max_attempts)

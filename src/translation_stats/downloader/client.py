"""Rate-limited HTTP client for translate.wordpress.org."""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Optional

import aiohttp
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ..utils.logging import get_logger

logger = get_logger(__name__)

# Failures worth another attempt; anything else is returned or raised as is
TRANSIENT_ERRORS = (
    aiohttp.ClientConnectionError,
    aiohttp.ClientPayloadError,
    asyncio.TimeoutError,
)


class ServerError(Exception):
    """The server answered with a 5xx status."""

    def __init__(self, url: str, status: int):
        super().__init__(f"{url} returned HTTP {status}")
        self.url = url
        self.status = status


@dataclass
class HTTPResponse:
    """A fully read HTTP response."""

    url: str
    status: int
    headers: dict[str, str] = field(default_factory=dict)  # lower-cased names
    body: bytes = b""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @property
    def content_type(self) -> Optional[str]:
        """Raw ``Content-Type`` header value."""
        return self.headers.get("content-type")


class RateLimitedClient:
    """HTTP client with polite rate limiting for translate.wordpress.org.

    Every request has an explicit timeout. Connection failures, timeouts and
    5xx answers are retried with exponential backoff; other statuses are
    handed back to the caller.
    """

    def __init__(
        self,
        requests_per_minute: int = 30,
        timeout: float = 30,
        max_retries: int = 3,
        backoff_min: float = 2,
        backoff_max: float = 30,
        user_agent: str = "TranslationStats/1.0 (+https://translate.wordpress.org)",
    ):
        """Initialize the rate-limited client.

        Args:
            requests_per_minute: Maximum requests per minute
            timeout: Total request timeout in seconds
            max_retries: Maximum attempts per request (including the first)
            backoff_min: Minimum wait between attempts in seconds
            backoff_max: Maximum wait between attempts in seconds
            user_agent: User-Agent header for requests
        """
        self.requests_per_minute = requests_per_minute
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.max_retries = max_retries
        self.backoff_min = backoff_min
        self.backoff_max = backoff_max
        self.user_agent = user_agent

        self._min_interval = 60.0 / requests_per_minute
        self._last_request_time: float = 0
        self._lock = asyncio.Lock()
        self._session: Optional[aiohttp.ClientSession] = None

    @classmethod
    def from_config(cls, config) -> "RateLimitedClient":
        """Create a client from a :class:`~translation_stats.config.SyncConfig`."""
        return cls(
            requests_per_minute=config.requests_per_minute,
            timeout=config.timeout,
            max_retries=config.max_retries,
            backoff_min=config.backoff_min,
            backoff_max=config.backoff_max,
            user_agent=config.user_agent,
        )

    async def __aenter__(self) -> "RateLimitedClient":
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def _ensure_session(self) -> None:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=self.timeout,
                headers={"User-Agent": self.user_agent},
            )

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    async def _apply_rate_limit(self) -> None:
        """Wait until the minimum interval since the last request has passed."""
        async with self._lock:
            elapsed = time.monotonic() - self._last_request_time
            if elapsed < self._min_interval:
                wait_time = self._min_interval - elapsed
                logger.debug(f"Rate limiting: waiting {wait_time:.2f}s")
                await asyncio.sleep(wait_time)
            self._last_request_time = time.monotonic()

    async def _fetch_once(self, url: str) -> HTTPResponse:
        await self._ensure_session()
        await self._apply_rate_limit()

        logger.debug(f"Fetching: {url}")

        async with self._session.get(url) as response:
            if response.status >= 500:
                raise ServerError(url, response.status)
            body = await response.read()
            logger.debug(f"Fetched {len(body)} bytes from {url} (HTTP {response.status})")
            return HTTPResponse(
                url=url,
                status=response.status,
                headers={k.lower(): v for k, v in response.headers.items()},
                body=body,
            )

    async def get_response(self, url: str) -> HTTPResponse:
        """Fetch a URL with rate limiting and retries.

        Args:
            url: URL to fetch

        Returns:
            The response, whatever its non-5xx status

        Raises:
            aiohttp.ClientError: If the request keeps failing
            asyncio.TimeoutError: If the request keeps timing out
            ServerError: If the server keeps answering 5xx
        """
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(multiplier=1, min=self.backoff_min, max=self.backoff_max),
            retry=retry_if_exception_type(TRANSIENT_ERRORS + (ServerError,)),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                return await self._fetch_once(url)


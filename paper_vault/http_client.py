"""Shared async HTTP plumbing for the JSON upstreams (OpenAlex, Semantic Scholar)."""

import asyncio
import logging
import time
from typing import Any

import httpx

from .errors import MalformedPayloadError, SourceUnavailableError
from .settings import (
    MAX_RETRIES,
    REQUEST_TIMEOUT_SECONDS,
    RETRY_BACKOFF_FACTOR,
    USER_AGENT,
)

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = (429, 500, 502, 503, 504)


class RateLimiter:
    """Minimum-interval rate limiter."""

    def __init__(self, requests_per_second: float):
        self.requests_per_second = requests_per_second
        self.min_interval = 1.0 / requests_per_second
        self.last_request_time = 0.0
        self._lock = asyncio.Lock()

    async def acquire(self) -> None:
        """Wait until we can make another request."""
        async with self._lock:
            now = time.monotonic()
            time_since_last = now - self.last_request_time
            if time_since_last < self.min_interval:
                await asyncio.sleep(self.min_interval - time_since_last)
            self.last_request_time = time.monotonic()


class AsyncAPIClient:
    """
    Base async client for a JSON API.

    Subclasses set ``source_name`` and add typed endpoint methods on top of
    ``get_json`` / ``post_json``. Every failure surfaces as a
    ``DataSourceError`` subclass so callers only ever catch one family.
    """

    source_name = "http"

    def __init__(
        self,
        base_url: str,
        headers: dict[str, str] | None = None,
        requests_per_second: float = 10.0,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        max_retries: int = MAX_RETRIES,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url
        self.headers = {"User-Agent": USER_AGENT, **(headers or {})}
        self.rate_limiter = RateLimiter(requests_per_second)
        self.timeout = timeout
        self.max_retries = max_retries
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self):
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=self.headers,
            timeout=self.timeout,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError(
                "Client not initialized. Use 'async with' context manager."
            )
        return self._client

    async def _request(
        self,
        method: str,
        url: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """Make a rate-limited request, retrying only when max_retries > 0."""
        attempts = self.max_retries + 1
        last_error: SourceUnavailableError | None = None

        for attempt in range(attempts):
            await self.rate_limiter.acquire()
            logger.debug(f"Request attempt {attempt + 1}/{attempts}: {method} {url}")

            try:
                response = await self.client.request(method, url, **kwargs)
            except httpx.HTTPError as e:
                last_error = SourceUnavailableError(
                    self.source_name, f"Connection error: {e}"
                )
            else:
                if response.status_code < 400:
                    return response

                last_error = SourceUnavailableError(
                    self.source_name,
                    f"HTTP {response.status_code}: {response.text[:200]}",
                    status_code=response.status_code,
                )
                if response.status_code not in RETRYABLE_STATUS_CODES:
                    break

            if attempt + 1 < attempts:
                backoff = RETRY_BACKOFF_FACTOR**attempt
                logger.warning(f"{last_error}, backoff {backoff}s")
                await asyncio.sleep(backoff)

        raise last_error

    def _decode(self, response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise MalformedPayloadError(
                self.source_name, f"Response is not JSON: {e}"
            ) from e

    async def get_json(self, url: str, **kwargs: Any) -> Any:
        """GET and decode a JSON body."""
        return self._decode(await self._request("GET", url, **kwargs))

    async def post_json(self, url: str, **kwargs: Any) -> Any:
        """POST and decode a JSON body."""
        return self._decode(await self._request("POST", url, **kwargs))

"""Catalog GraphQL client with rate limit cooperation."""

import asyncio
from typing import Awaitable, Callable, Optional

import httpx
import structlog
from tenacity import (
    AsyncRetrying,
    RetryError,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from aniorder.config import CatalogConfig, RateLimitConfig
from aniorder.exceptions import CatalogResponseError, CatalogTransportError

logger = structlog.get_logger(__name__)

MEDIA_QUERY = """
query ($id: Int) {
  Media(id: $id) {
    id
    title {
      romaji
      english
      native
    }
    startDate {
      year
      month
      day
    }
    endDate {
      year
      month
      day
    }
    relations {
      edges {
        node {
          id
          type
        }
        relationType
      }
    }
  }
}
"""

RETRY_AFTER_HEADER = "Retry-After"
REMAINING_HEADER = "X-RateLimit-Remaining"

SleepFunc = Callable[[float], Awaitable[None]]


class CatalogClient:
    """Single-request catalog client.

    Every call waits out the server's rate limit directives before returning,
    so at most one request is in flight and the next one is always allowed.
    """

    def __init__(
        self,
        config: Optional[CatalogConfig] = None,
        rate_limit: Optional[RateLimitConfig] = None,
        sleep: SleepFunc = asyncio.sleep,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize catalog client.

        Args:
            config: Catalog endpoint configuration
            rate_limit: Rate limit timings
            sleep: Coroutine used for rate limit pauses
            transport: Optional httpx transport (used by tests)
        """
        self.config = config or CatalogConfig()
        self.rate_limit = rate_limit or RateLimitConfig()
        self.sleep = sleep
        self.request_count = 0
        self.client = httpx.AsyncClient(
            timeout=self.config.timeout_seconds,
            transport=transport,
            headers={"Accept": "application/json"},
        )
        logger.debug("Initialized catalog client", endpoint=self.config.endpoint)

    async def close(self):
        """Close HTTP client."""
        await self.client.aclose()

    async def __aenter__(self) -> "CatalogClient":
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    async def fetch(self, media_id: int) -> dict:
        """Fetch one media node and its relations.

        Args:
            media_id: Catalog identifier

        Returns:
            Decoded response body

        Raises:
            CatalogResponseError: If the body is not a JSON object
            CatalogTransportError: If the endpoint cannot be reached
        """
        if media_id <= 0:
            raise ValueError(f"Media ID must be positive: {media_id}")

        response = await self._post(media_id)
        await self._apply_rate_limit(response.headers)

        logger.debug(
            "Catalog response",
            media_id=media_id,
            status_code=response.status_code,
            body=response.text,
        )

        try:
            body = response.json()
        except ValueError as e:
            raise CatalogResponseError(media_id, f"invalid JSON ({e})") from e

        if not isinstance(body, dict):
            raise CatalogResponseError(media_id, "body is not an object")

        return body

    async def _post(self, media_id: int) -> httpx.Response:
        """Send the media query, retrying transport failures."""
        payload = {"query": MEDIA_QUERY, "variables": {"id": media_id}}

        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self.config.transport_attempts),
                wait=wait_exponential(min=1, max=10),
                retry=retry_if_exception_type(httpx.TransportError),
            ):
                with attempt:
                    self.request_count += 1
                    response = await self.client.post(self.config.endpoint, json=payload)
        except RetryError as e:
            error = e.last_attempt.exception()
            logger.error(
                "Catalog unreachable",
                endpoint=self.config.endpoint,
                media_id=media_id,
                error=str(error),
            )
            raise CatalogTransportError(f"Catalog unreachable: {error}") from error

        return response

    async def _apply_rate_limit(self, headers: httpx.Headers):
        """Sleep according to the server's rate limit headers.

        Rules are checked in priority order: Retry-After, then a missing
        remaining counter, then an exhausted counter.
        """
        retry_after = _int_header(headers, RETRY_AFTER_HEADER)
        if retry_after is not None:
            wait = retry_after + self.rate_limit.retry_after_buffer_seconds
            logger.info("Rate limited, waiting", seconds=wait, retry_after=retry_after)
            await self.sleep(wait)
            return

        remaining = _int_header(headers, REMAINING_HEADER)
        if remaining is None:
            wait = self.rate_limit.missing_header_wait_seconds
            logger.debug("Rate limit header missing, waiting", seconds=wait)
            await self.sleep(wait)
            return

        logger.debug("Rate limit remaining", remaining=remaining)

        if remaining == 0:
            wait = (
                self.rate_limit.exhausted_wait_seconds
                + self.rate_limit.exhausted_buffer_seconds
            )
            logger.info("Rate limit exhausted, waiting", seconds=wait)
            await self.sleep(wait)


def _int_header(headers: httpx.Headers, name: str) -> Optional[int]:
    """Read an integer header, treating unparsable values as missing."""
    value = headers.get(name)
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        logger.warning("Ignoring malformed rate limit header", header=name, value=value)
        return None

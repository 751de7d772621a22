import json
from typing import Any, Dict, Optional

import httpx
from loguru import logger
from tenacity import (
    AsyncRetrying,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)

from team_pokedex.config.settings import settings

# Define common HTTP status codes that warrant a retry
RETRYABLE_STATUS_CODES = {408, 429, 500, 502, 503, 504}


class ApiClientError(Exception):
    """Custom exception for reference API errors."""

    pass


class NotFoundError(ApiClientError):
    """Exception raised when the API has no such resource (404)."""

    pass


class TransientApiError(ApiClientError):
    """Exception raised for failures that may succeed on a later attempt."""

    pass


class BaseApiClient:
    """Shared JSON-over-HTTP plumbing for the reference APIs."""

    service_name: str = "api"

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.client = httpx.AsyncClient(
            transport=transport,
            timeout=httpx.Timeout(settings.request_timeout),
            follow_redirects=True,
            max_redirects=settings.max_redirects,
            headers={
                "User-Agent": settings.user_agent,
                "Accept": "application/json",
                "Accept-Encoding": "identity",
            },
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def get_json(self, url: str, headers: Optional[Dict[str, str]] = None) -> Any:
        """GETs ``url`` and decodes its JSON body.

        Transient failures are retried up to ``settings.request_attempts``
        times in total; every other failure raises immediately.

        Raises:
            NotFoundError: The resource does not exist.
            TransientApiError: Network error, timeout, 408/429/5xx.
            ApiClientError: Any other non-2xx status, a redirect loop or an
                invalid JSON body.
        """
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(settings.request_attempts),
            wait=wait_exponential(multiplier=1, min=1, max=10),
            retry=retry_if_exception_type(TransientApiError),
            reraise=True,
        ):
            with attempt:
                response = await self._make_request(url, headers=headers)

        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.debug(f"Raw response content from {url}: {response.text[:200]!r}")
            raise ApiClientError(f"Invalid JSON from {self.service_name} at {url}") from e

    async def _make_request(
        self, url: str, headers: Optional[Dict[str, str]] = None
    ) -> httpx.Response:
        """Makes a single GET request, redirects included."""
        logger.debug(f"GET {url}")
        try:
            response = await self.client.get(url, headers=headers)
        except httpx.TooManyRedirects as e:
            logger.error(
                f"Gave up on {url} after {settings.max_redirects} redirects ({self.service_name})"
            )
            raise ApiClientError(f"Too many redirects for {url}") from e
        except httpx.RequestError as e:
            # Network errors, timeouts etc.
            logger.warning(f"Request error for {self.service_name} at {url}: {e!r}")
            raise TransientApiError(f"Request to {url} failed: {e!r}") from e

        if response.is_success:
            logger.debug(f"Request successful: {response.status_code} for {url}")
            return response

        status = response.status_code
        if status == 404:
            raise NotFoundError(f"{self.service_name} has no resource at {url} (404)")
        if status in RETRYABLE_STATUS_CODES:
            logger.warning(f"{self.service_name} answered {status} for {url}")
            raise TransientApiError(f"Request failed with status {status}")
        # Redirects without a Location header end up here as well
        raise ApiClientError(f"Request failed with status {status}")

    async def close(self):
        """Closes the underlying HTTP client."""
        await self.client.aclose()
        logger.debug(f"Closed HTTP client for {self.service_name}")

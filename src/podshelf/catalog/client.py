"""HTTP client for the public podcast API."""

import logging
from typing import Any

import httpx
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from podshelf.catalog.models import Show, ShowDetail
from podshelf.utils.errors import (
    APIResponseError,
    NetworkConnectionError,
    NetworkTimeoutError,
)
from podshelf.utils.retry import RetryConfig, call_with_retry, classify_http_error

logger = logging.getLogger(__name__)

DEFAULT_LIST_URL = "https://podcast-api.netlify.app/shows"
DEFAULT_DETAIL_URL = "https://podcast-api.netlify.app/id/{id}"

_SHOW_LIST = TypeAdapter(list[Show])


class PodcastAPIClient:
    """Client for the show list and show detail endpoints.

    Example:
        async with PodcastAPIClient() as client:
            shows = await client.fetch_shows()
            detail = await client.fetch_show_detail(shows[0].id)
    """

    def __init__(
        self,
        list_url: str = DEFAULT_LIST_URL,
        detail_url: str = DEFAULT_DETAIL_URL,
        timeout: float = 30.0,
        retry_config: RetryConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            list_url: URL of the show list endpoint
            detail_url: Detail endpoint template with an ``{id}`` placeholder
            timeout: Request timeout in seconds
            retry_config: Retry policy (single attempt if None)
            transport: Optional httpx transport, used by tests
        """
        self.list_url = list_url
        self.detail_url = detail_url
        self.retry_config = retry_config
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def __aenter__(self) -> "PodcastAPIClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def fetch_shows(self) -> list[Show]:
        """Fetch every show from the list endpoint.

        Returns:
            Shows in the order the API returned them

        Raises:
            NetworkError: Connection failure or timeout
            APIError: Non-success status or malformed body
        """
        data = await call_with_retry(self._get_json, self.list_url, config=self.retry_config)
        try:
            shows = _SHOW_LIST.validate_python(data)
        except PydanticValidationError as e:
            raise APIResponseError(f"Unexpected show list from {self.list_url}: {e}") from e

        logger.debug(f"Fetched {len(shows)} shows")
        return shows

    async def fetch_show_detail(self, show_id: str) -> ShowDetail:
        """Fetch seasons and episodes for one show.

        Args:
            show_id: Show identifier

        Returns:
            ShowDetail with per-season episode counts

        Raises:
            ShowNotFoundError: Unknown show id
            NetworkError: Connection failure or timeout
            APIError: Other non-success status or malformed body
        """
        url = self.detail_url.format(id=show_id)
        data = await call_with_retry(self._get_json, url, config=self.retry_config)
        try:
            detail = ShowDetail.model_validate(data)
        except PydanticValidationError as e:
            raise APIResponseError(f"Unexpected show detail from {url}: {e}") from e

        logger.debug(f"Fetched detail for show {show_id}: {len(detail.seasons)} season(s)")
        return detail

    async def _get_json(self, url: str) -> Any:
        """GET ``url`` and decode the JSON body."""
        try:
            response = await self._client.get(url)
        except httpx.TimeoutException as e:
            raise NetworkTimeoutError(f"Request to {url} timed out") from e
        except httpx.TransportError as e:
            raise NetworkConnectionError(f"Could not connect to {url}: {e}") from e
        except httpx.HTTPError as e:
            # Undecodable bodies, redirect loops and the like
            raise NetworkConnectionError(f"Request to {url} failed: {e}") from e

        if not response.is_success:
            raise classify_http_error(response.status_code, url)

        try:
            return response.json()
        except ValueError as e:
            raise APIResponseError(f"Invalid JSON from {url}: {e}") from e

"""Shared async HTTP access to upstream origins.

Wraps a single ``httpx.AsyncClient`` and converts transport failures and
error statuses into ``UpstreamFetchError`` so callers only deal with the
service's own error taxonomy.
"""

import logging
from typing import Any

import httpx

from ogp_service.config import get_settings
from ogp_service.errors import UpstreamFetchError

logger = logging.getLogger(__name__)


class HttpFetcher:
    """Async HTTP client for feeds, pages and font files.

    Example:
        ```python
        fetcher = HttpFetcher.create()
        xml = await fetcher.get_text("https://kq5.jp/rss.xml")
        await fetcher.close()
        ```
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
    ) -> None:
        """Initialize the fetcher.

        Args:
            client: Pre-built client (tests pass one with a MockTransport).
            timeout: Request timeout in seconds. Defaults to settings.
        """
        self._client = client
        self._timeout = timeout or get_settings().http_timeout

    @classmethod
    def create(cls, timeout: float | None = None) -> "HttpFetcher":
        """Factory method to create HttpFetcher with defaults."""
        return cls(timeout=timeout)

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client.

        Returns:
            The httpx.AsyncClient instance
        """
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                follow_redirects=True,
                limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
            )
        return self._client

    async def get(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        allow_not_found: bool = False,
    ) -> httpx.Response | None:
        """Issue a GET request.

        Args:
            url: Absolute URL
            params: Optional query parameters
            allow_not_found: Return None on 404 instead of failing

        Returns:
            The successful response, or None for an allowed 404

        Raises:
            UpstreamFetchError: On transport failure or error status
        """
        try:
            response = await self.client.get(url, params=params)
            if allow_not_found and response.status_code == httpx.codes.NOT_FOUND:
                return None
            response.raise_for_status()
            return response
        except httpx.HTTPStatusError as e:
            raise UpstreamFetchError(
                f"Upstream returned {e.response.status_code} for {_redact(url)}"
            ) from e
        except httpx.HTTPError as e:
            raise UpstreamFetchError(f"Upstream request failed for {_redact(url)}: {e}") from e

    async def get_bytes(self, url: str, params: dict[str, Any] | None = None) -> bytes:
        """GET a URL and return the body bytes."""
        response = await self.get(url, params=params)
        return response.content  # type: ignore[union-attr]

    async def get_text(self, url: str, allow_not_found: bool = False) -> str | None:
        """GET a URL and return the decoded body, or None for an allowed 404."""
        response = await self.get(url, allow_not_found=allow_not_found)
        return None if response is None else response.text

    async def get_json(self, url: str, params: dict[str, Any] | None = None) -> Any:
        """GET a URL and decode its JSON body.

        Raises:
            UpstreamFetchError: On fetch failure or invalid JSON
        """
        response = await self.get(url, params=params)
        try:
            return response.json()  # type: ignore[union-attr]
        except ValueError as e:
            raise UpstreamFetchError(f"Invalid JSON from {_redact(url)}") from e

    async def close(self) -> None:
        """Close the async HTTP client.

        Should be called when shutting down the application.
        """
        if self._client is not None:
            await self._client.aclose()
            self._client = None


def _redact(url: str) -> str:
    # Credentials travel as query params; keep them out of messages and logs.
    return url.split("?", 1)[0]

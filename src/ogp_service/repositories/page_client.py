"""Per-item page client.

Fetches a single post page by slug and hands the markup to a
PageExtractor. A missing page or an unrecognized structure yields None.
"""

from urllib.parse import quote

from ogp_service.entities import PostRecord
from ogp_service.protocols import PageExtractor

from .http_fetcher import HttpFetcher
from .page_extractor import XPathPageExtractor


class PageClient:
    """Looks up one post page by slug."""

    def __init__(
        self,
        fetcher: HttpFetcher,
        url_template: str,
        extractor: PageExtractor | None = None,
    ) -> None:
        """Initialize the page client.

        Args:
            fetcher: Shared HTTP fetcher
            url_template: Page URL with a ``{slug}`` placeholder
            extractor: Page structure extractor. Defaults to XPathPageExtractor.
        """
        self._fetcher = fetcher
        self._url_template = url_template
        self._extractor = extractor or XPathPageExtractor()

    def page_url(self, slug: str) -> str:
        return self._url_template.format(slug=quote(slug, safe=""))

    async def fetch(self, slug: str) -> PostRecord | None:
        """Fetch and extract a post page.

        Raises:
            UpstreamFetchError: On transport failure or a non-404 error status
        """
        url = self.page_url(slug)
        html = await self._fetcher.get_text(url, allow_not_found=True)
        if html is None:
            return None
        return self._extractor.extract(html, slug=slug, url=url)

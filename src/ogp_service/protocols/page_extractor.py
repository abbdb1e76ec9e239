"""Page extraction protocol.

Per-item pages have no stable machine-readable format, so the structural
knowledge needed to read one lives behind this interface and can be
replaced when the upstream markup changes.
"""

from typing import Protocol, runtime_checkable

from ogp_service.entities import PostRecord


@runtime_checkable
class PageExtractor(Protocol):
    """Protocol for HTML page to PostRecord extraction."""

    def extract(self, html: str, slug: str, url: str) -> PostRecord | None:
        """Extract a post record from a page.

        Args:
            html: Raw page markup
            slug: Slug the page was requested for
            url: URL the page was fetched from

        Returns:
            The record, or None when the page structure is not recognized
        """
        ...

"""Metadata resolution service.

Finds the PostRecord for a (slug, date) pair. The upstream feed can lag
behind freshly published or edited posts, so lookups escalate in stages
and pay for a fresh fetch only when the cheaper stage misses:

1. scan the cached feed index (fetching it if nothing is cached)
2. scan a freshly fetched index
3. look the slug up on its own page, cached copy first, then fresh
"""

import logging

from ogp_service.entities import PostRecord
from ogp_service.errors import UpstreamFetchError
from ogp_service.repositories import FeedClient, PageClient
from ogp_service.utils import normalize_date

from .asset_cache import AssetCache

logger = logging.getLogger(__name__)


class MetadataResolver:
    """Resolves post records with staged cache fallback.

    Example:
        ```python
        resolver = MetadataResolver(cache, FeedClient(fetcher), "https://kq5.jp/rss.xml")
        post = await resolver.resolve_record("hello-world", "2024-01-05")
        ```
    """

    def __init__(
        self,
        cache: AssetCache,
        feed: FeedClient,
        feed_url: str,
        pages: PageClient | None = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            cache: Metadata cache namespace
            feed: Feed client for the full index
            feed_url: Feed URL, also the index cache key
            pages: Per-item page client. Without one, step 3 is skipped.
        """
        self._cache = cache
        self._feed = feed
        self._feed_url = feed_url
        self._pages = pages

    async def get_posts(self, use_cache: bool = True) -> tuple[list[PostRecord], bool]:
        """Load the full post index.

        Args:
            use_cache: Serve the cached index when present

        Returns:
            (records, fresh) where fresh tells whether the upstream was hit

        Raises:
            UpstreamFetchError: If the fetch fails and nothing is cached
        """
        cached = await self._cached_posts() if use_cache else None
        if cached is not None:
            return cached, False

        try:
            posts = await self._feed.fetch(self._feed_url)
        except UpstreamFetchError as e:
            stale = cached if use_cache else await self._cached_posts()
            if stale is None:
                raise
            logger.warning("Feed refresh failed, using cached index: %s", e.message, extra={"url": self._feed_url})
            return stale, False

        await self._cache.put_json(self._feed_url, [post.to_dict() for post in posts])
        return posts, True

    async def resolve_record(self, slug: str, date: str) -> PostRecord | None:
        """Find the post for a slug and date.

        Args:
            slug: Post slug
            date: Publish date in any supported format

        Returns:
            The matching record, or None after every stage misses

        Raises:
            UpstreamFetchError: If an upstream is unreachable with no cached fallback
        """
        wanted = normalize_date(date) or date.strip()

        posts, fresh = await self.get_posts()
        post = _find(posts, slug, wanted)
        if post is not None:
            return post

        if not fresh:
            logger.info("Post %s not in cached index, refreshing feed", slug, extra={"url": self._feed_url})
            posts, _ = await self.get_posts(use_cache=False)
            post = _find(posts, slug, wanted)
            if post is not None:
                return post

        if self._pages is not None:
            return await self._lookup_page(slug, wanted)
        return None

    async def _lookup_page(self, slug: str, date: str) -> PostRecord | None:
        url = self._pages.page_url(slug)  # type: ignore[union-attr]
        data = await self._cache.get_json(url)
        cached = _record_or_none(data)
        if cached is not None and cached.matches(slug, date):
            return cached

        logger.info("Post %s not in feed, fetching its page", slug, extra={"url": url})
        try:
            record = await self._pages.fetch(slug)  # type: ignore[union-attr]
        except UpstreamFetchError as e:
            if cached is None:
                raise
            logger.warning("Page fetch failed, using cached page: %s", e.message, extra={"url": url})
            return None

        if record is None:
            return None
        await self._cache.put_json(url, record.to_dict())
        return record if record.matches(slug, date) else None

    async def _cached_posts(self) -> list[PostRecord] | None:
        data = await self._cache.get_json(self._feed_url)
        if not isinstance(data, list):
            return None
        posts = [_record_or_none(item) for item in data]
        return [post for post in posts if post is not None]


def _find(posts: list[PostRecord], slug: str, date: str) -> PostRecord | None:
    return next((post for post in posts if post.matches(slug, date)), None)


def _record_or_none(data: object) -> PostRecord | None:
    if not isinstance(data, dict):
        return None
    try:
        return PostRecord.from_dict(data)
    except KeyError:
        return None

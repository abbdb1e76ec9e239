"""Repository layer for data access.

This layer wraps external dependencies (Redis, upstream feeds and pages,
the font directory API) behind small classes the services depend on.
Redis access satisfies the AssetStore protocol structurally, and page
structure knowledge sits behind the PageExtractor protocol.
"""

from .feed_client import FeedClient
from .font_directory_client import FontDirectoryClient
from .http_fetcher import HttpFetcher
from .page_client import PageClient
from .page_extractor import XPathPageExtractor
from .redis_asset_store import RedisAssetStore

__all__ = [
    "FeedClient",
    "FontDirectoryClient",
    "HttpFetcher",
    "PageClient",
    "RedisAssetStore",
    "XPathPageExtractor",
]

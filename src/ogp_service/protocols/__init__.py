"""Protocol interfaces for swappable implementations.

Protocols use structural typing, so any class with matching methods
satisfies them. Tests rely on this to substitute in-memory fakes for
Redis, upstream HTTP and the render engines.
"""

from .asset_store import AssetStore
from .content_resolver import ContentResolver
from .page_extractor import PageExtractor
from .render_engine import LayoutEngine, RasterEngine

__all__ = [
    "AssetStore",
    "ContentResolver",
    "LayoutEngine",
    "PageExtractor",
    "RasterEngine",
]

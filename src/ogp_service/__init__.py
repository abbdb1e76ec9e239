"""OGP Image Service - cached social preview images.

This package serves Open Graph preview images for a blog and a tools
catalog, with a layered architecture around a multi-tier cache:

Layers:
    - protocols: Interface contracts (AssetStore, ContentResolver, engines)
    - repositories: Data access (Redis, feed, pages, font directory)
    - services: Cache gate, metadata and font resolution, render pipeline
    - rendering: Render tree, layout and raster engines, card templates
    - handlers: HTTP endpoint handlers
    - entities: Domain models (internal)

Usage:
    ```python
    from ogp_service.api.dependencies import build_services

    services = build_services()
    response = await services.handlers["blog"].handle({"slug": "hello", "date": "2024-01-05"})
    ```

For HTTP API:
    ```python
    from ogp_service.api.app import app
    ```
"""

from ogp_service.config import Settings, get_settings
from ogp_service.entities import CacheEntry, FontAsset, PostRecord, RenderRequest
from ogp_service.errors import (
    BadRequestError,
    ConfigurationError,
    LayoutError,
    NotFoundError,
    OgpServiceError,
    RasterError,
    UnknownWeightError,
    UpstreamFetchError,
)
from ogp_service.protocols import AssetStore, ContentResolver, PageExtractor
from ogp_service.repositories import RedisAssetStore
from ogp_service.services import (
    AssetCache,
    FontResolver,
    ImageCacheGate,
    ImageEndpoint,
    MetadataResolver,
    RenderPipeline,
)

__all__ = [
    # Configuration
    "Settings",
    "get_settings",
    # Protocols (interfaces)
    "AssetStore",
    "ContentResolver",
    "PageExtractor",
    # Services
    "AssetCache",
    "FontResolver",
    "ImageCacheGate",
    "ImageEndpoint",
    "MetadataResolver",
    "RenderPipeline",
    # Repositories
    "RedisAssetStore",
    # Entities
    "CacheEntry",
    "FontAsset",
    "PostRecord",
    "RenderRequest",
    # Errors
    "OgpServiceError",
    "BadRequestError",
    "NotFoundError",
    "ConfigurationError",
    "UnknownWeightError",
    "UpstreamFetchError",
    "LayoutError",
    "RasterError",
]

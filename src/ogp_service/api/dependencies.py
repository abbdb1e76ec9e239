"""Dependency wiring for the FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Services built once in the lifespan (or injected by tests)
    - Stored on app.state.services
    - Route functions look their handler up from request.app.state
"""

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field

from fastapi import FastAPI, Request

from ogp_service.config import Settings, get_settings
from ogp_service.handlers import ImageHandler
from ogp_service.protocols import AssetStore
from ogp_service.rendering.templates import BLOG_FONT_FAMILY, TOOLS_FONT_FAMILY, blog_card, tools_card
from ogp_service.repositories import (
    FeedClient,
    FontDirectoryClient,
    HttpFetcher,
    PageClient,
    RedisAssetStore,
)
from ogp_service.services import (
    FONT_NAMESPACE,
    IMAGE_NAMESPACE,
    METADATA_NAMESPACE,
    AssetCache,
    BlogPostResolver,
    DirectoryFontSet,
    FontResolver,
    ImageCacheGate,
    ImageEndpoint,
    MetadataResolver,
    QueryParamsResolver,
    RenderPipeline,
    StaticFontSet,
)

logger = logging.getLogger(__name__)

ENDPOINT_NAMES = ("blog", "tools")


@dataclass
class Services:
    """Everything the routes need, built once per process."""

    store: AssetStore
    fetcher: HttpFetcher
    pipeline: RenderPipeline
    handlers: dict[str, ImageHandler] = field(default_factory=dict)


def build_endpoints(settings: Settings, metadata: MetadataResolver) -> list[ImageEndpoint]:
    """Configure the blog and tools image endpoints."""
    tools_fonts = tuple(
        (settings.tools_font_url_template.format(name=name), weight)
        for name, weight in (("Inconsolata-Bold", 700), ("Inconsolata-Regular", 400))
    )
    return [
        ImageEndpoint(
            name="blog",
            required_params=("slug", "date"),
            cache_key_base=settings.blog_image_url,
            resolver=BlogPostResolver(metadata),
            template=blog_card,
            font_set=DirectoryFontSet(family=BLOG_FONT_FAMILY, weights=("regular", "700")),
            not_found_message="Post not found",
        ),
        ImageEndpoint(
            name="tools",
            required_params=("cat", "slug", "title"),
            cache_key_base=settings.tools_image_url,
            resolver=QueryParamsResolver(),
            template=tools_card,
            font_set=StaticFontSet(family=TOOLS_FONT_FAMILY, files=tools_fonts, content_type="font/woff"),
        ),
    ]


def build_services(
    settings: Settings | None = None,
    store: AssetStore | None = None,
    fetcher: HttpFetcher | None = None,
    pipeline: RenderPipeline | None = None,
) -> Services:
    """Build the full service graph.

    Args:
        settings: Application settings. Defaults to environment settings.
        store: Asset store. Defaults to Redis.
        fetcher: Upstream HTTP fetcher. Defaults to a new httpx client.
        pipeline: Render pipeline. Defaults to the Pillow engines.

    Returns:
        Services with one ImageHandler per endpoint
    """
    settings = settings or get_settings()
    store = store or RedisAssetStore.create(settings)
    fetcher = fetcher or HttpFetcher.create(timeout=settings.http_timeout)
    pipeline = pipeline or RenderPipeline.create()

    metadata = MetadataResolver(
        cache=AssetCache(store, METADATA_NAMESPACE, settings.metadata_cache_ttl),
        feed=FeedClient(fetcher),
        feed_url=settings.blog_feed_url,
        pages=PageClient(fetcher, settings.blog_page_url_template),
    )
    fonts = FontResolver(
        cache=AssetCache(store, FONT_NAMESPACE, settings.font_cache_ttl),
        fetcher=fetcher,
        directory=FontDirectoryClient(fetcher, settings.google_fonts_api_url),
        directory_api_key=settings.google_fonts_api_key,
        directory_api_url=settings.google_fonts_api_url,
    )
    images = AssetCache(store, IMAGE_NAMESPACE, settings.image_cache_ttl)

    handlers = {
        endpoint.name: ImageHandler(ImageCacheGate(endpoint, images, fonts, pipeline))
        for endpoint in build_endpoints(settings, metadata)
    }
    if not settings.has_font_directory_key:
        logger.warning("GOOGLE_FONTS_API_KEY is not set; blog images will fail with 500")
    return Services(store=store, fetcher=fetcher, pipeline=pipeline, handlers=handlers)


def get_services(request: Request) -> Services:
    """Dependency injection for Services from app.state.

    Raises:
        RuntimeError: If services are not initialized
    """
    services = getattr(request.app.state, "services", None)
    if services is None:
        raise RuntimeError("Services not initialized. Check lifespan setup.")
    return services


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build services on startup unless already injected, close them on shutdown."""
    owned = getattr(app.state, "services", None) is None
    if owned:
        app.state.services = build_services()
        logger.info("Image services initialized")

    yield

    if owned:
        services: Services = app.state.services
        await services.fetcher.close()
        if isinstance(services.store, RedisAssetStore):
            await services.store.close()
        del app.state.services
        logger.info("Image services shut down")

"""
Tests for the image cache gate request flow.
"""

import pytest

from ogp_service.api.dependencies import build_endpoints
from ogp_service.errors import BadRequestError, ConfigurationError, NotFoundError
from ogp_service.repositories import FeedClient, FontDirectoryClient, PageClient
from ogp_service.services import (
    FONT_NAMESPACE,
    IMAGE_NAMESPACE,
    METADATA_NAMESPACE,
    AssetCache,
    FontResolver,
    ImageCacheGate,
    MetadataResolver,
)

from .conftest import FEED_URL, FONT_API_URL

BLOG_PARAMS = {"slug": "hello-world", "date": "2024-01-05"}
TOOLS_PARAMS = {"cat": "text", "slug": "counter", "title": "Character Counter"}


@pytest.fixture
def gates(settings, store, fetcher, pipeline):
    """Gates for both endpoints wired to the in-memory store and mock upstream."""

    def make(api_key="test-key"):
        metadata = MetadataResolver(
            cache=AssetCache(store, METADATA_NAMESPACE, settings.metadata_cache_ttl),
            feed=FeedClient(fetcher),
            feed_url=settings.blog_feed_url,
            pages=PageClient(fetcher, settings.blog_page_url_template),
        )
        fonts = FontResolver(
            cache=AssetCache(store, FONT_NAMESPACE, settings.font_cache_ttl),
            fetcher=fetcher,
            directory=FontDirectoryClient(fetcher, FONT_API_URL),
            directory_api_key=api_key,
            directory_api_url=FONT_API_URL,
        )
        images = AssetCache(store, IMAGE_NAMESPACE, settings.image_cache_ttl)
        return {
            endpoint.name: ImageCacheGate(endpoint, images, fonts, pipeline)
            for endpoint in build_endpoints(settings, metadata)
        }

    return make


def test_cache_key_is_canonical(gates):
    blog = gates()["blog"]

    key = blog.cache_key(blog.validate({"date": "2024-01-05", "slug": "hello world", "noCache": "1", "x": "y"}))

    assert key == "https://ogp.kq5.jp/blog/image.png?slug=hello+world&date=2024-01-05"


def test_cache_keys_differ_per_params(gates):
    tools = gates()["tools"]

    a = tools.cache_key(tools.validate(TOOLS_PARAMS))
    b = tools.cache_key(tools.validate(dict(TOOLS_PARAMS, title="Other")))

    assert a != b
    assert a.startswith("https://ogp.t3x.jp/tools/image.png?cat=text&slug=counter&title=")


@pytest.mark.parametrize(
    "name,params",
    [
        ("blog", {"slug": "hello-world"}),
        ("blog", {"slug": "", "date": "2024-01-05"}),
        ("tools", {"cat": "text", "slug": "counter"}),
        ("tools", {}),
    ],
)
@pytest.mark.asyncio
async def test_missing_params_rejected_without_upstream_calls(gates, upstream, store, name, params):
    with pytest.raises(BadRequestError) as exc_info:
        await gates()[name].handle(params)

    assert exc_info.value.message == "Invalid Parameters"
    assert upstream.requests == []
    assert store.gets == 0


@pytest.mark.asyncio
async def test_second_request_served_from_cache(gates, raster, store):
    blog = gates()["blog"]

    first = await blog.handle(BLOG_PARAMS)
    second = await blog.handle(dict(BLOG_PARAMS))

    assert first.from_cache is False
    assert second.from_cache is True
    assert second.body == first.body
    assert raster.calls == 1
    assert store.keys(IMAGE_NAMESPACE) == [first.cache_key]
    assert store.entries[(IMAGE_NAMESPACE, first.cache_key)].content_type == "image/png"


@pytest.mark.asyncio
async def test_no_cache_rerenders_and_overwrites(gates, raster, store):
    tools = gates()["tools"]

    first = await tools.handle(TOOLS_PARAMS)
    bypass = await tools.handle(dict(TOOLS_PARAMS, noCache="1"))
    third = await tools.handle(TOOLS_PARAMS)

    assert bypass.from_cache is False
    assert bypass.cache_key == first.cache_key
    assert raster.calls == 2
    assert third.from_cache is True
    assert third.body == bypass.body != first.body


@pytest.mark.asyncio
async def test_unknown_post_is_not_found(gates, store, raster):
    with pytest.raises(NotFoundError) as exc_info:
        await gates()["blog"].handle({"slug": "nope", "date": "2024-01-05"})

    assert exc_info.value.message == "Post not found"
    assert raster.calls == 0
    assert store.keys(IMAGE_NAMESPACE) == []


@pytest.mark.asyncio
async def test_wrong_date_is_not_found(gates):
    with pytest.raises(NotFoundError):
        await gates()["blog"].handle({"slug": "hello-world", "date": "2024-01-06"})


@pytest.mark.asyncio
async def test_blog_without_font_credential(gates, upstream, raster):
    with pytest.raises(ConfigurationError):
        await gates(api_key=None)["blog"].handle(BLOG_PARAMS)

    assert upstream.calls(FONT_API_URL) == 0
    assert raster.calls == 0


@pytest.mark.asyncio
async def test_tools_needs_no_font_credential(gates):
    result = await gates(api_key=None)["tools"].handle(TOOLS_PARAMS)

    assert result.body.startswith(b"\x89PNG")


@pytest.mark.asyncio
async def test_store_is_deferred_to_scheduler(gates, store):
    tools = gates()["tools"]
    scheduled = []

    result = await tools.handle(TOOLS_PARAMS, schedule=lambda func, *args: scheduled.append((func, args)))

    assert store.keys(IMAGE_NAMESPACE) == []
    ((func, args),) = scheduled
    await func(*args)
    assert store.entries[(IMAGE_NAMESPACE, result.cache_key)].payload == result.body


@pytest.mark.asyncio
async def test_cached_image_skips_feed_and_fonts(gates, upstream):
    blog = gates()["blog"]
    await blog.handle(BLOG_PARAMS)
    upstream.requests.clear()

    await blog.handle(BLOG_PARAMS)

    assert upstream.requests == []
    assert upstream.calls(FEED_URL) == 0

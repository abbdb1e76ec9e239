"""
Tests for the image service API.
"""

import pytest
from fastapi.testclient import TestClient

from ogp_service.api.app import create_app
from ogp_service.api.dependencies import build_services
from ogp_service.config import Settings
from ogp_service.repositories import HttpFetcher, RedisAssetStore
from ogp_service.services import IMAGE_NAMESPACE

IMMUTABLE = "public, max-age=31536000, immutable"


@pytest.fixture
def make_client(settings, store, fetcher, pipeline):
    """Create test clients around injected services."""

    def make(settings_override: Settings | None = None) -> TestClient:
        services = build_services(
            settings=settings_override or settings,
            store=store,
            fetcher=fetcher,
            pipeline=pipeline,
        )
        return TestClient(create_app(services))

    return make


@pytest.fixture
def client(make_client):
    with make_client() as client:
        yield client


def test_blog_image(client, store):
    """Test blog image rendering and caching."""
    response = client.get("/blog/image.png", params={"slug": "hello-world", "date": "2024-01-05"})

    assert response.status_code == 200
    assert response.headers["content-type"] == "image/png"
    assert response.headers["cache-control"] == IMMUTABLE
    assert response.content.startswith(b"\x89PNG")
    assert store.keys(IMAGE_NAMESPACE) == [
        "https://ogp.kq5.jp/blog/image.png?slug=hello-world&date=2024-01-05"
    ]


def test_repeated_request_is_identical(client, raster):
    """Test a repeated request is served from the image cache."""
    params = {"cat": "text", "slug": "counter", "title": "Counter"}

    first = client.get("/tools/image.png", params=params)
    second = client.get("/tools/image.png", params=params)

    assert first.status_code == second.status_code == 200
    assert first.content == second.content
    assert raster.calls == 1


def test_no_cache_param(client, raster):
    """Test noCache=1 forces a re-render."""
    params = {"cat": "text", "slug": "counter", "title": "Counter"}

    client.get("/tools/image.png", params=params)
    response = client.get("/tools/image.png", params={**params, "noCache": "1"})

    assert response.status_code == 200
    assert raster.calls == 2


@pytest.mark.parametrize(
    "path,params",
    [
        ("/blog/image.png", {"slug": "hello-world"}),
        ("/blog/image.png", {}),
        ("/tools/image.png", {"cat": "text", "title": "Counter"}),
    ],
)
def test_missing_params(client, upstream, path, params):
    """Test missing parameters return 400 without upstream calls."""
    response = client.get(path, params=params)

    assert response.status_code == 400
    assert response.text == "Invalid Parameters"
    assert response.headers["content-type"] == "image/png"
    assert upstream.requests == []


def test_post_not_found(client):
    """Test an unknown post returns 404."""
    response = client.get("/blog/image.png", params={"slug": "nope", "date": "2024-01-05"})

    assert response.status_code == 404
    assert response.text == "Post not found"
    assert "cache-control" not in response.headers


def test_unknown_route(client):
    """Test unmatched paths return a plain Not Found."""
    response = client.get("/nothing/here")

    assert response.status_code == 404
    assert response.text == "Not Found"


def test_blog_without_font_credential(make_client, settings):
    """Test blog images fail with 500 when the font directory key is missing."""
    no_key = Settings(
        google_fonts_api_key=None,
        google_fonts_api_url=settings.google_fonts_api_url,
        blog_feed_url=settings.blog_feed_url,
        blog_page_url_template=settings.blog_page_url_template,
        tools_font_url_template=settings.tools_font_url_template,
    )
    with make_client(no_key) as client:
        blog = client.get("/blog/image.png", params={"slug": "hello-world", "date": "2024-01-05"})
        tools = client.get("/tools/image.png", params={"cat": "text", "slug": "counter", "title": "Counter"})

    assert blog.status_code == 500
    assert blog.text == "Server Error: Invalid Google Fonts API Key"
    assert tools.status_code == 200


def test_upstream_failure_is_server_error(client, upstream, settings):
    """Test an unreachable feed returns 500."""
    upstream.fail(settings.blog_feed_url)

    response = client.get("/blog/image.png", params={"slug": "hello-world", "date": "2024-01-05"})

    assert response.status_code == 500


def test_health(client, store):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "cache": True}

    store.healthy = False
    response = client.get("/health")
    assert response.status_code == 503
    assert response.json() == {"status": "unhealthy", "cache": False}


def test_default_services_use_factories(settings, pipeline):
    """Test the service graph builds its own store and fetcher from settings."""
    services = build_services(settings=settings, pipeline=pipeline)

    assert isinstance(services.store, RedisAssetStore)
    assert services.store.storage_key("ogp-cache", "k") == f"{settings.cache_key_prefix}:ogp-cache:k"
    assert isinstance(services.fetcher, HttpFetcher)
    assert set(services.handlers) == {"blog", "tools"}

"""
Shared fixtures: an in-memory asset store, a scripted upstream behind
httpx.MockTransport, and render engines that need no real fonts.
"""

from collections.abc import Callable

import httpx
import pytest

from ogp_service.config import Settings
from ogp_service.entities import CacheEntry, FontAsset
from ogp_service.rendering import BoxLayoutEngine
from ogp_service.repositories import HttpFetcher
from ogp_service.services import RenderPipeline

FEED_URL = "https://kq5.jp/rss.xml"
FONT_API_URL = "https://www.googleapis.com/webfonts/v1/webfonts"
PAGE_URL_TEMPLATE = "https://kq5.jp/blog/{slug}"
TOOLS_FONT_URL_TEMPLATE = "https://tools.t3x.jp/fonts/{name}.woff"


def rss(*items: dict[str, str]) -> str:
    """Build an RSS document from item field dicts."""
    body = "".join(
        "<item>" + "".join(f"<{k}>{v}</{k}>" for k, v in item.items()) + "</item>" for item in items
    )
    return f'<?xml version="1.0" encoding="UTF-8"?><rss version="2.0"><channel><title>kq5</title>{body}</channel></rss>'


HELLO_ITEM = {
    "title": "Hello World",
    "link": "https://kq5.jp/blog/hello-world",
    "pubDate": "Fri, 05 Jan 2024 03:00:00 GMT",
    "slug": "hello-world",
    "hidden": "false",
    "tags": "python,cache",
}

NEW_ITEM = {
    "title": "Fresh Post",
    "link": "https://kq5.jp/blog/fresh-post",
    "pubDate": "Mon, 08 Jan 2024 10:30:00 +0000",
    "slug": "fresh-post",
    "hidden": "false",
    "tags": "news",
}


class InMemoryAssetStore:
    """AssetStore fake keeping entries in a dict."""

    def __init__(self) -> None:
        self.entries: dict[tuple[str, str], CacheEntry] = {}
        self.gets = 0
        self.puts = 0
        self.healthy = True

    async def get(self, namespace: str, key: str) -> CacheEntry | None:
        self.gets += 1
        return self.entries.get((namespace, key))

    async def put(self, namespace: str, entry: CacheEntry) -> None:
        self.puts += 1
        self.entries[(namespace, entry.key)] = entry

    async def health_check(self) -> bool:
        return self.healthy

    def keys(self, namespace: str) -> list[str]:
        return [key for ns, key in self.entries if ns == namespace]


class Upstream:
    """Scripted upstream origins for httpx.MockTransport.

    Responses are registered per URL (query string ignored) and may be
    replaced between calls to simulate upstream changes.
    """

    def __init__(self) -> None:
        self.routes: dict[str, Callable[[httpx.Request], httpx.Response]] = {}
        self.requests: list[httpx.Request] = []

    def add(self, url: str, status: int = 200, text: str | None = None, content: bytes = b"", json=None) -> None:
        def respond(request: httpx.Request) -> httpx.Response:
            if json is not None:
                return httpx.Response(status, json=json)
            if text is not None:
                return httpx.Response(status, text=text)
            return httpx.Response(status, content=content)

        self.routes[url] = respond

    def fail(self, url: str) -> None:
        def respond(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        self.routes[url] = respond

    def calls(self, url: str) -> int:
        return sum(1 for r in self.requests if str(r.url.copy_with(query=None)) == url)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(str(request.url.copy_with(query=None)))
        if route is None:
            return httpx.Response(404, text="not found")
        return route(request)


class FixedWidthMeasurer:
    """Every character is 0.5em wide."""

    def measure(self, content: str, font: FontAsset, size: float) -> float:
        return len(content) * size * 0.5


class CountingRaster:
    """RasterEngine fake returning distinct PNG-looking bytes per call."""

    def __init__(self) -> None:
        self.init_calls = 0
        self.calls = 0

    def initialize(self) -> None:
        self.init_calls += 1

    def rasterize(self, vector) -> bytes:
        self.calls += 1
        return b"\x89PNG\r\n\x1a\n" + f"render-{self.calls}".encode()


@pytest.fixture
def store() -> InMemoryAssetStore:
    return InMemoryAssetStore()


@pytest.fixture
def upstream() -> Upstream:
    up = Upstream()
    up.add(FEED_URL, text=rss(HELLO_ITEM))
    up.add(
        FONT_API_URL,
        json={
            "items": [
                {
                    "family": "M PLUS Rounded 1c",
                    "variants": ["100", "regular", "700", "900"],
                    "files": {
                        "100": "https://fonts.gstatic.com/s/mplus/thin.ttf",
                        "regular": "https://fonts.gstatic.com/s/mplus/regular.ttf",
                        "700": "https://fonts.gstatic.com/s/mplus/bold.ttf",
                        "900": "https://fonts.gstatic.com/s/mplus/black.ttf",
                    },
                }
            ]
        },
    )
    up.add("https://fonts.gstatic.com/s/mplus/regular.ttf", content=b"mplus-400")
    up.add("https://fonts.gstatic.com/s/mplus/bold.ttf", content=b"mplus-700")
    up.add(TOOLS_FONT_URL_TEMPLATE.format(name="Inconsolata-Bold"), content=b"inconsolata-700")
    up.add(TOOLS_FONT_URL_TEMPLATE.format(name="Inconsolata-Regular"), content=b"inconsolata-400")
    return up


@pytest.fixture
def fetcher(upstream: Upstream) -> HttpFetcher:
    return HttpFetcher(client=httpx.AsyncClient(transport=httpx.MockTransport(upstream.handler)))


@pytest.fixture
def raster() -> CountingRaster:
    return CountingRaster()


@pytest.fixture
def pipeline(raster: CountingRaster) -> RenderPipeline:
    return RenderPipeline(layout_engine=BoxLayoutEngine(FixedWidthMeasurer()), raster_engine=raster)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        google_fonts_api_key="test-key",
        google_fonts_api_url=FONT_API_URL,
        blog_feed_url=FEED_URL,
        blog_page_url_template=PAGE_URL_TEMPLATE,
        tools_font_url_template=TOOLS_FONT_URL_TEMPLATE,
    )

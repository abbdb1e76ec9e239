"""
Tests for font resolution from static URLs and the font directory.
"""

import pytest

from ogp_service.entities import FontAsset
from ogp_service.errors import ConfigurationError, UnknownWeightError, UpstreamFetchError
from ogp_service.repositories import FontDirectoryClient
from ogp_service.services import FONT_NAMESPACE, AssetCache, FontResolver
from ogp_service.services.font_resolver import content_type_for, variant_token, weight_from_token

from .conftest import FONT_API_URL

BOLD_URL = "https://tools.t3x.jp/fonts/Inconsolata-Bold.woff"
REGULAR_URL = "https://tools.t3x.jp/fonts/Inconsolata-Regular.woff"
FAMILY = "M PLUS Rounded 1c"


@pytest.fixture
def font_cache(store):
    return AssetCache(store, FONT_NAMESPACE, ttl=604800)


@pytest.fixture
def resolver(font_cache, fetcher):
    return FontResolver(
        cache=font_cache,
        fetcher=fetcher,
        directory=FontDirectoryClient(fetcher, FONT_API_URL),
        directory_api_key="test-key",
        directory_api_url=FONT_API_URL,
    )


@pytest.mark.parametrize(
    "token,expected",
    [("regular", 400), ("REGULAR", 400), ("100", 100), ("700", 700), (900, 900)],
)
def test_weight_table(token, expected):
    assert weight_from_token(token) == expected


@pytest.mark.parametrize("token", ["bold", "450", "1000", "italic", ""])
def test_weight_table_rejects_unknown(token):
    with pytest.raises(UnknownWeightError):
        weight_from_token(token)


def test_variant_tokens_and_content_types():
    assert variant_token(400) == "regular"
    assert variant_token(700) == "700"
    assert content_type_for("https://x/a.woff2?v=1") == "font/woff2"
    assert content_type_for("https://x/a.ttf") == "font/ttf"
    assert content_type_for("https://x/a.bin") == "font/ttf"


def test_font_asset_rejects_unlisted_weight():
    with pytest.raises(ValueError):
        FontAsset(family="x", weight=450, data=b"")


@pytest.mark.asyncio
async def test_static_fonts_fetched_once(resolver, upstream, store):
    files = [(BOLD_URL, 700), (REGULAR_URL, "regular")]

    first = await resolver.resolve("inconsolata", files)
    second = await resolver.resolve("inconsolata", files)

    assert [(f.weight, f.data) for f in first] == [(700, b"inconsolata-700"), (400, b"inconsolata-400")]
    assert first == second
    assert upstream.calls(BOLD_URL) == 1
    assert upstream.calls(REGULAR_URL) == 1
    assert sorted(store.keys(FONT_NAMESPACE)) == sorted([BOLD_URL, REGULAR_URL])


@pytest.mark.asyncio
async def test_static_font_failure_aborts(resolver, upstream):
    upstream.fail(BOLD_URL)

    with pytest.raises(UpstreamFetchError):
        await resolver.resolve("inconsolata", [(BOLD_URL, 700), (REGULAR_URL, 400)])


@pytest.mark.asyncio
async def test_unknown_weight_fails_before_fetching(resolver, upstream):
    with pytest.raises(UnknownWeightError):
        await resolver.resolve("inconsolata", [(BOLD_URL, "heavy")])

    assert upstream.requests == []


@pytest.mark.asyncio
async def test_directory_requires_credential(font_cache, fetcher, upstream):
    resolver = FontResolver(
        cache=font_cache,
        fetcher=fetcher,
        directory=FontDirectoryClient(fetcher, FONT_API_URL),
        directory_api_key=None,
        directory_api_url=FONT_API_URL,
    )

    with pytest.raises(ConfigurationError) as exc_info:
        await resolver.resolve_directory(FAMILY, ["regular", "700"])

    assert exc_info.value.message == "Server Error: Invalid Google Fonts API Key"
    assert exc_info.value.status_code == 500
    assert upstream.requests == []


@pytest.mark.asyncio
async def test_directory_returns_only_requested_weights(resolver, upstream, store):
    fonts = await resolver.resolve_directory(FAMILY, ["regular", "700", "regular"])

    assert [(f.family, f.weight, f.data) for f in fonts] == [
        (FAMILY, 400, b"mplus-400"),
        (FAMILY, 700, b"mplus-700"),
    ]
    assert upstream.calls(FONT_API_URL) == 1
    assert upstream.calls("https://fonts.gstatic.com/s/mplus/thin.ttf") == 0

    directory_request = next(r for r in upstream.requests if str(r.url).startswith(FONT_API_URL))
    assert directory_request.url.params["key"] == "test-key"
    assert directory_request.url.params["family"] == FAMILY

    assert resolver.directory_cache_key(FAMILY, 700) in store.keys(FONT_NAMESPACE)


@pytest.mark.asyncio
async def test_directory_cached_weights_skip_the_directory(resolver, upstream):
    await resolver.resolve_directory(FAMILY, ["regular", "700"])
    upstream.requests.clear()

    fonts = await resolver.resolve_directory(FAMILY, ["700", "regular"])

    assert [f.weight for f in fonts] == [700, 400]
    assert upstream.requests == []


@pytest.mark.asyncio
async def test_directory_missing_variant(resolver):
    with pytest.raises(UpstreamFetchError):
        await resolver.resolve_directory(FAMILY, ["300"])


@pytest.mark.asyncio
async def test_directory_unknown_family(resolver, upstream):
    upstream.add(FONT_API_URL, json={"items": []})

    with pytest.raises(UpstreamFetchError):
        await resolver.resolve_directory("No Such Family", ["regular"])


def test_directory_cache_key_quotes_family(resolver):
    assert resolver.directory_cache_key(FAMILY, 400) == f"{FONT_API_URL}?family=M%20PLUS%20Rounded%201c&weight=400"

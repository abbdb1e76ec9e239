"""Font resolution service.

Resolves a family and a set of weights to FontAssets, reading through
the font cache so every font file is fetched at most once per TTL
window. Two origins are supported: static file URLs, and a remote font
directory queried by family name with an API credential.
"""

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from urllib.parse import quote

from ogp_service.entities import FONT_WEIGHTS, FontAsset
from ogp_service.errors import ConfigurationError, UnknownWeightError, UpstreamFetchError
from ogp_service.repositories import FontDirectoryClient, HttpFetcher

from .asset_cache import AssetCache

logger = logging.getLogger(__name__)

WEIGHT_NAMES: dict[str, int] = {"regular": 400, **{str(w): w for w in FONT_WEIGHTS}}

FONT_CONTENT_TYPES = {
    ".woff2": "font/woff2",
    ".woff": "font/woff",
    ".ttf": "font/ttf",
    ".otf": "font/otf",
}


def weight_from_token(token: str | int) -> int:
    """Map a weight token ("regular", "700", 700) to a numeric weight.

    Raises:
        UnknownWeightError: If the token is not in the weight-name table
    """
    key = str(token).strip().lower()
    if key not in WEIGHT_NAMES:
        raise UnknownWeightError(f"Unknown font weight {token!r}")
    return WEIGHT_NAMES[key]


def variant_token(weight: int) -> str:
    """Directory variant token for an upright weight."""
    return "regular" if weight == 400 else str(weight)


def content_type_for(url: str, default: str = "font/ttf") -> str:
    path = url.split("?", 1)[0].lower()
    return next((ct for ext, ct in FONT_CONTENT_TYPES.items() if path.endswith(ext)), default)


@dataclass(frozen=True)
class StaticFontSet:
    """Fonts served from fixed file URLs."""

    family: str
    files: tuple[tuple[str, int | str], ...]  # (url, weight)
    content_type: str = "font/woff"


@dataclass(frozen=True)
class DirectoryFontSet:
    """Fonts looked up in the remote font directory."""

    family: str
    weights: tuple[str, ...]


FontSet = StaticFontSet | DirectoryFontSet


class FontResolver:
    """Cache-aware font resolver.

    All per-weight work runs concurrently; the first failure aborts the
    whole resolution.
    """

    def __init__(
        self,
        cache: AssetCache,
        fetcher: HttpFetcher,
        directory: FontDirectoryClient | None = None,
        directory_api_key: str | None = None,
        directory_api_url: str = "",
    ) -> None:
        self._cache = cache
        self._fetcher = fetcher
        self._directory = directory
        self._api_key = directory_api_key
        self._api_url = directory_api_url

    async def resolve_set(self, font_set: FontSet) -> list[FontAsset]:
        """Resolve a configured font set from either origin."""
        if isinstance(font_set, DirectoryFontSet):
            return await self.resolve_directory(font_set.family, font_set.weights)
        return await self.resolve(font_set.family, font_set.files, font_set.content_type)

    async def resolve(
        self,
        family: str,
        files: Sequence[tuple[str, int | str]],
        content_type: str = "font/woff",
    ) -> list[FontAsset]:
        """Resolve fonts served from static URLs.

        Args:
            family: Family name assigned to every resolved asset
            files: (url, weight) pairs; the URL is the cache key
            content_type: MIME type stored with fetched files

        Returns:
            One FontAsset per requested file, in request order
        """
        weights = [weight_from_token(weight) for _, weight in files]
        return list(
            await asyncio.gather(
                *(
                    self._load(family, weight, key=url, url=url, content_type=content_type)
                    for (url, _), weight in zip(files, weights)
                )
            )
        )

    async def resolve_directory(self, family: str, weight_tokens: Sequence[str | int]) -> list[FontAsset]:
        """Resolve fonts through the remote font directory.

        Cached weights are served without contacting the directory; the
        directory is queried once for all missing weights.

        Raises:
            ConfigurationError: If no directory credential is configured
            UnknownWeightError: If a token is not in the weight-name table
            UpstreamFetchError: If the directory or a font file is unreachable,
                or the family does not offer a requested weight
        """
        if not self._api_key or self._directory is None:
            raise ConfigurationError("Server Error: Invalid Google Fonts API Key")

        weights = list(dict.fromkeys(weight_from_token(token) for token in weight_tokens))
        keys = {weight: self.directory_cache_key(family, weight) for weight in weights}

        entries = await asyncio.gather(*(self._cache.get(keys[weight]) for weight in weights))
        assets = {
            weight: FontAsset(family=family, weight=weight, data=entry.payload)
            for weight, entry in zip(weights, entries)
            if entry is not None
        }

        missing = [weight for weight in weights if weight not in assets]
        if missing:
            listing = await self._directory.list_files(family, self._api_key)
            urls = {}
            for weight in missing:
                url = listing.get(variant_token(weight)) or listing.get(str(weight))
                if url is None:
                    raise UpstreamFetchError(f"Font directory offers no weight {weight} for {family!r}")
                urls[weight] = url

            fetched = await asyncio.gather(
                *(
                    self._fetch(
                        family,
                        weight,
                        key=keys[weight],
                        url=urls[weight],
                        content_type=content_type_for(urls[weight]),
                    )
                    for weight in missing
                )
            )
            assets.update(zip(missing, fetched))

        return [assets[weight] for weight in weights]

    def directory_cache_key(self, family: str, weight: int) -> str:
        return f"{self._api_url}?family={quote(family)}&weight={weight}"

    async def _load(self, family: str, weight: int, key: str, url: str, content_type: str) -> FontAsset:
        entry = await self._cache.get(key)
        if entry is not None:
            return FontAsset(family=family, weight=weight, data=entry.payload)
        return await self._fetch(family, weight, key=key, url=url, content_type=content_type)

    async def _fetch(self, family: str, weight: int, key: str, url: str, content_type: str) -> FontAsset:
        data = await self._fetcher.get_bytes(url)
        asset = FontAsset(family=family, weight=weight, data=data)
        await self._cache.put(key, data, content_type)
        logger.info("Fetched font %s %d", family, weight, extra={"cache": self._cache.namespace})
        return asset

"""Image cache gate.

The per-request flow in front of the render pipeline:

    validate -> cache key -> cache check -> resolve content
             -> resolve fonts -> render -> store -> respond

Identical validated parameters always map to the same cache key, so a
repeated request is served from the rendered-image cache and never
re-rendered. ``noCache=1`` skips the cache read but still stores the
fresh render.
"""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlencode

from ogp_service.errors import BadRequestError, NotFoundError
from ogp_service.protocols import ContentResolver

from .asset_cache import AssetCache
from .font_resolver import FontResolver, FontSet
from .render_pipeline import HEIGHT, WIDTH, RenderPipeline

logger = logging.getLogger(__name__)

NO_CACHE_PARAM = "noCache"
PNG_CONTENT_TYPE = "image/png"

Scheduler = Callable[..., Any]


@dataclass(frozen=True)
class ImageEndpoint:
    """Configuration of one image route.

    Attributes:
        name: Route name, also the URL prefix ("blog", "tools")
        required_params: Query parameters that must be present, in cache-key order
        cache_key_base: Canonical image URL the cache key is built on
        resolver: Turns validated params into template content
        template: Builds the render tree from content
        font_set: Fonts the template needs
        not_found_message: Body of the 404 response
    """

    name: str
    required_params: tuple[str, ...]
    cache_key_base: str
    resolver: ContentResolver
    template: Callable[[Any], Any]
    font_set: FontSet
    not_found_message: str = "Not found"
    width: int = WIDTH
    height: int = HEIGHT


@dataclass(frozen=True)
class ImageResult:
    body: bytes
    cache_key: str
    from_cache: bool


class ImageCacheGate:
    """Serves rendered images for one endpoint, rendering only on a cache miss."""

    def __init__(
        self,
        endpoint: ImageEndpoint,
        image_cache: AssetCache,
        fonts: FontResolver,
        pipeline: RenderPipeline,
    ) -> None:
        self._endpoint = endpoint
        self._images = image_cache
        self._fonts = fonts
        self._pipeline = pipeline

    @property
    def endpoint(self) -> ImageEndpoint:
        return self._endpoint

    def validate(self, params: Mapping[str, str]) -> dict[str, str]:
        """Extract the required parameters.

        Raises:
            BadRequestError: If any required parameter is missing or empty
        """
        values = {name: params.get(name) or "" for name in self._endpoint.required_params}
        if not all(values.values()):
            raise BadRequestError("Invalid Parameters")
        return values

    def cache_key(self, values: Mapping[str, str]) -> str:
        """Canonical cache key: the image URL with the required params in fixed order."""
        query = urlencode([(name, values[name]) for name in self._endpoint.required_params])
        return f"{self._endpoint.cache_key_base}?{query}"

    async def handle(
        self,
        params: Mapping[str, str],
        schedule: Scheduler | None = None,
    ) -> ImageResult:
        """Serve one image request.

        Args:
            params: Raw query parameters
            schedule: Optional ``schedule(func, *args)`` used to defer the
                image-cache write until after the response is sent

        Returns:
            The PNG bytes and where they came from

        Raises:
            BadRequestError: Missing parameters
            NotFoundError: The content does not exist
            OgpServiceError: Any font or render failure
        """
        values = self.validate(params)
        key = self.cache_key(values)

        if params.get(NO_CACHE_PARAM) != "1":
            entry = await self._images.get(key)
            if entry is not None:
                return ImageResult(body=entry.payload, cache_key=key, from_cache=True)
        else:
            logger.debug("Image cache bypassed", extra={"endpoint": self._endpoint.name, "key": key})

        content = await self._endpoint.resolver.resolve(values)
        if content is None:
            raise NotFoundError(self._endpoint.not_found_message)

        fonts = await self._fonts.resolve_set(self._endpoint.font_set)
        tree = self._endpoint.template(content)
        png = await self._pipeline.render(tree, fonts, self._endpoint.width, self._endpoint.height)

        if schedule is not None:
            schedule(self._store, key, png)
        else:
            await self._store(key, png)
        return ImageResult(body=png, cache_key=key, from_cache=False)

    async def _store(self, key: str, png: bytes) -> None:
        await self._images.put(key, png, PNG_CONTENT_TYPE)
        logger.info("Stored rendered image", extra={"endpoint": self._endpoint.name, "key": key})

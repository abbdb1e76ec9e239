"""Render pipeline service.

Composes a render tree and resolved fonts into PNG bytes by driving the
layout and raster engines. Engine setup is expensive, so it runs at most
once per pipeline: the first callers race on an ``asyncio.Lock`` and the
rest find the initialized flag already set. The pipeline is built once
per process and lives as long as the process does.
"""

import asyncio
import logging
from collections.abc import Sequence
from typing import Any

from ogp_service.entities import FontAsset, RenderRequest
from ogp_service.errors import LayoutError, OgpServiceError, RasterError
from ogp_service.protocols import LayoutEngine, RasterEngine
from ogp_service.rendering import BoxLayoutEngine, PillowRasterEngine

logger = logging.getLogger(__name__)

WIDTH = 1200
HEIGHT = 630


class RenderPipeline:
    """Renderer with lazily initialized engines.

    Example:
        ```python
        pipeline = RenderPipeline.create()
        png = await pipeline.render(blog_card(post), fonts)
        ```
    """

    def __init__(self, layout_engine: LayoutEngine, raster_engine: RasterEngine) -> None:
        self._layout = layout_engine
        self._raster = raster_engine
        self._initialized = False
        self._init_lock = asyncio.Lock()

    @classmethod
    def create(cls) -> "RenderPipeline":
        """Factory method wiring the default Pillow-based engines."""
        return cls(layout_engine=BoxLayoutEngine(), raster_engine=PillowRasterEngine())

    @property
    def initialized(self) -> bool:
        return self._initialized

    async def ensure_initialized(self) -> None:
        """Initialize both engines exactly once, even under concurrent first use."""
        if self._initialized:
            return
        async with self._init_lock:
            if self._initialized:
                return
            logger.info("Initializing render engines")
            await asyncio.to_thread(self._layout.initialize)
            await asyncio.to_thread(self._raster.initialize)
            self._initialized = True

    async def render(
        self,
        tree: Any,
        fonts: Sequence[FontAsset],
        width: int = WIDTH,
        height: int = HEIGHT,
    ) -> bytes:
        """Render a tree to PNG bytes.

        Raises:
            LayoutError: If the tree references a family/weight missing from fonts
            RasterError: If the laid-out image cannot be rasterized
        """
        await self.ensure_initialized()
        request = RenderRequest(tree=tree, fonts=tuple(fonts), width=width, height=height)

        try:
            vector = await asyncio.to_thread(
                self._layout.layout, request.tree, list(request.fonts), request.width, request.height
            )
        except OgpServiceError:
            raise
        except Exception as e:
            raise LayoutError(f"Layout failed: {e}") from e

        try:
            return await asyncio.to_thread(self._raster.rasterize, vector)
        except OgpServiceError:
            raise
        except Exception as e:
            raise RasterError(f"Rasterization failed: {e}") from e

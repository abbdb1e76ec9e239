"""HTTP handler for image routes.

Converts ImageCacheGate results and failures into responses. This is the
only place a failure kind becomes an HTTP status.
"""

import logging
from collections.abc import Mapping

from fastapi import BackgroundTasks, status
from fastapi.responses import Response

from ogp_service.errors import OgpServiceError
from ogp_service.services import ImageCacheGate

logger = logging.getLogger(__name__)

IMMUTABLE_CACHE_CONTROL = "public, max-age=31536000, immutable"
PNG_MEDIA_TYPE = "image/png"


class ImageHandler:
    """HTTP handler for one image endpoint.

    Example:
        ```python
        handler = ImageHandler(gate)

        @app.get("/blog/image.png")
        async def blog_image(request: Request, background_tasks: BackgroundTasks):
            return await handler.handle(request.query_params, background_tasks)
        ```
    """

    def __init__(self, gate: ImageCacheGate) -> None:
        """Initialize the image handler.

        Args:
            gate: The cache gate for the endpoint (required).
        """
        self._gate = gate

    @property
    def name(self) -> str:
        return self._gate.endpoint.name

    async def handle(
        self,
        params: Mapping[str, str],
        background_tasks: BackgroundTasks | None = None,
    ) -> Response:
        """Handle GET /{name}/image.png requests.

        Args:
            params: Query parameters
            background_tasks: Where the image-cache write is deferred to

        Returns:
            200 with PNG bytes, or the error status for the failure kind
        """
        schedule = background_tasks.add_task if background_tasks is not None else None
        try:
            result = await self._gate.handle(params, schedule=schedule)
        except OgpServiceError as e:
            return self._error(e.status_code, e.message, e)
        except Exception as e:
            return self._error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Server Error", e)

        return Response(
            content=result.body,
            media_type=PNG_MEDIA_TYPE,
            headers={"Cache-Control": IMMUTABLE_CACHE_CONTROL},
        )

    def _error(self, status_code: int, message: str, error: Exception) -> Response:
        extra = {"endpoint": self.name, "status": int(status_code)}
        if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error("Image request failed: %s", message, exc_info=error, extra=extra)
        else:
            logger.info("Image request rejected: %s", message, extra=extra)
        return Response(content=message, status_code=status_code, media_type=PNG_MEDIA_TYPE)

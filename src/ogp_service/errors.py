"""Error taxonomy for the image service.

Every failure a request can end in is one of these classes. Lower layers
raise them; only ``ImageHandler`` turns them into HTTP responses, using
the ``status_code`` each class carries.
"""

from http import HTTPStatus


class OgpServiceError(Exception):
    """Base class for failures that terminate an image request."""

    status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class BadRequestError(OgpServiceError):
    """Required query parameters are missing or empty."""

    status_code = HTTPStatus.BAD_REQUEST


class NotFoundError(OgpServiceError):
    """The content record does not exist after the full fallback chain."""

    status_code = HTTPStatus.NOT_FOUND


class ConfigurationError(OgpServiceError):
    """A deployment secret needed on this request path is missing."""


class UnknownWeightError(OgpServiceError):
    """A font weight token is not in the weight-name table."""


class UpstreamFetchError(OgpServiceError):
    """Network or parse failure reaching a feed, page or font origin."""


class LayoutError(OgpServiceError):
    """The render tree cannot be laid out with the supplied fonts."""


class RasterError(OgpServiceError):
    """Vector-to-raster conversion failed."""

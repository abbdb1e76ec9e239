"""Handler layer for HTTP endpoints.

Handlers depend on services and own every translation from a service
failure to an HTTP status.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (Data Access)
"""

from .image_handler import IMMUTABLE_CACHE_CONTROL, ImageHandler

__all__ = ["IMMUTABLE_CACHE_CONTROL", "ImageHandler"]

"""Service layer for business logic.

Services depend on protocols and repositories, never on the HTTP layer.

Architecture:
    Handler -> ImageCacheGate -> MetadataResolver / FontResolver / RenderPipeline
    (HTTP)  -> (request flow) -> (resolution and rendering) -> Repositories
"""

from .asset_cache import FONT_NAMESPACE, IMAGE_NAMESPACE, METADATA_NAMESPACE, AssetCache
from .content_resolvers import BlogPostResolver, QueryParamsResolver
from .font_resolver import (
    WEIGHT_NAMES,
    DirectoryFontSet,
    FontResolver,
    StaticFontSet,
    weight_from_token,
)
from .image_gate import ImageCacheGate, ImageEndpoint, ImageResult
from .metadata_resolver import MetadataResolver
from .render_pipeline import RenderPipeline

__all__ = [
    "AssetCache",
    "BlogPostResolver",
    "DirectoryFontSet",
    "FONT_NAMESPACE",
    "FontResolver",
    "IMAGE_NAMESPACE",
    "ImageCacheGate",
    "ImageEndpoint",
    "ImageResult",
    "METADATA_NAMESPACE",
    "MetadataResolver",
    "QueryParamsResolver",
    "RenderPipeline",
    "StaticFontSet",
    "WEIGHT_NAMES",
    "weight_from_token",
]

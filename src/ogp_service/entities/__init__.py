"""Domain entities for internal representation.

These are pure frozen dataclasses used by services and repositories.
They are never mutated: a refreshed value is a new instance.
"""

from .cache_entry import CacheEntry
from .font_asset import FONT_WEIGHTS, FontAsset
from .post_record import PostRecord
from .render_request import RenderRequest

__all__ = ["CacheEntry", "FONT_WEIGHTS", "FontAsset", "PostRecord", "RenderRequest"]

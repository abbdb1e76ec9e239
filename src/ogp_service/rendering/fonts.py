"""Pillow font loading shared by layout measurement and rasterization."""

from functools import lru_cache
from io import BytesIO

from PIL import ImageFont

from ogp_service.entities import FontAsset


@lru_cache(maxsize=128)
def load_font(asset: FontAsset, size: float) -> ImageFont.FreeTypeFont:
    """Load a FreeType font from an asset's bytes at a pixel size.

    Raises:
        OSError: If FreeType cannot read the font data
    """
    return ImageFont.truetype(BytesIO(asset.data), size=max(1, round(size)))


class PillowTextMeasurer:
    """Measures text advance widths with FreeType."""

    def measure(self, content: str, font: FontAsset, size: float) -> float:
        return load_font(font, size).getlength(content)

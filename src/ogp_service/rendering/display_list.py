"""Laid-out vector image: positioned drawing operations."""

from dataclasses import dataclass
from typing import Union

from ogp_service.entities import FontAsset


@dataclass(frozen=True)
class FillRect:
    x: float
    y: float
    width: float
    height: float
    fill: str
    radius: float = 0


@dataclass(frozen=True)
class DrawText:
    x: float
    y: float
    content: str
    family: str
    weight: int
    size: float
    color: str


Op = Union[FillRect, DrawText]


@dataclass(frozen=True)
class DisplayList:
    """Drawing operations in paint order plus the fonts they reference."""

    width: int
    height: int
    ops: tuple[Op, ...]
    fonts: tuple[FontAsset, ...]

    def font_for(self, family: str, weight: int) -> FontAsset | None:
        for font in self.fonts:
            if font.family == family and font.weight == weight:
                return font
        return None

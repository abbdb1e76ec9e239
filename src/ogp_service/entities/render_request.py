"""Render request domain entity."""

from dataclasses import dataclass
from typing import Any

from .font_asset import FontAsset


@dataclass(frozen=True)
class RenderRequest:
    """A render tree paired with the fonts it may reference.

    Consumed once by the render pipeline and never persisted.
    """

    tree: Any
    fonts: tuple[FontAsset, ...]
    width: int = 1200
    height: int = 630

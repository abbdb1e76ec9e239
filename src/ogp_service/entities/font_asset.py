"""Font asset domain entity."""

from dataclasses import dataclass

FONT_WEIGHTS = (100, 200, 300, 400, 500, 600, 700, 800, 900)


@dataclass(frozen=True)
class FontAsset:
    """A binary font payload for one family and weight.

    Attributes:
        family: Family name the layout engine matches against
        weight: Numeric weight, one of FONT_WEIGHTS
        data: Raw font file bytes (TTF/OTF/WOFF)
    """

    family: str
    weight: int
    data: bytes

    def __post_init__(self) -> None:
        if self.weight not in FONT_WEIGHTS:
            raise ValueError(f"Font weight must be one of {FONT_WEIGHTS}, got {self.weight}")

    def __repr__(self) -> str:
        return f"FontAsset(family={self.family!r}, weight={self.weight}, size={len(self.data)})"

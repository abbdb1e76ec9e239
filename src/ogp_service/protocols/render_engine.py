"""Render engine protocols.

The render pipeline is split in two pure stages: layout turns a render
tree and fonts into a vector display list, raster turns that display
list into PNG bytes. Both engines may need expensive one-time setup,
which the pipeline runs at most once per process through ``initialize``.
"""

from typing import Any, Protocol, runtime_checkable

from ogp_service.entities import FontAsset


@runtime_checkable
class LayoutEngine(Protocol):
    """Protocol for render tree layout."""

    def initialize(self) -> None:
        """Run one-time engine setup."""
        ...

    def layout(self, tree: Any, fonts: list[FontAsset], width: int, height: int) -> Any:
        """Lay out a render tree.

        Raises:
            LayoutError: If the tree references a family/weight not in fonts
        """
        ...


@runtime_checkable
class RasterEngine(Protocol):
    """Protocol for vector to raster conversion."""

    def initialize(self) -> None:
        """Run one-time engine setup."""
        ...

    def rasterize(self, vector: Any) -> bytes:
        """Convert a laid-out vector image to PNG bytes.

        Raises:
            RasterError: If the vector image cannot be rasterized
        """
        ...

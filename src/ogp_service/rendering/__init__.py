"""Render tree model and the default layout/raster engines.

A visual template builds a tree of ``Box`` and ``Text`` nodes. The
``BoxLayoutEngine`` turns it into a ``DisplayList`` of positioned drawing
operations, and ``PillowRasterEngine`` paints that list into a PNG.
"""

from .display_list import DisplayList, DrawText, FillRect
from .layout import BoxLayoutEngine
from .raster import PillowRasterEngine
from .tree import Box, Node, Style, Text, box, text

__all__ = [
    "Box",
    "BoxLayoutEngine",
    "DisplayList",
    "DrawText",
    "FillRect",
    "Node",
    "PillowRasterEngine",
    "Style",
    "Text",
    "box",
    "text",
]

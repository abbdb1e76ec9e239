"""Render tree nodes.

A small, CSS-flavoured subset: boxes stack their children along one axis
with padding, gap, justification and alignment; absolutely positioned
boxes are placed by ``inset`` inside their parent. Text properties
(family, size, weight, color, alignment, line height) inherit.
"""

from dataclasses import dataclass, field
from typing import Any, Union


@dataclass(frozen=True)
class Style:
    font_family: str | None = None
    font_size: float | None = None
    font_weight: int | str | None = None
    color: str | None = None
    text_align: str | None = None  # left | center | right
    line_height: float | None = None
    background: str | None = None  # color or linear-gradient(...)
    padding: float = 0
    gap: float = 0
    border_radius: float = 0
    direction: str = "column"  # column | row
    justify: str = "start"  # start | center | end | space-between
    align: str = "stretch"  # stretch | start | center | end
    flex: float = 0
    inset: tuple[float, float, float, float] | None = None  # top, right, bottom, left
    line_clamp: int | None = None  # max lines, the last one ellipsized


@dataclass(frozen=True)
class Text:
    content: str
    style: Style = field(default_factory=Style)


@dataclass(frozen=True)
class Box:
    children: tuple["Node", ...] = ()
    style: Style = field(default_factory=Style)


Node = Union[Box, Text]


def box(*children: Node, **style: Any) -> Box:
    """Build a Box, e.g. ``box(text("hi"), padding=40, background="#000")``."""
    return Box(children=tuple(children), style=Style(**style))


def text(content: str, **style: Any) -> Text:
    """Build a Text node."""
    return Text(content=str(content), style=Style(**style))

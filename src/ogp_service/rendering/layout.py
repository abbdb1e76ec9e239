"""Box layout engine.

Turns a render tree into a DisplayList. Flow children of a box are
stacked along its ``direction`` axis; ``flex`` children share the free
space, otherwise ``justify`` distributes it. Text wraps at spaces where
possible and per character otherwise, so CJK titles wrap too. A
``line_clamp`` caps the line count and ends the last line with an ellipsis.
"""

import logging
from dataclasses import dataclass, replace
from typing import Any, Protocol

from PIL import features

from ogp_service.entities import FontAsset
from ogp_service.errors import LayoutError

from .display_list import DisplayList, DrawText, FillRect, Op
from .fonts import PillowTextMeasurer
from .tree import Box, Node, Style, Text

logger = logging.getLogger(__name__)

GENERIC_FAMILIES = frozenset({"serif", "sans-serif", "monospace", "cursive", "fantasy", "system-ui"})
WEIGHT_KEYWORDS = {"normal": 400, "bold": 700}
ELLIPSIS = "\u2026"


class TextMeasurer(Protocol):
    def measure(self, content: str, font: FontAsset, size: float) -> float: ...


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    def shrink(self, amount: float) -> "Rect":
        return Rect(
            self.x + amount,
            self.y + amount,
            max(0.0, self.width - 2 * amount),
            max(0.0, self.height - 2 * amount),
        )

    def inset(self, top: float, right: float, bottom: float, left: float) -> "Rect":
        return Rect(
            self.x + left,
            self.y + top,
            max(0.0, self.width - left - right),
            max(0.0, self.height - top - bottom),
        )


@dataclass(frozen=True)
class TextContext:
    """Inherited text properties."""

    families: tuple[str, ...] = ()
    size: float = 16
    weight: int = 400
    color: str = "#000000"
    align: str = "left"
    line_height: float = 1.2

    def inherit(self, style: Style) -> "TextContext":
        ctx = self
        if style.font_family is not None:
            ctx = replace(ctx, families=parse_families(style.font_family))
        if style.font_size is not None:
            ctx = replace(ctx, size=float(style.font_size))
        if style.font_weight is not None:
            ctx = replace(ctx, weight=parse_weight(style.font_weight))
        if style.color is not None:
            ctx = replace(ctx, color=style.color)
        if style.text_align is not None:
            ctx = replace(ctx, align=style.text_align)
        if style.line_height is not None:
            ctx = replace(ctx, line_height=float(style.line_height))
        return ctx

    @property
    def line_advance(self) -> float:
        return self.size * self.line_height


def parse_families(value: str) -> tuple[str, ...]:
    """Split a CSS font-family list, dropping quotes and generic families."""
    names = (part.strip().strip("\"'") for part in value.split(","))
    return tuple(name for name in names if name and name.casefold() not in GENERIC_FAMILIES)


def parse_weight(value: int | str) -> int:
    if isinstance(value, int):
        return value
    token = value.strip().lower()
    if token in WEIGHT_KEYWORDS:
        return WEIGHT_KEYWORDS[token]
    try:
        return int(token)
    except ValueError:
        raise LayoutError(f"Invalid font weight {value!r}") from None


class BoxLayoutEngine:
    """LayoutEngine producing DisplayLists.

    This class satisfies the LayoutEngine protocol through structural
    typing.
    """

    def __init__(self, measurer: TextMeasurer | None = None) -> None:
        self._measurer = measurer or PillowTextMeasurer()

    def initialize(self) -> None:
        if isinstance(self._measurer, PillowTextMeasurer) and not features.check_module("freetype2"):
            raise LayoutError("Pillow was built without FreeType support")
        logger.info("Layout engine ready")

    def layout(self, tree: Any, fonts: list[FontAsset], width: int, height: int) -> DisplayList:
        """Lay out a render tree on a width x height canvas.

        Raises:
            LayoutError: If a text node needs a family/weight not in fonts
        """
        if not isinstance(tree, (Box, Text)):
            raise LayoutError(f"Unsupported render tree root: {type(tree).__name__}")

        table = {(font.family.casefold(), font.weight): font for font in fonts}
        ops: list[Op] = []
        try:
            self._place(tree, Rect(0, 0, width, height), TextContext(), table, ops)
        except OSError as e:
            raise LayoutError(f"Unreadable font data: {e}") from e
        return DisplayList(width=width, height=height, ops=tuple(ops), fonts=tuple(fonts))

    # Placement

    def _place(self, node: Node, rect: Rect, ctx: TextContext, table: dict, ops: list[Op]) -> None:
        if isinstance(node, Text):
            self._place_text(node, rect, ctx, table, ops)
            return

        style = node.style
        ctx = ctx.inherit(style)
        if style.background:
            ops.append(FillRect(rect.x, rect.y, rect.width, rect.height, style.background, style.border_radius))

        for child in node.children:
            if isinstance(child, Box) and child.style.inset is not None:
                self._place(child, rect.inset(*child.style.inset), ctx, table, ops)

        flow = [c for c in node.children if not (isinstance(c, Box) and c.style.inset is not None)]
        if flow:
            self._place_flow(flow, style, rect.shrink(style.padding), ctx, table, ops)

    def _place_flow(
        self,
        children: list[Node],
        style: Style,
        content: Rect,
        ctx: TextContext,
        table: dict,
        ops: list[Op],
    ) -> None:
        column = style.direction != "row"
        main_total = content.height if column else content.width
        cross_total = content.width if column else content.height

        sizes = []
        for child in children:
            w, h = self._intrinsic(child, content.width, ctx, table)
            sizes.append((h, w) if column else (w, h))

        flexes = [c.style.flex for c in children]
        gaps = style.gap * (len(children) - 1)
        fixed = sum(main for (main, _), flex in zip(sizes, flexes) if not flex)
        free = main_total - fixed - gaps

        total_flex = sum(flexes)
        offset, spacing = 0.0, style.gap
        if total_flex:
            share = max(0.0, free) / total_flex
            sizes = [(flex * share, cross) if flex else (main, cross) for (main, cross), flex in zip(sizes, flexes)]
        elif free > 0:
            if style.justify == "center":
                offset = free / 2
            elif style.justify == "end":
                offset = free
            elif style.justify == "space-between" and len(children) > 1:
                spacing += free / (len(children) - 1)

        cursor = offset
        for child, (main, cross) in zip(children, sizes):
            if style.align == "stretch" or (column and isinstance(child, Text)):
                cross_offset, cross = 0.0, cross_total
            elif style.align == "center":
                cross_offset = (cross_total - cross) / 2
            elif style.align == "end":
                cross_offset = cross_total - cross
            else:
                cross_offset = 0.0

            if column:
                child_rect = Rect(content.x + cross_offset, content.y + cursor, cross, main)
            else:
                child_rect = Rect(content.x + cursor, content.y + cross_offset, main, cross)
            self._place(child, child_rect, ctx, table, ops)
            cursor += main + spacing

    def _place_text(self, node: Text, rect: Rect, ctx: TextContext, table: dict, ops: list[Op]) -> None:
        ctx = ctx.inherit(node.style)
        font = self._font(ctx, table)
        y = rect.y
        for line in self._lines(node, font, ctx.size, rect.width):
            line_width = self._measurer.measure(line, font, ctx.size)
            if ctx.align == "center":
                x = rect.x + (rect.width - line_width) / 2
            elif ctx.align == "right":
                x = rect.x + rect.width - line_width
            else:
                x = rect.x
            baseline_pad = (ctx.line_advance - ctx.size) / 2
            ops.append(DrawText(x, y + baseline_pad, line, font.family, font.weight, ctx.size, ctx.color))
            y += ctx.line_advance

    # Measurement

    def _intrinsic(self, node: Node, max_width: float, ctx: TextContext, table: dict) -> tuple[float, float]:
        if isinstance(node, Text):
            ctx = ctx.inherit(node.style)
            font = self._font(ctx, table)
            lines = self._lines(node, font, ctx.size, max_width)
            width = max((self._measurer.measure(line, font, ctx.size) for line in lines), default=0.0)
            return width, len(lines) * ctx.line_advance

        style = node.style
        ctx = ctx.inherit(style)
        inner = max(0.0, max_width - 2 * style.padding)
        flow = [c for c in node.children if not (isinstance(c, Box) and c.style.inset is not None)]
        dims = [self._intrinsic(c, inner, ctx, table) for c in flow]
        gaps = style.gap * max(0, len(dims) - 1)
        if style.direction == "row":
            width = sum(w for w, _ in dims) + gaps
            height = max((h for _, h in dims), default=0.0)
        else:
            width = max((w for w, _ in dims), default=0.0)
            height = sum(h for _, h in dims) + gaps
        return width + 2 * style.padding, height + 2 * style.padding

    def _font(self, ctx: TextContext, table: dict) -> FontAsset:
        for family in ctx.families:
            font = table.get((family.casefold(), ctx.weight))
            if font is not None:
                return font
        raise LayoutError(f"No font loaded for family {', '.join(ctx.families) or '<none>'} weight {ctx.weight}")

    def _lines(self, node: Text, font: FontAsset, size: float, max_width: float) -> list[str]:
        lines = self._wrap(node.content, font, size, max_width)
        clamp = node.style.line_clamp
        if clamp is None or len(lines) <= clamp:
            return lines

        lines = lines[:clamp]
        last = lines[-1]
        while last and self._measurer.measure(last.rstrip() + ELLIPSIS, font, size) > max_width:
            last = last[:-1]
        lines[-1] = last.rstrip() + ELLIPSIS
        return lines

    def _wrap(self, content: str, font: FontAsset, size: float, max_width: float) -> list[str]:
        lines = []
        for paragraph in content.split("\n"):
            current = ""
            for ch in paragraph:
                candidate = current + ch
                if current and self._measurer.measure(candidate, font, size) > max_width:
                    cut = current.rfind(" ")
                    if cut > 0 and ch != " ":
                        lines.append(current[:cut])
                        current = current[cut + 1 :] + ch
                    else:
                        lines.append(current.rstrip())
                        current = ch.lstrip()
                else:
                    current = candidate
            lines.append(current.rstrip())
        return lines

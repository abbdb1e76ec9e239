"""Pillow raster engine.

Paints a DisplayList onto an RGBA canvas, one alpha-composited layer per
operation so translucent fills and text blend like they do in a browser.
Backgrounds accept plain colors (including ``rgba()`` with fractional
alpha and ``#rrggbbaa``) and ``linear-gradient(...)``.
"""

import logging
import math
import re
from io import BytesIO

from PIL import Image, ImageColor, ImageDraw, features

from ogp_service.errors import RasterError

from .display_list import DisplayList, DrawText, FillRect
from .fonts import load_font

logger = logging.getLogger(__name__)

RGBA = tuple[int, int, int, int]

_RGBA_FUNC = re.compile(r"rgba?\(\s*([^)]*)\)", re.IGNORECASE)
_GRADIENT = re.compile(r"linear-gradient\((.*)\)\s*$", re.IGNORECASE | re.DOTALL)

DIRECTIONS = {
    "to top": 0.0,
    "to top right": 45.0,
    "to right": 90.0,
    "to bottom right": 135.0,
    "to bottom": 180.0,
    "to bottom left": 225.0,
    "to left": 270.0,
    "to top left": 315.0,
}


def parse_color(value: str) -> RGBA:
    """Parse a CSS color into an RGBA tuple.

    Raises:
        ValueError: If the color is not recognized
    """
    value = value.strip()
    if value.lower() == "transparent":
        return (0, 0, 0, 0)

    match = _RGBA_FUNC.fullmatch(value)
    if match:
        parts = [p.strip() for p in match.group(1).split(",")]
        if len(parts) not in (3, 4):
            raise ValueError(f"Invalid color {value!r}")
        r, g, b = (int(float(p)) for p in parts[:3])
        alpha = float(parts[3]) if len(parts) == 4 else 1.0
        return (r, g, b, round(max(0.0, min(1.0, alpha)) * 255))

    rgb = ImageColor.getrgb(value)
    return rgb if len(rgb) == 4 else (*rgb, 255)  # type: ignore[return-value]


def split_args(value: str) -> list[str]:
    """Split on top-level commas, leaving ``rgba(a, b, c)`` intact."""
    args, depth, current = [], 0, ""
    for ch in value:
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
        if ch == "," and depth == 0:
            args.append(current.strip())
            current = ""
        else:
            current += ch
    if current.strip():
        args.append(current.strip())
    return args


def parse_gradient(value: str) -> tuple[float, list[RGBA]] | None:
    """Parse ``linear-gradient(dir, c1, c2, ...)`` into (css angle, colors)."""
    match = _GRADIENT.match(value.strip())
    if not match:
        return None

    args = split_args(match.group(1))
    angle = 180.0
    if args and args[0].lower() in DIRECTIONS:
        angle = DIRECTIONS[args.pop(0).lower()]
    elif args and args[0].lower().endswith("deg"):
        angle = float(args.pop(0)[:-3])

    colors = [parse_color(arg) for arg in args]
    if len(colors) < 2:
        raise ValueError(f"Gradient needs at least two colors: {value!r}")
    return angle, colors


def _interpolate(colors: list[RGBA], t: float) -> RGBA:
    span = t * (len(colors) - 1)
    index = min(int(span), len(colors) - 2)
    local = span - index
    a, b = colors[index], colors[index + 1]
    return tuple(round(x + (y - x) * local) for x, y in zip(a, b))  # type: ignore[return-value]


def gradient_image(angle: float, colors: list[RGBA], size: tuple[int, int]) -> Image.Image:
    """Render a linear gradient filling ``size``."""
    width, height = size
    strip = Image.new("RGBA", (1, 256))
    for i in range(256):
        strip.putpixel((0, i), _interpolate(colors, i / 255))

    # The strip runs top to bottom (180deg); rotate it to the requested angle
    # on a square large enough that the centered crop has no empty corners.
    diag = max(1, math.ceil(math.hypot(width, height)))
    square = strip.resize((diag, diag), Image.Resampling.BILINEAR)
    square = square.rotate(180 - angle, resample=Image.Resampling.BICUBIC)
    left, top = (diag - width) // 2, (diag - height) // 2
    return square.crop((left, top, left + width, top + height))


class PillowRasterEngine:
    """RasterEngine painting DisplayLists with Pillow.

    This class satisfies the RasterEngine protocol through structural
    typing.
    """

    def __init__(self, background: str = "#ffffff") -> None:
        self._background = background

    def initialize(self) -> None:
        if not features.check_module("freetype2"):
            raise RasterError("Pillow was built without FreeType support")
        logger.info("Raster engine ready")

    def rasterize(self, vector: DisplayList) -> bytes:
        """Paint a display list and encode it as PNG.

        Raises:
            RasterError: If the display list is malformed or painting fails
        """
        if not isinstance(vector, DisplayList):
            raise RasterError(f"Expected a DisplayList, got {type(vector).__name__}")
        if vector.width <= 0 or vector.height <= 0:
            raise RasterError(f"Invalid canvas size {vector.width}x{vector.height}")

        try:
            canvas = Image.new("RGBA", (vector.width, vector.height), parse_color(self._background))
            for op in vector.ops:
                if isinstance(op, FillRect):
                    canvas = self._fill(canvas, op)
                elif isinstance(op, DrawText):
                    canvas = self._text(canvas, op, vector)
                else:
                    raise RasterError(f"Unknown drawing operation {type(op).__name__}")

            buffer = BytesIO()
            canvas.save(buffer, format="PNG", optimize=True)
            return buffer.getvalue()
        except (OSError, ValueError) as e:
            raise RasterError(f"Rasterization failed: {e}") from e

    def _fill(self, canvas: Image.Image, op: FillRect) -> Image.Image:
        box = (round(op.x), round(op.y), round(op.x + op.width) - 1, round(op.y + op.height) - 1)
        if box[2] < box[0] or box[3] < box[1]:
            return canvas

        layer = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
        gradient = parse_gradient(op.fill)
        if gradient is None:
            ImageDraw.Draw(layer).rounded_rectangle(box, radius=op.radius, fill=parse_color(op.fill))
        else:
            size = (box[2] - box[0] + 1, box[3] - box[1] + 1)
            mask = Image.new("L", canvas.size, 0)
            ImageDraw.Draw(mask).rounded_rectangle(box, radius=op.radius, fill=255)
            fill = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
            fill.paste(gradient_image(*gradient, size), box[:2])
            layer.paste(fill, (0, 0), mask)
        return Image.alpha_composite(canvas, layer)

    def _text(self, canvas: Image.Image, op: DrawText, vector: DisplayList) -> Image.Image:
        font = vector.font_for(op.family, op.weight)
        if font is None:
            raise RasterError(f"Display list references unloaded font {op.family} {op.weight}")

        layer = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
        ImageDraw.Draw(layer).text(
            (op.x, op.y),
            op.content,
            font=load_font(font, op.size),
            fill=parse_color(op.color),
            anchor="la",
        )
        return Image.alpha_composite(canvas, layer)

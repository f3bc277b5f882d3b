"""Drawing surfaces the renderer paints onto."""

from __future__ import annotations

import io
import math
from typing import TYPE_CHECKING, Literal, Protocol, runtime_checkable

import structlog
from PIL import Image, ImageColor, ImageDraw, ImageFont

from paintflow.core.style import TRANSPARENT

if TYPE_CHECKING:
    from paintflow.core.geometry import BBox, Outline

logger = structlog.get_logger(__name__)

TextAlign = Literal["left", "center"]

# Pillow anchors: left/top for standalone text, middle/middle for labels
_ANCHORS: dict[str, str] = {"left": "la", "center": "mm"}


@runtime_checkable
class Surface(Protocol):
    """Protocol for a 2D target the renderer can draw on."""

    def clear(self) -> None:
        """Reset the surface to its background."""
        ...

    def fill_outline(self, outline: Outline, color: str) -> None:
        """Fill the closed regions of ``outline``, leaving its holes empty."""
        ...

    def stroke_outline(self, outline: Outline, color: str, width: float) -> None:
        """Stroke every subpath of ``outline``."""
        ...

    def stroke_dashed_rect(self, box: BBox, color: str, width: float, dash: tuple[float, float]) -> None:
        """Stroke a dashed rectangle; ``dash`` is (on, off) length."""
        ...

    def draw_text(
        self,
        text: str,
        x: float,
        y: float,
        *,
        font_size: float,
        color: str,
        align: TextAlign,
        outline_color: str | None = None,
    ) -> None:
        """Draw one line of text anchored at (x, y), optionally outlined underneath."""
        ...


def parse_color(color: str | None) -> tuple[int, int, int, int] | None:
    """Parse a CSS color to RGBA, returning None for the ``transparent`` sentinel.

    Unknown color strings fall back to opaque black.
    """
    if not color or color == TRANSPARENT:
        return None
    try:
        rgb = ImageColor.getrgb(color)
    except ValueError:
        logger.debug("Unparseable color, using black", color=color)
        return (0, 0, 0, 255)
    if len(rgb) == 3:
        return (*rgb, 255)
    return rgb


class PillowSurface:
    """Surface backed by an RGBA Pillow image.

    Attributes:
        width: Surface width in pixels.
        height: Surface height in pixels.
        background: Background color, or ``"transparent"``.
    """

    def __init__(self, width: int, height: int, *, background: str = "#ffffff") -> None:
        """Create the surface and clear it to ``background``."""
        self.width = width
        self.height = height
        self.background = background
        self.image = Image.new("RGBA", (width, height), parse_color(background) or (0, 0, 0, 0))
        self._draw = ImageDraw.Draw(self.image)
        self._fonts: dict[int, ImageFont.FreeTypeFont | ImageFont.ImageFont] = {}

    def clear(self) -> None:
        """Reset every pixel to the background color."""
        self.image.paste(parse_color(self.background) or (0, 0, 0, 0), (0, 0, self.width, self.height))

    def fill_outline(self, outline: Outline, color: str) -> None:
        """Fill closed regions through a mask so that holes stay unpainted."""
        rgba = parse_color(color)
        regions = outline.fill_regions
        if rgba is None or not regions:
            return
        mask = Image.new("L", self.image.size, 0)
        mask_draw = ImageDraw.Draw(mask)
        for region in regions:
            mask_draw.polygon(region.points, fill=255)
        for hole in outline.holes:
            mask_draw.polygon(hole.points, fill=0)
        self.image.paste(rgba, (0, 0, self.width, self.height), mask)

    def stroke_outline(self, outline: Outline, color: str, width: float) -> None:
        """Stroke each subpath as a polyline with rounded joints."""
        rgba = parse_color(color)
        if rgba is None or width <= 0:
            return
        px = max(1, round(width))
        for subpath in outline.subpaths:
            points = list(subpath.points)
            if len(points) == 1:
                x, y = points[0]
                r = width / 2
                self._draw.ellipse([x - r, y - r, x + r, y + r], fill=rgba)
                continue
            if subpath.closed and len(points) > 2:
                points.append(points[0])
            self._draw.line(points, fill=rgba, width=px, joint="curve")

    def stroke_dashed_rect(self, box: BBox, color: str, width: float, dash: tuple[float, float]) -> None:
        """Stroke the four edges of ``box`` as dashes, continuing the pattern around corners."""
        rgba = parse_color(color)
        if rgba is None:
            return
        on, off = dash
        period = on + off
        corners = [(box.x, box.y), (box.right, box.y), (box.right, box.bottom), (box.x, box.bottom), (box.x, box.y)]
        travelled = 0.0
        for (ax, ay), (bx, by) in zip(corners, corners[1:]):
            length = math.hypot(bx - ax, by - ay)
            if length == 0:
                continue
            ux, uy = (bx - ax) / length, (by - ay) / length
            pos = 0.0
            while pos < length:
                phase = (travelled + pos) % period
                step = min((on - phase) if phase < on else (period - phase), length - pos)
                if phase < on:
                    start = (ax + ux * pos, ay + uy * pos)
                    end = (ax + ux * (pos + step), ay + uy * (pos + step))
                    self._draw.line([start, end], fill=rgba, width=max(1, round(width)))
                pos += step
            travelled += length

    def _font(self, size: float) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
        key = max(1, round(size))
        if key not in self._fonts:
            self._fonts[key] = ImageFont.load_default(size=key)
        return self._fonts[key]

    def draw_text(
        self,
        text: str,
        x: float,
        y: float,
        *,
        font_size: float,
        color: str,
        align: TextAlign,
        outline_color: str | None = None,
    ) -> None:
        """Draw one line of text; the outline, when given, is stroked beneath the fill."""
        fill = parse_color(color) or (0, 0, 0, 255)
        font = self._font(font_size)
        anchor = _ANCHORS[align]
        outline = parse_color(outline_color)
        if outline is not None:
            self._draw.text((x, y), text, font=font, anchor=anchor, fill=fill, stroke_width=1, stroke_fill=outline)
        else:
            self._draw.text((x, y), text, font=font, anchor=anchor, fill=fill)

    def to_png(self) -> bytes:
        """Encode the current image as PNG bytes."""
        buffer = io.BytesIO()
        self.image.save(buffer, format="PNG")
        return buffer.getvalue()

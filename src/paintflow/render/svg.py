"""SVG surface: records the renderer's calls as SVG markup."""

from __future__ import annotations

from typing import TYPE_CHECKING
from xml.sax.saxutils import escape, quoteattr

from paintflow.core.style import TRANSPARENT

if TYPE_CHECKING:
    from paintflow.core.geometry import BBox, Outline, Subpath
    from paintflow.render.surface import TextAlign

_BASELINES = {"left": ("start", "text-before-edge"), "center": ("middle", "central")}


def _fmt(value: float) -> str:
    return f"{value:.2f}".rstrip("0").rstrip(".")


def _path_data(subpaths: list[Subpath]) -> str:
    parts = []
    for subpath in subpaths:
        if not subpath.points:
            continue
        head, *rest = subpath.points
        cmds = [f"M{_fmt(head[0])} {_fmt(head[1])}"]
        cmds.extend(f"L{_fmt(x)} {_fmt(y)}" for x, y in rest)
        if subpath.closed:
            cmds.append("Z")
        parts.append(" ".join(cmds))
    return " ".join(parts)


class SvgSurface:
    """Surface that collects SVG elements instead of pixels.

    Fill regions and holes of an outline share one ``evenodd`` path so that
    holes stay unpainted, matching the raster surface.
    """

    def __init__(self, width: int, height: int, *, background: str = "#ffffff", title: str | None = None) -> None:
        """Create an empty surface of ``width`` x ``height`` user units."""
        self.width = width
        self.height = height
        self.background = background
        self.title = title
        self.elements: list[str] = []

    def clear(self) -> None:
        self.elements.clear()

    def fill_outline(self, outline: Outline, color: str) -> None:
        regions = outline.fill_regions
        if color == TRANSPARENT or not regions:
            return
        data = _path_data(regions + outline.holes)
        self.elements.append(f'<path d="{data}" fill={quoteattr(color)} fill-rule="evenodd" stroke="none"/>')

    def stroke_outline(self, outline: Outline, color: str, width: float) -> None:
        if color == TRANSPARENT or width <= 0:
            return
        for subpath in outline.subpaths:
            if len(subpath.points) == 1:
                x, y = subpath.points[0]
                self.elements.append(
                    f'<circle cx="{_fmt(x)}" cy="{_fmt(y)}" r="{_fmt(width / 2)}" fill={quoteattr(color)}/>'
                )
                continue
            self.elements.append(
                f'<path d="{_path_data([subpath])}" fill="none" stroke={quoteattr(color)} '
                f'stroke-width="{_fmt(width)}" stroke-linecap="round" stroke-linejoin="round"/>'
            )

    def stroke_dashed_rect(self, box: BBox, color: str, width: float, dash: tuple[float, float]) -> None:
        self.elements.append(
            f'<rect x="{_fmt(box.x)}" y="{_fmt(box.y)}" width="{_fmt(box.w)}" height="{_fmt(box.h)}" '
            f'fill="none" stroke={quoteattr(color)} stroke-width="{_fmt(width)}" '
            f'stroke-dasharray="{_fmt(dash[0])} {_fmt(dash[1])}"/>'
        )

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
        anchor, baseline = _BASELINES[align]
        stroke = ""
        if outline_color:
            stroke = f' stroke={quoteattr(outline_color)} stroke-width="2" paint-order="stroke"'
        self.elements.append(
            f'<text x="{_fmt(x)}" y="{_fmt(y)}" font-family="system-ui, sans-serif" '
            f'font-size="{_fmt(font_size)}" fill={quoteattr(color)} text-anchor="{anchor}" '
            f'dominant-baseline="{baseline}"{stroke} xml:space="preserve">{escape(text)}</text>'
        )

    def to_svg(self) -> str:
        """Serialize the collected elements as a standalone SVG document."""
        title = f"\n  <title>{escape(self.title)}</title>" if self.title else ""
        background = ""
        if self.background != TRANSPARENT:
            background = f"\n  <rect width=\"100%\" height=\"100%\" fill={quoteattr(self.background)}/>"
        body = "".join(f"\n  {element}" for element in self.elements)
        return f"""<?xml version="1.0" encoding="UTF-8"?>
<svg xmlns="http://www.w3.org/2000/svg"
     width="{self.width}"
     height="{self.height}"
     viewBox="0 0 {self.width} {self.height}">{title}{background}{body}
</svg>"""

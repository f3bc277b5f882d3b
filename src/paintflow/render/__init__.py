"""Rendering of shape sequences onto drawing surfaces."""

from __future__ import annotations

from paintflow.render.renderer import TextLine, draw_shape, layout_text, render
from paintflow.render.surface import PillowSurface, Surface, parse_color
from paintflow.render.svg import SvgSurface

__all__ = [
    "PillowSurface",
    "Surface",
    "SvgSurface",
    "TextLine",
    "draw_shape",
    "layout_text",
    "parse_color",
    "render",
]

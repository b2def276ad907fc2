# GlyphScope - A TrueType/OpenType Font Parser
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

"""
Cairo Glyph Preview Device

Renders one glyph outline to a PNG or SVG file with pycairo. The glyph is
fitted into a square canvas with the font's em square (or the glyph box,
whichever is larger) filling it, y axis pointing up.

Cairo has no quadratic segment, so TrueType quad_to calls are raised to
cubic curves from the current point.
"""

import logging

import cairo

from ..core.outline import replay
from ..core.types import OutlineBuilder

logger = logging.getLogger(__name__)

ANTIALIAS_MODE = cairo.ANTIALIAS_GRAY

ANTIALIAS_MAP = {
    "none": cairo.ANTIALIAS_NONE,
    "fast": cairo.ANTIALIAS_FAST,
    "good": cairo.ANTIALIAS_GOOD,
    "best": cairo.ANTIALIAS_BEST,
    "gray": cairo.ANTIALIAS_GRAY,
    "subpixel": cairo.ANTIALIAS_SUBPIXEL,
}

_MARGIN = 0.1


class CairoOutlineBuilder(OutlineBuilder):
    """Replays outline segments onto a cairo.Context path."""

    def __init__(self, cc: cairo.Context) -> None:
        self.cc = cc
        self.x = 0.0
        self.y = 0.0

    def move_to(self, x: float, y: float) -> None:
        self.cc.move_to(x, y)
        self.x, self.y = x, y

    def line_to(self, x: float, y: float) -> None:
        self.cc.line_to(x, y)
        self.x, self.y = x, y

    def quad_to(self, x1: float, y1: float, x: float, y: float) -> None:
        # Degree elevation: control points at 2/3 toward the quad control point
        c1x = self.x + 2.0 / 3.0 * (x1 - self.x)
        c1y = self.y + 2.0 / 3.0 * (y1 - self.y)
        c2x = x + 2.0 / 3.0 * (x1 - x)
        c2y = y + 2.0 / 3.0 * (y1 - y)
        self.cc.curve_to(c1x, c1y, c2x, c2y, x, y)
        self.x, self.y = x, y

    def curve_to(self, x1: float, y1: float, x2: float, y2: float, x: float, y: float) -> None:
        self.cc.curve_to(x1, y1, x2, y2, x, y)
        self.x, self.y = x, y

    def close(self) -> None:
        self.cc.close_path()


def _glyph_matrix(font, rect, size: int) -> cairo.Matrix:
    """Map font units to canvas pixels with the y axis flipped."""
    upem = font.units_per_em or 1000
    span = max(upem, rect.width(), rect.height(), 1)
    scale = size * (1.0 - 2 * _MARGIN) / span

    # Center the glyph box horizontally; baseline sits at the descender
    x_center = (rect.x_min + rect.x_max) / 2.0
    tx = size / 2.0 - x_center * scale
    y_bottom = min(font.descender(), rect.y_min)
    ty = size * (1.0 - _MARGIN) + y_bottom * scale
    return cairo.Matrix(scale, 0, 0, -scale, tx, ty)


def render_glyph(font, glyph_id: int, output_file: str, size: int = 512,
                 coords=None, antialias: str = "gray") -> bool:
    """Render `glyph_id` to `output_file` (.svg selects SVG, anything else PNG).

    Returns False when the glyph cannot be outlined.
    """
    staged = font.outline_glyph_events(glyph_id, coords)
    if staged is None:
        logger.warning("Glyph %d has no usable outline", glyph_id)
        return False
    events, rect = staged

    is_svg = output_file.lower().endswith(".svg")
    if is_svg:
        surface = cairo.SVGSurface(output_file, size, size)
    else:
        surface = cairo.ImageSurface(cairo.FORMAT_RGB24, size, size)
    cc = cairo.Context(surface)

    # White background
    cc.set_source_rgb(1.0, 1.0, 1.0)
    cc.rectangle(0, 0, size, size)
    cc.fill()
    cc.set_antialias(ANTIALIAS_MAP.get(antialias, ANTIALIAS_MODE))

    cc.set_matrix(_glyph_matrix(font, rect, size))
    builder = CairoOutlineBuilder(cc)
    replay(events, builder)

    cc.identity_matrix()
    cc.set_fill_rule(cairo.FILL_RULE_WINDING)
    cc.set_source_rgb(0, 0, 0)
    cc.fill()

    if is_svg:
        surface.finish()
    else:
        surface.write_to_png(output_file)
    logger.debug("Rendered glyph %d to %s", glyph_id, output_file)
    return True

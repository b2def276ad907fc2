# GlyphScope - A TrueType/OpenType Font Parser
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

"""
glyf - Glyph Data

Simple glyphs are quadratic B-spline contours; composite glyphs place other
glyphs with an offset and an optional 2x2 transform. Contours are emitted as
quadratic segments, with implicit on-curve points inserted between
consecutive off-curve points.

Variable outlines add gvar deltas to the points of each glyph before
emission. Composite component offsets are varied the same way: a composite
has one "point" per component, followed by the four phantom points.
"""

import logging

from ..core.error import OutlineError, StreamError, TableError
from ..core.stream import Stream, f2dot14_to_float

logger = logging.getLogger(__name__)

MAX_COMPONENTS_DEPTH = 32

# Simple glyph flags
ON_CURVE_POINT = 0x01
X_SHORT_VECTOR = 0x02
Y_SHORT_VECTOR = 0x04
REPEAT_FLAG = 0x08
X_IS_SAME_OR_POSITIVE = 0x10
Y_IS_SAME_OR_POSITIVE = 0x20

# Composite glyph flags
ARG_1_AND_2_ARE_WORDS = 0x0001
ARGS_ARE_XY_VALUES = 0x0002
WE_HAVE_A_SCALE = 0x0008
MORE_COMPONENTS = 0x0020
WE_HAVE_AN_X_AND_Y_SCALE = 0x0040
WE_HAVE_A_TWO_BY_TWO = 0x0080
SCALED_COMPONENT_OFFSET = 0x0800

_HEADER_SIZE = 10

# (a, b, c, d, e, f): x' = a*x + c*y + e, y' = b*x + d*y + f
IDENTITY = (1.0, 0.0, 0.0, 1.0, 0.0, 0.0)


def combine(parent, child):
    """Transform that applies `child` first, then `parent`."""
    pa, pb, pc, pd, pe, pf = parent
    ca, cb, cc, cd, ce, cf = child
    return (
        pa * ca + pc * cb,
        pb * ca + pd * cb,
        pa * cc + pc * cd,
        pb * cc + pd * cd,
        pa * ce + pc * cf + pe,
        pb * ce + pd * cf + pf,
    )


class Component:
    __slots__ = ('glyph_id', 'flags', 'dx', 'dy', 'matrix')

    def __init__(self, glyph_id, flags, dx, dy, matrix):
        self.glyph_id = glyph_id
        self.flags = flags
        self.dx = dx
        self.dy = dy
        self.matrix = matrix

    def transform(self, dx=None, dy=None):
        a, b, c, d = self.matrix
        if dx is None:
            dx, dy = self.dx, self.dy
        if self.flags & SCALED_COMPONENT_OFFSET:
            dx, dy = a * dx + c * dy, b * dx + d * dy
        return (a, b, c, d, float(dx), float(dy))


def parse_simple_glyph(data, num_contours):
    """Decode a simple glyph.

    Returns (end_pts, points) where points is a list of (x, y, on_curve).
    Raises StreamError on truncated data.
    """
    s = Stream(data, _HEADER_SIZE)
    end_pts = s.read_array('H', num_contours)
    for prev, cur in zip(end_pts, end_pts[1:]):
        if cur < prev:
            raise StreamError("contour end points are not increasing")
    num_points = end_pts[-1] + 1

    # Skip instructions
    instr_len = s.read_u16()
    s.skip(instr_len)

    flags = []
    while len(flags) < num_points:
        flag = s.read_u8()
        flags.append(flag)
        if flag & REPEAT_FLAG:
            flags.extend([flag] * s.read_u8())
    del flags[num_points:]

    xs = []
    x = 0
    for flag in flags:
        if flag & X_SHORT_VECTOR:
            dx = s.read_u8()
            x += dx if flag & X_IS_SAME_OR_POSITIVE else -dx
        elif not flag & X_IS_SAME_OR_POSITIVE:
            x += s.read_i16()
        xs.append(x)

    points = []
    y = 0
    for flag, x in zip(flags, xs):
        if flag & Y_SHORT_VECTOR:
            dy = s.read_u8()
            y += dy if flag & Y_IS_SAME_OR_POSITIVE else -dy
        elif not flag & Y_IS_SAME_OR_POSITIVE:
            y += s.read_i16()
        points.append((x, y, bool(flag & ON_CURVE_POINT)))

    return list(end_pts), points


def parse_components(data):
    """Decode the component records of a composite glyph."""
    s = Stream(data, _HEADER_SIZE)
    components = []
    while True:
        flags = s.read_u16()
        glyph_id = s.read_u16()

        if flags & ARG_1_AND_2_ARE_WORDS:
            if flags & ARGS_ARE_XY_VALUES:
                arg1, arg2 = s.read_i16(), s.read_i16()
            else:
                arg1, arg2 = s.read_u16(), s.read_u16()
        else:
            if flags & ARGS_ARE_XY_VALUES:
                arg1, arg2 = s.read_i8(), s.read_i8()
            else:
                arg1, arg2 = s.read_u8(), s.read_u8()

        a, b, c, d = 1.0, 0.0, 0.0, 1.0
        if flags & WE_HAVE_A_SCALE:
            a = d = f2dot14_to_float(s.read_f2dot14())
        elif flags & WE_HAVE_AN_X_AND_Y_SCALE:
            a = f2dot14_to_float(s.read_f2dot14())
            d = f2dot14_to_float(s.read_f2dot14())
        elif flags & WE_HAVE_A_TWO_BY_TWO:
            a = f2dot14_to_float(s.read_f2dot14())
            b = f2dot14_to_float(s.read_f2dot14())
            c = f2dot14_to_float(s.read_f2dot14())
            d = f2dot14_to_float(s.read_f2dot14())

        if flags & ARGS_ARE_XY_VALUES:
            dx, dy = arg1, arg2
        else:
            # Point matching is not supported; place the component unshifted.
            dx, dy = 0, 0
        components.append(Component(glyph_id, flags, dx, dy, (a, b, c, d)))

        if not flags & MORE_COMPONENTS:
            break
    return components


def emit_contour(builder, points):
    """Send one closed quadratic contour to `builder`.

    `points` are (x, y, on_curve) already in output space.
    """
    n = len(points)
    if n < 2:
        return

    first_on = next((i for i, p in enumerate(points) if p[2]), None)
    if first_on is None:
        # All off-curve: start on the implied point between last and first
        lx, ly, _ = points[-1]
        fx, fy, _ = points[0]
        start_x, start_y = (lx + fx) / 2.0, (ly + fy) / 2.0
        sequence = points
    else:
        start_x, start_y, _ = points[first_on]
        sequence = points[first_on + 1:] + points[:first_on]

    builder.move_to(start_x, start_y)
    control = None
    for x, y, on_curve in sequence:
        if on_curve:
            if control is None:
                builder.line_to(x, y)
            else:
                builder.quad_to(control[0], control[1], x, y)
                control = None
        else:
            if control is not None:
                mid_x = (control[0] + x) / 2.0
                mid_y = (control[1] + y) / 2.0
                builder.quad_to(control[0], control[1], mid_x, mid_y)
            control = (x, y)

    if control is not None:
        builder.quad_to(control[0], control[1], start_x, start_y)
    builder.close()


class GlyfTable:
    """glyf outlines addressed through loca.

    hmtx/vmtx are only used to build phantom points for variable outlines.
    """
    __slots__ = ('data', 'loca', 'hmtx', 'vmtx')

    def __init__(self, data, loca, hmtx=None, vmtx=None):
        self.data = data
        self.loca = loca
        self.hmtx = hmtx
        self.vmtx = vmtx

    def glyph_data(self, glyph_id):
        """Return the glyph's bytes (possibly empty), or None for an unknown glyph."""
        glyph_range = self.loca.glyph_range(glyph_id)
        if glyph_range is None:
            return None
        start, end = glyph_range
        if end > len(self.data):
            return None
        return self.data[start:end]

    def bounding_box(self, glyph_id):
        """Return the stored (x_min, y_min, x_max, y_max), (0, 0, 0, 0) when empty."""
        data = self.glyph_data(glyph_id)
        if data is None:
            return None
        if len(data) == 0:
            return (0, 0, 0, 0)
        try:
            s = Stream(data, 2)
            return s.read_i16(), s.read_i16(), s.read_i16(), s.read_i16()
        except StreamError:
            return None

    def outline(self, glyph_id, builder, gvar=None, coords=None):
        """Emit the glyph to `builder`. Raises OutlineError on failure."""
        try:
            self._outline(glyph_id, builder, IDENTITY, 0, gvar, coords)
        except (StreamError, TableError) as e:
            raise OutlineError(f"glyph {glyph_id}: {e}") from e

    def _outline(self, glyph_id, builder, transform, depth, gvar, coords):
        if depth >= MAX_COMPONENTS_DEPTH:
            logger.warning("Composite glyph nesting exceeds %d levels at glyph %d",
                           MAX_COMPONENTS_DEPTH, glyph_id)
            raise OutlineError("composite glyph nesting too deep")

        data = self.glyph_data(glyph_id)
        if data is None:
            raise OutlineError(f"no glyf data for glyph {glyph_id}")
        if len(data) == 0:
            return

        s = Stream(data)
        num_contours = s.read_i16()
        x_min = s.read_i16()
        s.skip(4)  # yMin, xMax
        y_max = s.read_i16()

        if num_contours > 0:
            end_pts, points = parse_simple_glyph(data, num_contours)
            if gvar is not None:
                base = [(x, y) for x, y, _ in points]
                base.extend(self._phantom_points(glyph_id, x_min, y_max))
                varied = gvar.apply(glyph_id, coords, base, end_pts)
                points = [(vx, vy, p[2]) for (vx, vy), p in zip(varied, points)]

            a, b, c, d, e, f = transform
            start = 0
            for end in end_pts:
                contour = [(a * x + c * y + e, b * x + d * y + f, on)
                           for x, y, on in points[start:end + 1]]
                emit_contour(builder, contour)
                start = end + 1

        elif num_contours < 0:
            components = parse_components(data)
            offsets = None
            if gvar is not None:
                base = [(comp.dx, comp.dy) for comp in components]
                base.extend(self._phantom_points(glyph_id, x_min, y_max))
                offsets = gvar.apply(glyph_id, coords, base)

            for i, comp in enumerate(components):
                if offsets is not None and comp.flags & ARGS_ARE_XY_VALUES:
                    child = comp.transform(offsets[i][0], offsets[i][1])
                else:
                    child = comp.transform()
                self._outline(comp.glyph_id, builder, combine(transform, child),
                              depth + 1, gvar, coords)

    def _phantom_points(self, glyph_id, x_min, y_max):
        h_advance = h_bearing = v_advance = v_bearing = 0
        if self.hmtx is not None:
            h_advance = self.hmtx.advance(glyph_id) or 0
            h_bearing = self.hmtx.side_bearing(glyph_id) or 0
        if self.vmtx is not None:
            v_advance = self.vmtx.advance(glyph_id) or 0
            v_bearing = self.vmtx.side_bearing(glyph_id) or 0
        left = x_min - h_bearing
        top = y_max + v_bearing
        return [(left, 0), (left + h_advance, 0), (0, top), (0, top - v_advance)]

# GlyphScope - A TrueType/OpenType Font Parser
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

"""
Outline sink helpers shared by the glyf and CFF extractors.

- BBox: float extent accumulator, converted to an int16 Rect at the end
- BoundingBuilder: forwards segments to a caller builder and tracks the box
- RecordingBuilder: stores segments as path event tuples
"""

from .types import (
    OutlineBuilder, Rect,
    MOVE_TO, LINE_TO, QUAD_TO, CURVE_TO, CLOSE_PATH,
)

_I16_MIN = -32768
_I16_MAX = 32767


class BBox:
    """Running min/max of every point fed to it (control points included)."""
    __slots__ = ('x_min', 'y_min', 'x_max', 'y_max')

    def __init__(self) -> None:
        self.x_min = float('inf')
        self.y_min = float('inf')
        self.x_max = float('-inf')
        self.y_max = float('-inf')

    def is_default(self) -> bool:
        return self.x_min == float('inf')

    def extend_by(self, x: float, y: float) -> None:
        if x < self.x_min:
            self.x_min = x
        if x > self.x_max:
            self.x_max = x
        if y < self.y_min:
            self.y_min = y
        if y > self.y_max:
            self.y_max = y

    def to_rect(self) -> Rect | None:
        """Truncate to int16. None when any edge does not fit."""
        if self.is_default():
            return Rect(0, 0, 0, 0)
        values = []
        for v in (self.x_min, self.y_min, self.x_max, self.y_max):
            if not (_I16_MIN <= v <= _I16_MAX):
                return None
            values.append(int(v))
        return Rect(*values)


class BoundingBuilder(OutlineBuilder):
    """Forward segments to `inner` while extending a BBox."""

    def __init__(self, inner: OutlineBuilder) -> None:
        self.inner = inner
        self.bbox = BBox()

    def move_to(self, x: float, y: float) -> None:
        self.bbox.extend_by(x, y)
        self.inner.move_to(x, y)

    def line_to(self, x: float, y: float) -> None:
        self.bbox.extend_by(x, y)
        self.inner.line_to(x, y)

    def quad_to(self, x1: float, y1: float, x: float, y: float) -> None:
        self.bbox.extend_by(x1, y1)
        self.bbox.extend_by(x, y)
        self.inner.quad_to(x1, y1, x, y)

    def curve_to(self, x1: float, y1: float, x2: float, y2: float, x: float, y: float) -> None:
        self.bbox.extend_by(x1, y1)
        self.bbox.extend_by(x2, y2)
        self.bbox.extend_by(x, y)
        self.inner.curve_to(x1, y1, x2, y2, x, y)

    def close(self) -> None:
        self.inner.close()


class RecordingBuilder(OutlineBuilder):
    """Collect segments as tuples: ('M', x, y), ('Q', x1, y1, x, y), ('Z',) ..."""

    def __init__(self) -> None:
        self.events: list[tuple] = []

    def move_to(self, x: float, y: float) -> None:
        self.events.append((MOVE_TO, x, y))

    def line_to(self, x: float, y: float) -> None:
        self.events.append((LINE_TO, x, y))

    def quad_to(self, x1: float, y1: float, x: float, y: float) -> None:
        self.events.append((QUAD_TO, x1, y1, x, y))

    def curve_to(self, x1: float, y1: float, x2: float, y2: float, x: float, y: float) -> None:
        self.events.append((CURVE_TO, x1, y1, x2, y2, x, y))

    def close(self) -> None:
        self.events.append((CLOSE_PATH,))

    def to_svg_path(self) -> str:
        """Render the events as SVG path data ("M 50 0 L 50 750 ... Z")."""
        parts = []
        for event in self.events:
            parts.append(' '.join([event[0]] + [_fmt(v) for v in event[1:]]))
        return ' '.join(parts)


def _fmt(v: float) -> str:
    if v == int(v):
        return str(int(v))
    return f'{v:g}'


def replay(events, builder: OutlineBuilder) -> None:
    """Send recorded events to another builder."""
    for event in events:
        op = event[0]
        if op == MOVE_TO:
            builder.move_to(*event[1:])
        elif op == LINE_TO:
            builder.line_to(*event[1:])
        elif op == QUAD_TO:
            builder.quad_to(*event[1:])
        elif op == CURVE_TO:
            builder.curve_to(*event[1:])
        elif op == CLOSE_PATH:
            builder.close()

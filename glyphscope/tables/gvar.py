# GlyphScope - A TrueType/OpenType Font Parser
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

"""
gvar - Glyph Variations Table

Header layout:
  u16 majorVersion (1), u16 minorVersion, u16 axisCount,
  u16 sharedTupleCount, Offset32 sharedTuplesOffset,
  u16 glyphCount, u16 flags, Offset32 glyphVariationDataArrayOffset,
  Offset16/32 glyphVariationDataOffsets[glyphCount + 1]

Each glyph's variation data holds tuple variation headers followed by the
serialized point numbers and packed deltas. Deltas of points that a tuple
does not reference are inferred (IUP) for simple glyphs; composite glyphs
leave them at zero.

Coordinates are normalized F2Dot14 integers throughout.
"""

import logging

from ..core.error import StreamError, TableError
from ..core.stream import Stream
from ..core.variation_store import tuple_scalar

logger = logging.getLogger(__name__)

# GlyphVariationData.tupleVariationCount
_SHARED_POINT_NUMBERS = 0x8000
_COUNT_MASK = 0x0FFF

# TupleVariationHeader.tupleIndex
_EMBEDDED_PEAK_TUPLE = 0x8000
_INTERMEDIATE_REGION = 0x4000
_PRIVATE_POINT_NUMBERS = 0x2000
_TUPLE_INDEX_MASK = 0x0FFF

# Packed point numbers
_POINTS_ARE_WORDS = 0x80
_POINT_RUN_COUNT_MASK = 0x7F

# Packed deltas
_DELTAS_ARE_ZERO = 0x80
_DELTAS_ARE_WORDS = 0x40
_DELTA_RUN_COUNT_MASK = 0x3F

_LONG_OFFSETS = 0x0001


class GvarTable:
    __slots__ = ('data', 'axis_count', 'shared_tuples', 'glyph_count',
                 'long_offsets', 'data_array_offset')

    def __init__(self, data, axis_count, shared_tuples, glyph_count,
                 long_offsets, data_array_offset):
        self.data = data
        self.axis_count = axis_count
        self.shared_tuples = shared_tuples
        self.glyph_count = glyph_count
        self.long_offsets = long_offsets
        self.data_array_offset = data_array_offset

    @classmethod
    def parse(cls, data):
        try:
            s = Stream(data)
            if s.read_u16() != 1:
                return None
            s.skip(2)  # minorVersion
            axis_count = s.read_u16()
            if axis_count == 0:
                return None
            shared_tuple_count = s.read_u16()
            shared_tuples_offset = s.read_u32()
            glyph_count = s.read_u16()
            flags = s.read_u16()
            data_array_offset = s.read_u32()
            long_offsets = bool(flags & _LONG_OFFSETS)
            # Offsets array must be complete
            s.read_bytes((glyph_count + 1) * (4 if long_offsets else 2))

            ts = Stream(data, shared_tuples_offset)
            shared_tuples = [ts.read_array('h', axis_count)
                             for _ in range(shared_tuple_count)]
        except StreamError:
            return None
        return cls(data, axis_count, shared_tuples, glyph_count,
                   long_offsets, data_array_offset)

    def _glyph_data(self, glyph_id):
        if glyph_id >= self.glyph_count:
            return None
        s = Stream(self.data, 20)
        if self.long_offsets:
            s.skip(glyph_id * 4)
            start, end = s.read_u32(), s.read_u32()
        else:
            s.skip(glyph_id * 2)
            start, end = s.read_u16() * 2, s.read_u16() * 2
        if start >= end:
            return None
        base = self.data_array_offset
        if base + end > len(self.data):
            raise TableError(f"gvar data for glyph {glyph_id} out of bounds")
        return self.data[base + start:base + end]

    def apply(self, glyph_id, coords, points, end_pts=()):
        """Return `points` ([(x, y), ...], phantom points included) with deltas added.

        `end_pts` lists the last point index of each contour of a simple
        glyph. It is empty for composites, which disables delta inference.
        """
        if len(coords) != self.axis_count:
            raise TableError("coordinate count does not match gvar axis count")
        result = [[float(x), float(y)] for x, y in points]
        try:
            data = self._glyph_data(glyph_id)
            if data is None:
                return result
            for scalar, point_numbers, x_deltas, y_deltas in self._tuples(data, coords, len(points)):
                if point_numbers is None:
                    for i in range(min(len(points), len(x_deltas))):
                        result[i][0] += x_deltas[i] * scalar
                        result[i][1] += y_deltas[i] * scalar
                    continue

                deltas = {}
                for n, dx, dy in zip(point_numbers, x_deltas, y_deltas):
                    if n < len(points):
                        deltas[n] = (dx, dy)
                if end_pts:
                    _infer_deltas(points, end_pts, deltas)
                for i, (dx, dy) in deltas.items():
                    result[i][0] += dx * scalar
                    result[i][1] += dy * scalar
        except StreamError as e:
            raise TableError(f"malformed gvar data for glyph {glyph_id}: {e}") from e
        return result

    def _tuples(self, data, coords, num_points):
        """Yield (scalar, point numbers or None, x deltas, y deltas) per active tuple."""
        s = Stream(data)
        count_field = s.read_u16()
        serialized = Stream(data, s.read_u16())
        tuple_count = count_field & _COUNT_MASK

        shared_points = None
        if count_field & _SHARED_POINT_NUMBERS:
            shared_points = _read_packed_points(serialized)

        for _ in range(tuple_count):
            data_size = s.read_u16()
            tuple_index = s.read_u16()

            if tuple_index & _EMBEDDED_PEAK_TUPLE:
                peak = s.read_array('h', self.axis_count)
            else:
                index = tuple_index & _TUPLE_INDEX_MASK
                if index >= len(self.shared_tuples):
                    raise StreamError(f"shared tuple index {index} out of range")
                peak = self.shared_tuples[index]

            start = end = None
            if tuple_index & _INTERMEDIATE_REGION:
                start = s.read_array('h', self.axis_count)
                end = s.read_array('h', self.axis_count)

            # Serialized data for this tuple
            tuple_data = Stream(serialized.read_bytes(data_size))
            scalar = tuple_scalar(coords, peak, start, end)
            if scalar == 0.0:
                continue

            if tuple_index & _PRIVATE_POINT_NUMBERS:
                point_numbers = _read_packed_points(tuple_data)
            else:
                point_numbers = shared_points

            delta_count = num_points if point_numbers is None else len(point_numbers)
            x_deltas = _read_packed_deltas(tuple_data, delta_count)
            y_deltas = _read_packed_deltas(tuple_data, delta_count)
            yield scalar, point_numbers, x_deltas, y_deltas


def _read_packed_points(s):
    """Return a list of point numbers, or None meaning all points."""
    first = s.read_u8()
    if first == 0:
        return None
    if first & _POINTS_ARE_WORDS:
        count = ((first & _POINT_RUN_COUNT_MASK) << 8) | s.read_u8()
    else:
        count = first

    points = []
    last = 0
    while len(points) < count:
        control = s.read_u8()
        run = (control & _POINT_RUN_COUNT_MASK) + 1
        fmt = 'H' if control & _POINTS_ARE_WORDS else 'B'
        for value in s.read_array(fmt, min(run, count - len(points))):
            last = (last + value) & 0xFFFF
            points.append(last)
    return points


def _read_packed_deltas(s, count):
    deltas = []
    while len(deltas) < count:
        control = s.read_u8()
        run = min((control & _DELTA_RUN_COUNT_MASK) + 1, count - len(deltas))
        if control & _DELTAS_ARE_ZERO:
            deltas.extend([0] * run)
        elif control & _DELTAS_ARE_WORDS:
            deltas.extend(s.read_array('h', run))
        else:
            deltas.extend(s.read_array('b', run))
    return deltas


def _interpolate(v, v1, v2, d1, d2):
    if v1 > v2:
        v1, v2, d1, d2 = v2, v1, d2, d1
    if v <= v1:
        return d1
    if v >= v2:
        return d2
    return d1 + (v - v1) * (d2 - d1) / (v2 - v1)


def _infer_deltas(points, end_pts, deltas):
    """Fill `deltas` for untouched points of each contour (IUP)."""
    start = 0
    for end in end_pts:
        if end >= len(points):
            break
        touched = [i for i in range(start, end + 1) if i in deltas]
        if touched and len(touched) < end - start + 1:
            if len(touched) == 1:
                only = deltas[touched[0]]
                for i in range(start, end + 1):
                    deltas.setdefault(i, only)
            else:
                for k, t1 in enumerate(touched):
                    t2 = touched[(k + 1) % len(touched)]
                    i = t1 + 1 if t1 < end else start
                    while i != t2:
                        dx = _interpolate(points[i][0], points[t1][0], points[t2][0],
                                          deltas[t1][0], deltas[t2][0])
                        dy = _interpolate(points[i][1], points[t1][1], points[t2][1],
                                          deltas[t1][1], deltas[t2][1])
                        deltas[i] = (dx, dy)
                        i = i + 1 if i < end else start
        start = end + 1

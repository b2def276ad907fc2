# GlyphScope - A TrueType/OpenType Font Parser
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
hmtx / vmtx - Horizontal and Vertical Metrics.

numberOfHMetrics long (advance, bearing) pairs are followed by a bearing-only
array for the remaining glyphs, which reuse the last advance.
"""

import struct

from ..core.error import StreamError
from ..core.stream import Stream


class MetricsTable:
    __slots__ = ('data', 'number_of_metrics', 'number_of_glyphs', 'number_of_bearings')

    def __init__(self, data, number_of_metrics, number_of_glyphs, number_of_bearings):
        self.data = data
        self.number_of_metrics = number_of_metrics
        self.number_of_glyphs = number_of_glyphs
        self.number_of_bearings = number_of_bearings

    @classmethod
    def parse(cls, data, number_of_metrics, number_of_glyphs):
        if number_of_metrics == 0:
            return None
        try:
            Stream(data).read_bytes(number_of_metrics * 4)
        except StreamError:
            return None

        # The trailing bearing array is optional; keep whatever fits.
        number_of_bearings = 0
        if number_of_glyphs > number_of_metrics:
            wanted = number_of_glyphs - number_of_metrics
            available = (len(data) - number_of_metrics * 4) // 2
            number_of_bearings = min(wanted, available)
        return cls(data, number_of_metrics, number_of_glyphs, number_of_bearings)

    def advance(self, glyph_id):
        if glyph_id >= self.number_of_glyphs:
            return None
        index = min(glyph_id, self.number_of_metrics - 1)
        return struct.unpack_from('>H', self.data, index * 4)[0]

    def side_bearing(self, glyph_id):
        if glyph_id < self.number_of_metrics:
            return struct.unpack_from('>h', self.data, glyph_id * 4 + 2)[0]
        index = glyph_id - self.number_of_metrics
        if index < self.number_of_bearings:
            return struct.unpack_from('>h', self.data, self.number_of_metrics * 4 + index * 2)[0]
        return None

# GlyphScope - A TrueType/OpenType Font Parser
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""VORG - Vertical Origin Table (CFF fonts)."""

import struct

from ..core.error import StreamError
from ..core.stream import Stream


class VorgTable:
    __slots__ = ('default_y', 'metrics', 'count')

    def __init__(self, default_y, metrics, count):
        self.default_y = default_y
        self.metrics = metrics
        self.count = count

    @classmethod
    def parse(cls, data):
        try:
            s = Stream(data)
            if s.read_u16() != 1 or s.read_u16() != 0:
                return None
            default_y = s.read_i16()
            count = s.read_u16()
            metrics = s.read_bytes(count * 4)
        except StreamError:
            return None
        return cls(default_y, metrics, count)

    def glyph_y_origin(self, glyph_id: int) -> int:
        # Records are sorted by glyph id
        lo, hi = 0, self.count
        while lo < hi:
            mid = (lo + hi) // 2
            gid, y = struct.unpack_from('>Hh', self.metrics, mid * 4)
            if gid == glyph_id:
                return y
            if gid < glyph_id:
                lo = mid + 1
            else:
                hi = mid
        return self.default_y

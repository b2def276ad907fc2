# GlyphScope - A TrueType/OpenType Font Parser
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Common OpenType Layout structures: Class Definition and Coverage tables.

ClassDef format 1:  startGlyph, glyphCount, classValue[glyphCount]
ClassDef format 2:  classRangeCount, ClassRange{start, end, class}[]
Coverage format 1:  glyphCount, glyphArray[] (sorted)
Coverage format 2:  rangeCount, RangeRecord{start, end, startCoverageIndex}[]

Malformed tables behave as empty: class 0, not covered.
"""

from ..core.error import StreamError
from ..core.stream import read_at


def _search_ranges(data, offset, count, glyph_id):
    """Binary search 6-byte {start, end, value} records; return value or None."""
    lo, hi = 0, count
    while lo < hi:
        mid = (lo + hi) // 2
        start, end, value = read_at(data, '>HHH', offset + mid * 6)
        if glyph_id < start:
            hi = mid
        elif glyph_id > end:
            lo = mid + 1
        else:
            return value
    return None


class ClassDefinitionTable:
    __slots__ = ('data',)

    def __init__(self, data):
        self.data = data

    def get(self, glyph_id: int) -> int:
        try:
            fmt = read_at(self.data, '>H', 0)
            if fmt == 1:
                start_glyph, glyph_count = read_at(self.data, '>HH', 2)
                index = glyph_id - start_glyph
                if 0 <= index < glyph_count:
                    return read_at(self.data, '>H', 6 + index * 2)
            elif fmt == 2:
                count = read_at(self.data, '>H', 2)
                value = _search_ranges(self.data, 4, count, glyph_id)
                if value is not None:
                    return value
        except StreamError:
            pass
        return 0


class CoverageTable:
    __slots__ = ('data',)

    def __init__(self, data):
        self.data = data

    def contains(self, glyph_id: int) -> bool:
        try:
            fmt = read_at(self.data, '>H', 0)
            if fmt == 1:
                count = read_at(self.data, '>H', 2)
                lo, hi = 0, count
                while lo < hi:
                    mid = (lo + hi) // 2
                    g = read_at(self.data, '>H', 4 + mid * 2)
                    if g == glyph_id:
                        return True
                    if g < glyph_id:
                        lo = mid + 1
                    else:
                        hi = mid
            elif fmt == 2:
                count = read_at(self.data, '>H', 2)
                return _search_ranges(self.data, 4, count, glyph_id) is not None
        except StreamError:
            pass
        return False

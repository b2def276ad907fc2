# GlyphScope - A TrueType/OpenType Font Parser
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

"""
Item Variation Store and Delta-Set Index Map

Shared by HVAR, VVAR, MVAR and CFF2. A delta is addressed by an
(outer, inner) pair: outer selects an ItemVariationData subtable, inner a
row of per-region deltas in it. The delta at a position in the design
space is the sum of each region's delta times that region's scalar.
"""

import logging

from .error import StreamError, TableError
from .stream import Stream

logger = logging.getLogger(__name__)

_LONG_WORDS = 0x8000
_WORD_DELTA_COUNT_MASK = 0x7FFF

_MAP_ENTRY_SIZE_MASK = 0x30
_MAP_INNER_BITS_MASK = 0x0F


def tuple_scalar(coords, peak, start=None, end=None) -> float:
    """Scalar of a variation region at normalized `coords` (F2Dot14 ints).

    Without `start`/`end` the region spans from zero to the peak on each axis.
    """
    scalar = 1.0
    for i, (coord, p) in enumerate(zip(coords, peak)):
        if p == 0 or coord == p:
            continue
        if start is None:
            lower, upper = min(0, p), max(0, p)
        else:
            lower, upper = start[i], end[i]
            # Malformed region: the axis does not constrain the tuple
            if lower > p or p > upper or (lower < 0 < upper):
                continue
        if coord <= lower or coord >= upper:
            return 0.0
        if coord < p:
            scalar *= (coord - lower) / (p - lower)
        else:
            scalar *= (upper - coord) / (upper - p)
    return scalar


class ItemVariationData:
    __slots__ = ('data', 'item_count', 'word_count', 'long_words', 'region_indexes',
                 'rows_offset', 'row_size')

    def __init__(self, data, offset):
        s = Stream(data, offset)
        self.item_count = s.read_u16()
        word_field = s.read_u16()
        region_count = s.read_u16()
        self.region_indexes = s.read_array('H', region_count)
        self.long_words = bool(word_field & _LONG_WORDS)
        self.word_count = word_field & _WORD_DELTA_COUNT_MASK
        if self.word_count > region_count:
            raise StreamError("wordDeltaCount exceeds regionIndexCount")
        word_size = 4 if self.long_words else 2
        self.row_size = self.word_count * word_size + (region_count - self.word_count) * (word_size // 2)
        self.rows_offset = s.offset
        self.data = data

    def deltas(self, inner: int):
        if inner >= self.item_count:
            raise TableError(f"delta set {inner} out of range ({self.item_count})")
        s = Stream(self.data, self.rows_offset + inner * self.row_size)
        big, small = ('i', 'h') if self.long_words else ('h', 'b')
        region_count = len(self.region_indexes)
        return s.read_array(big, self.word_count) + s.read_array(small, region_count - self.word_count)


class ItemVariationStore:
    __slots__ = ('axis_count', 'regions', 'subtables')

    def __init__(self, axis_count, regions, subtables):
        self.axis_count = axis_count
        self.regions = regions
        self.subtables = subtables

    @classmethod
    def parse(cls, data, offset=0):
        """Parse a store starting at `offset`. Raises StreamError on malformed data."""
        s = Stream(data, offset)
        if s.read_u16() != 1:
            raise StreamError("unknown item variation store format")
        region_list_offset = s.read_u32()
        data_count = s.read_u16()
        data_offsets = s.read_array('I', data_count)

        rs = Stream(data, offset + region_list_offset)
        axis_count = rs.read_u16()
        region_count = rs.read_u16()
        regions = []
        for _ in range(region_count):
            values = rs.read_array('h', axis_count * 3)
            # (start, peak, end) per axis, regrouped as three tuples
            regions.append((values[0::3], values[1::3], values[2::3]))

        subtables = [ItemVariationData(data, offset + o) for o in data_offsets]
        for subtable in subtables:
            for index in subtable.region_indexes:
                if index >= region_count:
                    raise StreamError(f"region index {index} out of range")
        return cls(axis_count, regions, subtables)

    def region_scalars(self, outer: int, coords):
        """Scalars of the regions referenced by ItemVariationData `outer`."""
        if outer >= len(self.subtables):
            raise TableError(f"item variation data {outer} out of range")
        scalars = []
        for index in self.subtables[outer].region_indexes:
            start, peak, end = self.regions[index]
            scalars.append(tuple_scalar(coords, peak, start, end))
        return scalars

    def delta(self, outer: int, inner: int, coords) -> float:
        if len(coords) != self.axis_count:
            raise TableError("coordinate count does not match variation store axis count")
        scalars = self.region_scalars(outer, coords)
        deltas = self.subtables[outer].deltas(inner)
        return float(sum(d * sc for d, sc in zip(deltas, scalars)))


class DeltaSetIndexMap:
    __slots__ = ('data', 'map_count', 'entry_size', 'inner_bits', 'entries_offset')

    def __init__(self, data, offset=0):
        s = Stream(data, offset)
        fmt = s.read_u8()
        entry_format = s.read_u8()
        if fmt == 0:
            self.map_count = s.read_u16()
        elif fmt == 1:
            self.map_count = s.read_u32()
        else:
            raise StreamError(f"unknown delta-set index map format {fmt}")
        self.entry_size = ((entry_format & _MAP_ENTRY_SIZE_MASK) >> 4) + 1
        self.inner_bits = (entry_format & _MAP_INNER_BITS_MASK) + 1
        self.entries_offset = s.offset
        self.data = data
        # Entries must be present
        s.read_bytes(self.map_count * self.entry_size)

    def map(self, index: int):
        """Return (outer, inner) for `index`; indices past the end use the last entry."""
        if self.map_count == 0:
            raise TableError("empty delta-set index map")
        index = min(index, self.map_count - 1)
        s = Stream(self.data, self.entries_offset + index * self.entry_size)
        entry = s.read_offset(self.entry_size)
        return entry >> self.inner_bits, entry & ((1 << self.inner_bits) - 1)

# GlyphScope - A TrueType/OpenType Font Parser
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
kern - Kerning Table

Two header flavors exist:

  Windows (version 0):  u16 version, u16 nTables,
                        subtable: u16 version, u16 length, u16 coverage
  Apple (version 1.0):  u32 version, u32 nTables,
                        subtable: u32 length, u16 coverage, u16 tupleIndex

Only format 0 subtables holding horizontal, non cross-stream pairs are
used. Pairs are sorted by (left << 16 | right), which allows a binary
search.
"""

import logging
import struct

from ..core.error import StreamError
from ..core.stream import Stream

logger = logging.getLogger(__name__)

_WIN_HORIZONTAL = 0x01
_WIN_CROSS_STREAM = 0x04

_APPLE_VERTICAL = 0x80
_APPLE_CROSS_STREAM = 0x40
_APPLE_VARIATION = 0x20

_PAIR_SIZE = 6


class KernTable:
    __slots__ = ('subtables',)

    def __init__(self, subtables):
        # List of (pairs memoryview, number of pairs)
        self.subtables = subtables

    @classmethod
    def parse(cls, data):
        try:
            s = Stream(data)
            version = s.read_u16()
            if version == 0:
                subtables = _parse_windows(s)
            elif version == 1 and s.read_u16() == 0:
                subtables = _parse_apple(s)
            else:
                logger.warning("Unknown kern table version %d", version)
                return None
        except StreamError:
            return None
        return cls(subtables)

    def glyphs_kerning(self, left: int, right: int):
        """Return the kerning value for the pair, or None when no subtable lists it."""
        needle = (left << 16) | right
        for pairs, count in self.subtables:
            lo, hi = 0, count
            while lo < hi:
                mid = (lo + hi) // 2
                l, r, value = struct.unpack_from('>HHh', pairs, mid * _PAIR_SIZE)
                key = (l << 16) | r
                if key == needle:
                    return value
                if key < needle:
                    lo = mid + 1
                else:
                    hi = mid
        return None


def _parse_windows(s):
    subtables = []
    n_tables = s.read_u16()
    for _ in range(n_tables):
        start = s.offset
        s.skip(2)  # version
        length = s.read_u16()
        coverage = s.read_u16()
        fmt = coverage >> 8
        flags = coverage & 0xFF
        if fmt == 0 and flags & _WIN_HORIZONTAL and not flags & _WIN_CROSS_STREAM:
            subtables.append(_read_format0(s))
        else:
            logger.debug("Skipping kern subtable format %d flags 0x%02x", fmt, flags)
        if length < 6:
            break
        s.offset = start + length
    return subtables


def _parse_apple(s):
    subtables = []
    n_tables = s.read_u32()
    for _ in range(n_tables):
        start = s.offset
        length = s.read_u32()
        coverage = s.read_u16()
        s.skip(2)  # tupleIndex
        fmt = coverage & 0xFF
        flags = coverage >> 8
        if (fmt == 0 and not flags & (_APPLE_VERTICAL | _APPLE_CROSS_STREAM | _APPLE_VARIATION)):
            subtables.append(_read_format0(s))
        else:
            logger.debug("Skipping Apple kern subtable format %d flags 0x%02x", fmt, flags)
        if length < 8:
            break
        s.offset = start + length
    return subtables


def _read_format0(s):
    n_pairs = s.read_u16()
    s.skip(6)  # searchRange, entrySelector, rangeShift
    pairs = s.read_bytes(n_pairs * _PAIR_SIZE)
    return pairs, n_pairs

# GlyphScope - A TrueType/OpenType Font Parser
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

"""
cmap - Character to Glyph Index Mapping

Subtables are looked up in place instead of being expanded into a
codepoint dict. They are tried in this order, and the first non-zero
glyph wins:

  1. Unicode full repertoire: (0, 4), (0, 6), (3, 10)
  2. Unicode BMP:             (0, 0..3), (3, 1)
  3. Other encodings:         (3, 0) symbol, (1, 0) Mac Roman, the rest

Formats 0, 4, 6, 10, 12 and 13 map codepoints. Format 14 holds Unicode
variation sequences and is only consulted by variation_index(). Format 8
(mixed 16/32-bit) is not supported.
"""

import logging
import struct

from ..core.error import StreamError
from ..core.stream import Stream, read_at

logger = logging.getLogger(__name__)

UNICODE_MAX = 0x10FFFF
_SURROGATE_FIRST = 0xD800
_SURROGATE_LAST = 0xDFFF

_SUPPORTED_FORMATS = (0, 4, 6, 10, 12, 13)
FORMAT_UVS = 14


def _priority(platform_id: int, encoding_id: int) -> int:
    if platform_id == 0 and encoding_id in (4, 6):
        return 0
    if platform_id == 3 and encoding_id == 10:
        return 0
    if platform_id == 0 and encoding_id <= 3:
        return 1
    if platform_id == 3 and encoding_id == 1:
        return 1
    if (platform_id, encoding_id) in ((3, 0), (1, 0)):
        return 2
    return 3


class CmapSubtable:
    """One encoding record plus the subtable it points to."""
    __slots__ = ('platform_id', 'encoding_id', 'format', 'data')

    def __init__(self, platform_id, encoding_id, fmt, data):
        self.platform_id = platform_id
        self.encoding_id = encoding_id
        self.format = fmt
        self.data = data

    def glyph_index(self, codepoint: int) -> int | None:
        lookup = _LOOKUPS.get(self.format)
        if lookup is None:
            return None
        try:
            return lookup(self.data, codepoint)
        except StreamError:
            logger.debug("Truncated cmap format %d subtable", self.format)
            return None


class CmapTable:
    __slots__ = ('subtables',)

    def __init__(self, subtables):
        self.subtables = subtables

    @classmethod
    def parse(cls, data):
        try:
            s = Stream(data)
            s.skip(2)  # version
            num_records = s.read_u16()
            records = []
            for _ in range(num_records):
                platform_id = s.read_u16()
                encoding_id = s.read_u16()
                offset = s.read_u32()
                records.append((platform_id, encoding_id, offset))
        except StreamError:
            return None

        subtables = []
        for platform_id, encoding_id, offset in records:
            if offset + 2 > len(data):
                logger.warning("cmap subtable (%d, %d) offset %d out of bounds",
                               platform_id, encoding_id, offset)
                continue
            fmt = struct.unpack_from('>H', data, offset)[0]
            if fmt not in _SUPPORTED_FORMATS and fmt != FORMAT_UVS:
                logger.debug("Skipping cmap subtable format %d", fmt)
                continue
            subtables.append(CmapSubtable(platform_id, encoding_id, fmt, data[offset:]))

        # Stable sort keeps record order within a priority class
        subtables.sort(key=lambda st: _priority(st.platform_id, st.encoding_id))
        return cls(subtables)

    def glyph_index(self, codepoint: int) -> int | None:
        if not _is_valid_codepoint(codepoint):
            return None
        for subtable in self.subtables:
            if subtable.format == FORMAT_UVS:
                continue
            gid = subtable.glyph_index(codepoint)
            if gid:
                return gid
        return None

    def variation_index(self, codepoint: int, variation_selector: int) -> int | None:
        """Resolve a Unicode variation sequence through a format 14 subtable."""
        if not _is_valid_codepoint(codepoint) or not _is_valid_codepoint(variation_selector):
            return None
        for subtable in self.subtables:
            if subtable.format != FORMAT_UVS:
                continue
            try:
                result = _lookup_format14(subtable.data, codepoint, variation_selector)
            except StreamError:
                logger.debug("Truncated cmap format 14 subtable")
                continue
            if result is _USE_DEFAULT:
                return self.glyph_index(codepoint)
            if result is not None:
                return result
        return None


def _is_valid_codepoint(cp: int) -> bool:
    return 0 <= cp <= UNICODE_MAX and not _SURROGATE_FIRST <= cp <= _SURROGATE_LAST


# -- Per-format lookups ------------------------------------------------------

def _lookup_format0(data, cp):
    """Byte encoding table: 256 one-byte glyph ids."""
    if cp > 0xFF:
        return None
    return read_at(data, '>B', 6 + cp)


def _lookup_format4(data, cp):
    """Segment mapping to delta values (BMP only)."""
    if cp > 0xFFFF:
        return None
    seg_count = read_at(data, '>H', 6) // 2
    if seg_count == 0:
        return None
    end_codes = 14
    start_codes = end_codes + seg_count * 2 + 2  # reservedPad
    id_deltas = start_codes + seg_count * 2
    id_range_offsets = id_deltas + seg_count * 2

    # First segment whose endCode >= cp
    lo, hi = 0, seg_count
    while lo < hi:
        mid = (lo + hi) // 2
        if read_at(data, '>H', end_codes + mid * 2) < cp:
            lo = mid + 1
        else:
            hi = mid
    if lo == seg_count:
        return None
    i = lo

    start_code = read_at(data, '>H', start_codes + i * 2)
    if cp < start_code:
        return None
    id_delta = read_at(data, '>h', id_deltas + i * 2)
    range_offset_pos = id_range_offsets + i * 2
    id_range_offset = read_at(data, '>H', range_offset_pos)

    if id_range_offset == 0:
        return (cp + id_delta) & 0xFFFF
    # idRangeOffset is relative to its own position in the array
    glyph_pos = range_offset_pos + id_range_offset + (cp - start_code) * 2
    gid = read_at(data, '>H', glyph_pos)
    if gid == 0:
        return None
    return (gid + id_delta) & 0xFFFF


def _lookup_format6(data, cp):
    """Trimmed table mapping."""
    first_code, entry_count = read_at(data, '>HH', 6)
    index = cp - first_code
    if not 0 <= index < entry_count:
        return None
    return read_at(data, '>H', 10 + index * 2)


def _lookup_format10(data, cp):
    """Trimmed array with 32-bit codes."""
    start_char, num_chars = read_at(data, '>II', 12)
    index = cp - start_char
    if not 0 <= index < num_chars:
        return None
    return read_at(data, '>H', 20 + index * 2)


def _find_group(data, cp):
    """Binary search the sequential map groups of formats 12 and 13."""
    num_groups = read_at(data, '>I', 12)
    lo, hi = 0, num_groups
    while lo < hi:
        mid = (lo + hi) // 2
        start_char, end_char, glyph = read_at(data, '>III', 16 + mid * 12)
        if cp < start_char:
            hi = mid
        elif cp > end_char:
            lo = mid + 1
        else:
            return start_char, glyph
    return None


def _lookup_format12(data, cp):
    """Segmented coverage."""
    group = _find_group(data, cp)
    if group is None:
        return None
    start_char, start_glyph = group
    gid = start_glyph + (cp - start_char)
    return gid if gid <= 0xFFFF else None


def _lookup_format13(data, cp):
    """Many-to-one range mappings."""
    group = _find_group(data, cp)
    if group is None:
        return None
    gid = group[1]
    return gid if gid <= 0xFFFF else None


_LOOKUPS = {
    0: _lookup_format0,
    4: _lookup_format4,
    6: _lookup_format6,
    10: _lookup_format10,
    12: _lookup_format12,
    13: _lookup_format13,
}


# Format 14 marker: the sequence uses the codepoint's default glyph
_USE_DEFAULT = object()

_VS_RECORD_SIZE = 11
_UVS_MAPPING_SIZE = 5
_UNICODE_RANGE_SIZE = 4


def _u24(data, offset):
    b = data[offset:offset + 3]
    if len(b) != 3:
        raise StreamError(f"u24 read at {offset} outside {len(data)} bytes")
    return (b[0] << 16) | (b[1] << 8) | b[2]


def _lookup_format14(data, cp, variation_selector):
    num_records = read_at(data, '>I', 6)

    lo, hi = 0, num_records
    record = None
    while lo < hi:
        mid = (lo + hi) // 2
        pos = 10 + mid * _VS_RECORD_SIZE
        selector = _u24(data, pos)
        if selector < variation_selector:
            lo = mid + 1
        elif selector > variation_selector:
            hi = mid
        else:
            record = pos
            break
    if record is None:
        return None

    default_offset, non_default_offset = read_at(data, '>II', record + 3)

    if non_default_offset:
        count = read_at(data, '>I', non_default_offset)
        lo, hi = 0, count
        while lo < hi:
            mid = (lo + hi) // 2
            pos = non_default_offset + 4 + mid * _UVS_MAPPING_SIZE
            value = _u24(data, pos)
            if value < cp:
                lo = mid + 1
            elif value > cp:
                hi = mid
            else:
                return read_at(data, '>H', pos + 3)

    if default_offset:
        count = read_at(data, '>I', default_offset)
        lo, hi = 0, count
        while lo < hi:
            mid = (lo + hi) // 2
            pos = default_offset + 4 + mid * _UNICODE_RANGE_SIZE
            start = _u24(data, pos)
            additional = read_at(data, '>B', pos + 3)
            if cp < start:
                hi = mid
            elif cp > start + additional:
                lo = mid + 1
            else:
                return _USE_DEFAULT

    return None

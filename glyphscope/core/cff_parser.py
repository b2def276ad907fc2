# GlyphScope - A TrueType/OpenType Font Parser
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
CFF and CFF2 Table Parser

Parses the metadata needed to run glyph charstrings (Adobe TN#5176 and the
OpenType CFF2 chapter):
- Header, Name INDEX, Top DICT INDEX, String INDEX, Global Subr INDEX (CFF)
- Header, Top DICT, Global Subr INDEX, VariationStore (CFF2)
- CharStrings INDEX, Private DICT and Local Subr INDEX
- CID-keyed fonts: FDArray and FDSelect (formats 0, 3 and 4)
- The charset, for resolving seac accent components

INDEX data is not copied: items are memoryview slices that are located on
demand. CFF2 INDEX counts are 32-bit, CFF counts are 16-bit.
"""

import logging
import math

from .error import CFFError, StreamError
from .stream import Stream, read_at
from .variation_store import ItemVariationStore

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Predefined data
# ---------------------------------------------------------------------------

# Standard Encoding: code -> SID (only non-zero entries). Used by seac.
STANDARD_ENCODING = {
    32: 1, 33: 2, 34: 3, 35: 4, 36: 5, 37: 6, 38: 7, 39: 8,
    40: 9, 41: 10, 42: 11, 43: 12, 44: 13, 45: 14, 46: 15, 47: 16,
    48: 17, 49: 18, 50: 19, 51: 20, 52: 21, 53: 22, 54: 23, 55: 24,
    56: 25, 57: 26, 58: 27, 59: 28, 60: 29, 61: 30, 62: 31, 63: 32,
    64: 33, 65: 34, 66: 35, 67: 36, 68: 37, 69: 38, 70: 39, 71: 40,
    72: 41, 73: 42, 74: 43, 75: 44, 76: 45, 77: 46, 78: 47, 79: 48,
    80: 49, 81: 50, 82: 51, 83: 52, 84: 53, 85: 54, 86: 55, 87: 56,
    88: 57, 89: 58, 90: 59, 91: 60, 92: 61, 93: 62, 94: 63, 95: 64,
    96: 65, 97: 66, 98: 67, 99: 68, 100: 69, 101: 70, 102: 71,
    103: 72, 104: 73, 105: 74, 106: 75, 107: 76, 108: 77, 109: 78,
    110: 79, 111: 80, 112: 81, 113: 82, 114: 83, 115: 84, 116: 85,
    117: 86, 118: 87, 119: 88, 120: 89, 121: 90, 122: 91, 123: 92,
    124: 93, 125: 94, 126: 95,
    161: 96, 162: 97, 163: 98, 164: 99, 165: 100, 166: 101,
    167: 102, 168: 103, 169: 104, 170: 105, 171: 106, 172: 107,
    173: 108, 174: 109, 175: 110, 177: 111, 178: 112, 179: 113,
    180: 114, 182: 115, 183: 116, 184: 117, 185: 118, 186: 119,
    187: 120, 188: 121, 189: 122, 191: 123, 193: 124, 194: 125,
    195: 126, 196: 127, 197: 128, 198: 129, 199: 130, 200: 131,
    202: 132, 203: 133, 205: 134, 206: 135, 207: 136, 208: 137,
    225: 138, 227: 139, 232: 140, 233: 141, 234: 142, 235: 143,
    241: 144, 245: 145, 248: 146, 249: 147, 250: 148, 251: 149,
}

# ISOAdobe charset (charset ID 0) maps GID N to SID N for N in 1..228
_ISO_ADOBE_LAST_SID = 228


# ---------------------------------------------------------------------------
# DICT operators (op_byte or (12, sub_byte))
# ---------------------------------------------------------------------------
OP_CHARSET = 15
OP_CHAR_STRINGS = 17
OP_PRIVATE = 18
OP_SUBRS = 19
OP_VSINDEX = 22
OP_BLEND = 23
OP_VSTORE = 24
OP_CHARSTRING_TYPE = (12, 6)
OP_ROS = (12, 30)
OP_FD_ARRAY = (12, 36)
OP_FD_SELECT = (12, 37)

MAX_OPERANDS_LEN = 513


# ---------------------------------------------------------------------------
# INDEX
# ---------------------------------------------------------------------------

class Index:
    """A CFF INDEX. Items are located lazily and returned as memoryviews."""
    __slots__ = ('data', 'count', 'off_size', 'offsets_start', 'data_start')

    def __init__(self, data=b'', count=0, off_size=1, offsets_start=0, data_start=0):
        self.data = data
        self.count = count
        self.off_size = off_size
        self.offsets_start = offsets_start
        self.data_start = data_start

    def __len__(self):
        return self.count

    def _offset(self, i):
        s = Stream(self.data, self.offsets_start + i * self.off_size)
        return s.read_offset(self.off_size)

    def get(self, i):
        if not 0 <= i < self.count:
            raise CFFError(f"INDEX item {i} out of range ({self.count})")
        start = self._offset(i)
        end = self._offset(i + 1)
        # Offsets are 1-based relative to the byte before the data region
        if start < 1 or start > end:
            raise CFFError(f"INDEX item {i} has invalid offsets {start}..{end}")
        begin = self.data_start + start - 1
        finish = self.data_start + end - 1
        if finish > len(self.data):
            raise CFFError(f"INDEX item {i} out of bounds")
        return self.data[begin:finish]


def parse_index(s, cff2=False):
    """Parse an INDEX at the stream position and advance past it."""
    count = s.read_u32() if cff2 else s.read_u16()
    if count == 0:
        return Index()
    off_size = s.read_u8()
    if not 1 <= off_size <= 4:
        raise CFFError(f"Invalid offSize: {off_size}")
    offsets_start = s.offset
    s.skip((count + 1) * off_size)
    data_start = s.offset

    index = Index(s.data, count, off_size, offsets_start, data_start)
    last = index._offset(count)
    if last < 1:
        raise CFFError("INDEX last offset is zero")
    s.skip(last - 1)
    if s.offset > len(s.data):
        raise CFFError("INDEX data runs past the end of the table")
    return index


def parse_index_at(data, offset, cff2=False):
    return parse_index(Stream(data, offset), cff2)


# ---------------------------------------------------------------------------
# DICT
# ---------------------------------------------------------------------------

def _read_real(s):
    """BCD nibble-encoded real number."""
    chars = []
    while True:
        byte = s.read_u8()
        for nibble in (byte >> 4, byte & 0x0F):
            if nibble <= 9:
                chars.append(str(nibble))
            elif nibble == 0x0A:
                chars.append('.')
            elif nibble == 0x0B:
                chars.append('E')
            elif nibble == 0x0C:
                chars.append('E-')
            elif nibble == 0x0E:
                chars.append('-')
            elif nibble == 0x0F:
                try:
                    return float(''.join(chars))
                except ValueError:
                    return 0.0
            # 0x0D is reserved


def parse_dict(data, blend_regions=None):
    """Parse DICT data into {operator: operands}.

    `blend_regions(vsindex)` returns the region count used by a CFF2 blend
    operator; only the default values of a blend are kept.
    """
    result = {}
    operands = []
    vsindex = 0
    s = Stream(data)

    while not s.at_end():
        b0 = s.read_u8()

        if b0 <= 24:
            op = (12, s.read_u8()) if b0 == 12 else b0
            if op == OP_BLEND:
                if blend_regions is None or not operands:
                    raise CFFError("blend operator outside CFF2 Private DICT")
                n = _to_int(operands.pop())
                k = blend_regions(vsindex)
                needed = n * (k + 1)
                if n < 0 or needed > len(operands):
                    raise CFFError("not enough blend operands")
                base = len(operands) - needed
                operands = operands[:base + n]
                continue
            if op == OP_VSINDEX and operands:
                vsindex = _to_int(operands[0])
            result[op] = operands
            operands = []
        elif b0 == 28:
            operands.append(s.read_i16())
        elif b0 == 29:
            operands.append(s.read_i32())
        elif b0 == 30:
            operands.append(_read_real(s))
        elif 32 <= b0 <= 246:
            operands.append(b0 - 139)
        elif 247 <= b0 <= 250:
            operands.append((b0 - 247) * 256 + s.read_u8() + 108)
        elif 251 <= b0 <= 254:
            operands.append(-(b0 - 251) * 256 - s.read_u8() - 108)
        else:
            raise CFFError(f"invalid DICT byte {b0}")

        if len(operands) > MAX_OPERANDS_LEN:
            raise CFFError("too many DICT operands")

    return result


def _to_int(value):
    """A DICT operand used as an offset, count or index."""
    if not math.isfinite(value) or value != int(value):
        raise CFFError(f"DICT operand {value} is not an integer")
    return int(value)


def _dict_int(d, op, default=None):
    values = d.get(op)
    if not values:
        return default
    return _to_int(values[0])


# ---------------------------------------------------------------------------
# FDSelect
# ---------------------------------------------------------------------------

class FDSelect:
    __slots__ = ('data', 'offset', 'format', 'number_of_glyphs')

    def __init__(self, data, offset, number_of_glyphs):
        self.data = data
        self.offset = offset
        self.number_of_glyphs = number_of_glyphs
        self.format = read_at(data, '>B', offset)
        if self.format not in (0, 3, 4):
            raise CFFError(f"Unknown FDSelect format: {self.format}")

    def font_dict_index(self, glyph_id):
        s = Stream(self.data, self.offset + 1)
        if self.format == 0:
            if glyph_id >= self.number_of_glyphs:
                raise CFFError(f"glyph {glyph_id} outside FDSelect")
            s.skip(glyph_id)
            return s.read_u8()

        if self.format == 3:
            n_ranges = s.read_u16()
            fmt, size = '>HB', 3
        else:
            n_ranges = s.read_u32()
            fmt, size = '>IH', 6
        ranges_start = s.offset
        # Sentinel follows the last range and bounds it
        sentinel = read_at(self.data, fmt[:2], ranges_start + n_ranges * size)
        lo, hi = 0, n_ranges
        while lo < hi:
            mid = (lo + hi) // 2
            first, fd = read_at(self.data, fmt, ranges_start + mid * size)
            if mid + 1 < n_ranges:
                next_first = read_at(self.data, fmt[:2], ranges_start + (mid + 1) * size)
            else:
                next_first = sentinel
            if glyph_id < first:
                hi = mid
            elif glyph_id >= next_first:
                lo = mid + 1
            else:
                return fd
        raise CFFError(f"glyph {glyph_id} outside FDSelect ranges")


# ---------------------------------------------------------------------------
# Parsed table
# ---------------------------------------------------------------------------

class CFFTable:
    """Charstring sources of one CFF or CFF2 font."""
    __slots__ = (
        'data', 'is_cff2', 'global_subrs', 'char_strings', 'local_subrs',
        'font_dicts', 'fd_select', 'charset_offset', 'store', 'is_cid',
    )

    def __init__(self, data, is_cff2):
        self.data = data
        self.is_cff2 = is_cff2
        self.global_subrs = Index()
        self.char_strings = Index()
        self.local_subrs = Index()
        # (local subrs, vsindex) per Font DICT
        self.font_dicts = []
        self.fd_select = None
        self.charset_offset = 0
        self.store = None
        self.is_cid = False

    @property
    def number_of_glyphs(self):
        return len(self.char_strings)

    def _font_dict(self, glyph_id):
        if self.fd_select is None:
            if self.is_cff2 and self.font_dicts:
                return self.font_dicts[0]
            return self.local_subrs, 0
        fd = self.fd_select.font_dict_index(glyph_id)
        if fd >= len(self.font_dicts):
            raise CFFError(f"FD index {fd} out of range")
        return self.font_dicts[fd]

    def local_subrs_for(self, glyph_id):
        return self._font_dict(glyph_id)[0]

    def vsindex_for(self, glyph_id):
        """Default ItemVariationData index of a CFF2 glyph's charstring."""
        return self._font_dict(glyph_id)[1]

    def glyph_for_sid(self, sid):
        """Resolve a string id to a glyph id through the charset (seac)."""
        n_glyphs = self.number_of_glyphs
        if sid == 0:
            return 0
        if self.charset_offset == 0:
            if sid <= _ISO_ADOBE_LAST_SID and sid < n_glyphs:
                return sid
            return None
        if self.charset_offset <= 2:
            # Expert charsets are not used by seac
            return None

        s = Stream(self.data, self.charset_offset)
        fmt = s.read_u8()
        if fmt == 0:
            for gid in range(1, n_glyphs):
                if s.read_u16() == sid:
                    return gid
            return None
        if fmt in (1, 2):
            gid = 1
            while gid < n_glyphs:
                first = s.read_u16()
                n_left = s.read_u8() if fmt == 1 else s.read_u16()
                if first <= sid <= first + n_left:
                    return gid + sid - first
                gid += n_left + 1
            return None
        raise CFFError(f"Unknown charset format: {fmt}")


def _parse_private(data, private_ops, cff2=False, blend_regions=None):
    """Parse a Private DICT.

    Returns (local subrs, vsindex): the Index may be empty and vsindex is
    the default ItemVariationData of CFF2 charstrings using this DICT.
    """
    if not private_ops or len(private_ops) < 2:
        return Index(), 0
    size, offset = _to_int(private_ops[0]), _to_int(private_ops[1])
    if size <= 0:
        return Index(), 0
    if offset < 0 or offset + size > len(data):
        raise CFFError("Private DICT out of bounds")
    private = parse_dict(data[offset:offset + size], blend_regions)
    vsindex = _dict_int(private, OP_VSINDEX, 0) if cff2 else 0
    subrs = _dict_int(private, OP_SUBRS)
    if subrs is None:
        return Index(), vsindex
    return parse_index_at(data, offset + subrs, cff2), vsindex


def _parse_fd_array(data, offset, cff2, blend_regions=None):
    """Returns one (local subrs, vsindex) pair per Font DICT."""
    fd_array = parse_index_at(data, offset, cff2)
    result = []
    for i in range(len(fd_array)):
        font_dict = parse_dict(fd_array.get(i))
        result.append(_parse_private(data, font_dict.get(OP_PRIVATE), cff2, blend_regions))
    return result


def parse_cff(data):
    """Parse a 'CFF ' table. Returns CFFTable or None when malformed."""
    try:
        s = Stream(data)
        major = s.read_u8()
        s.skip(1)  # minor
        hdr_size = s.read_u8()
        if major != 1:
            logger.warning("Unsupported CFF major version: %d", major)
            return None

        s.offset = hdr_size
        name_index = parse_index(s)
        top_dict_index = parse_index(s)
        parse_index(s)  # String INDEX
        global_subrs = parse_index(s)

        if len(name_index) != 1 or len(top_dict_index) < 1:
            # OpenType requires exactly one font in the FontSet
            logger.warning("CFF table holds %d fonts", len(name_index))
            return None

        top = parse_dict(top_dict_index.get(0))
        if _dict_int(top, OP_CHARSTRING_TYPE, 2) != 2:
            logger.warning("Unsupported charstring type in CFF table")
            return None

        table = CFFTable(data, False)
        table.global_subrs = global_subrs

        char_strings_offset = _dict_int(top, OP_CHAR_STRINGS)
        if not char_strings_offset:
            return None
        table.char_strings = parse_index_at(data, char_strings_offset)
        table.charset_offset = _dict_int(top, OP_CHARSET, 0)

        if OP_ROS in top:
            table.is_cid = True
            fd_array_offset = _dict_int(top, OP_FD_ARRAY)
            fd_select_offset = _dict_int(top, OP_FD_SELECT)
            if not fd_array_offset or not fd_select_offset:
                logger.warning("CID-keyed CFF without FDArray/FDSelect")
                return None
            table.font_dicts = _parse_fd_array(data, fd_array_offset, False)
            table.fd_select = FDSelect(data, fd_select_offset, table.number_of_glyphs)
        else:
            table.local_subrs, _ = _parse_private(data, top.get(OP_PRIVATE))
    except (StreamError, CFFError) as e:
        logger.warning("Invalid CFF table: %s", e)
        return None

    logger.debug("CFF table: %d glyphs, %d global subrs",
                 table.number_of_glyphs, len(table.global_subrs))
    return table


def parse_cff2(data):
    """Parse a 'CFF2' table. Returns CFFTable or None when malformed."""
    try:
        s = Stream(data)
        major = s.read_u8()
        s.skip(1)  # minor
        hdr_size = s.read_u8()
        top_dict_length = s.read_u16()
        if major != 2:
            logger.warning("Unsupported CFF2 major version: %d", major)
            return None

        s.offset = hdr_size
        top = parse_dict(s.read_bytes(top_dict_length))
        global_subrs = parse_index(s, cff2=True)

        table = CFFTable(data, True)
        table.global_subrs = global_subrs

        char_strings_offset = _dict_int(top, OP_CHAR_STRINGS)
        if not char_strings_offset:
            return None
        table.char_strings = parse_index_at(data, char_strings_offset, cff2=True)

        vstore_offset = _dict_int(top, OP_VSTORE)
        if vstore_offset:
            # u16 length precedes the ItemVariationStore
            table.store = ItemVariationStore.parse(data, vstore_offset + 2)

        def blend_regions(vsindex):
            if table.store is None or not 0 <= vsindex < len(table.store.subtables):
                raise CFFError(f"vsindex {vsindex} without a matching variation store")
            return len(table.store.subtables[vsindex].region_indexes)

        fd_array_offset = _dict_int(top, OP_FD_ARRAY)
        if not fd_array_offset:
            logger.warning("CFF2 table without FDArray")
            return None
        table.font_dicts = _parse_fd_array(data, fd_array_offset, True, blend_regions)

        fd_select_offset = _dict_int(top, OP_FD_SELECT)
        if fd_select_offset:
            table.fd_select = FDSelect(data, fd_select_offset, table.number_of_glyphs)
    except (StreamError, CFFError) as e:
        logger.warning("Invalid CFF2 table: %s", e)
        return None

    logger.debug("CFF2 table: %d glyphs, %d global subrs",
                 table.number_of_glyphs, len(table.global_subrs))
    return table

# GlyphScope - A TrueType/OpenType Font Parser
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
post - PostScript Table

Underline metrics from the header; glyph names for format 1.0 (the 258
standard Macintosh names) and format 2.0 (index array followed by Pascal
strings, so a name is at most 255 bytes).
"""

import logging
import struct

from ..core.error import StreamError
from ..core.stream import Stream
from ..core.types import LineMetrics

logger = logging.getLogger(__name__)

_HEADER_SIZE = 32

VERSION_1_0 = 0x00010000
VERSION_2_0 = 0x00020000
VERSION_2_5 = 0x00025000
VERSION_3_0 = 0x00030000

# Standard Macintosh glyph ordering (first 258 glyphs)
_MAC_GLYPH_NAMES = [
    b'.notdef', b'.null', b'nonmarkingreturn', b'space', b'exclam',
    b'quotedbl', b'numbersign', b'dollar', b'percent', b'ampersand',
    b'quotesingle', b'parenleft', b'parenright', b'asterisk', b'plus',
    b'comma', b'hyphen', b'period', b'slash', b'zero', b'one', b'two',
    b'three', b'four', b'five', b'six', b'seven', b'eight', b'nine',
    b'colon', b'semicolon', b'less', b'equal', b'greater', b'question',
    b'at', b'A', b'B', b'C', b'D', b'E', b'F', b'G', b'H', b'I', b'J',
    b'K', b'L', b'M', b'N', b'O', b'P', b'Q', b'R', b'S', b'T', b'U',
    b'V', b'W', b'X', b'Y', b'Z', b'bracketleft', b'backslash',
    b'bracketright', b'asciicircum', b'underscore', b'grave', b'a', b'b',
    b'c', b'd', b'e', b'f', b'g', b'h', b'i', b'j', b'k', b'l', b'm',
    b'n', b'o', b'p', b'q', b'r', b's', b't', b'u', b'v', b'w', b'x',
    b'y', b'z', b'braceleft', b'bar', b'braceright', b'asciitilde',
    b'Adieresis', b'Aring', b'Ccedilla', b'Eacute', b'Ntilde',
    b'Odieresis', b'Udieresis', b'aacute', b'agrave', b'acircumflex',
    b'adieresis', b'atilde', b'aring', b'ccedilla', b'eacute', b'egrave',
    b'ecircumflex', b'edieresis', b'iacute', b'igrave', b'icircumflex',
    b'idieresis', b'ntilde', b'oacute', b'ograve', b'ocircumflex',
    b'odieresis', b'otilde', b'uacute', b'ugrave', b'ucircumflex',
    b'udieresis', b'dagger', b'degree', b'cent', b'sterling', b'section',
    b'bullet', b'paragraph', b'germandbls', b'registered', b'copyright',
    b'trademark', b'acute', b'dieresis', b'notequal', b'AE', b'Oslash',
    b'infinity', b'plusminus', b'lessequal', b'greaterequal', b'yen',
    b'mu', b'partialdiff', b'summation', b'product', b'pi', b'integral',
    b'ordfeminine', b'ordmasculine', b'Omega', b'ae', b'oslash',
    b'questiondown', b'exclamdown', b'logicalnot', b'radical', b'florin',
    b'approxequal', b'Delta', b'guillemotleft', b'guillemotright',
    b'ellipsis', b'nonbreakingspace', b'Agrave', b'Atilde', b'Otilde',
    b'OE', b'oe', b'endash', b'emdash', b'quotedblleft',
    b'quotedblright', b'quoteleft', b'quoteright', b'divide', b'lozenge',
    b'ydieresis', b'Ydieresis', b'fraction', b'currency',
    b'guilsinglleft', b'guilsinglright', b'fi', b'fl', b'daggerdbl',
    b'periodcentered', b'quotesinglbase', b'quotedblbase',
    b'perthousand', b'Acircumflex', b'Ecircumflex', b'Aacute',
    b'Edieresis', b'Egrave', b'Iacute', b'Icircumflex', b'Idieresis',
    b'Igrave', b'Oacute', b'Ocircumflex', b'apple', b'Ograve', b'Uacute',
    b'Ucircumflex', b'Ugrave', b'dotlessi', b'circumflex', b'tilde',
    b'macron', b'breve', b'dotaccent', b'ring', b'cedilla',
    b'hungarumlaut', b'ogonek', b'caron', b'Lslash', b'lslash',
    b'Scaron', b'scaron', b'Zcaron', b'zcaron', b'brokenbar', b'Eth',
    b'eth', b'Yacute', b'yacute', b'Thorn', b'thorn', b'minus',
    b'multiply', b'onesuperior', b'twosuperior', b'threesuperior',
    b'onehalf', b'onequarter', b'threequarters', b'franc', b'Gbreve',
    b'gbreve', b'Idotaccent', b'Scedilla', b'scedilla', b'Cacute',
    b'cacute', b'Ccaron', b'ccaron', b'dcroat',
]


class PostTable:
    __slots__ = ('data', 'version', 'underline', 'num_glyph_indices')

    def __init__(self, data, version, underline):
        self.data = data
        self.version = version
        self.underline = underline
        self.num_glyph_indices = 0

    @classmethod
    def parse(cls, data):
        if len(data) < _HEADER_SIZE:
            return None
        version, _italic_angle, position, thickness = struct.unpack_from('>Iihh', data, 0)
        if version not in (VERSION_1_0, VERSION_2_0, VERSION_2_5, VERSION_3_0):
            logger.warning("Unknown post table version 0x%08X", version)
            return None
        table = cls(data, version, LineMetrics(position=position, thickness=thickness))
        if version == VERSION_2_0:
            try:
                table.num_glyph_indices = Stream(data, _HEADER_SIZE).read_u16()
            except StreamError:
                return None
        return table

    def underline_metrics(self):
        return self.underline

    def glyph_name(self, glyph_id):
        """Return the glyph's name as str, or None."""
        if self.version == VERSION_1_0:
            if glyph_id < len(_MAC_GLYPH_NAMES):
                return _MAC_GLYPH_NAMES[glyph_id].decode('ascii')
            return None
        if self.version != VERSION_2_0:
            return None

        try:
            return self._format2_name(glyph_id)
        except StreamError:
            return None

    def _format2_name(self, glyph_id):
        if glyph_id >= self.num_glyph_indices:
            return None

        s = Stream(self.data, _HEADER_SIZE + 2 + glyph_id * 2)
        idx = s.read_u16()
        if idx < 258:
            return _MAC_GLYPH_NAMES[idx].decode('ascii')

        # Walk the Pascal string list to the requested entry
        extra_idx = idx - 258
        s = Stream(self.data, _HEADER_SIZE + 2 + self.num_glyph_indices * 2)
        for _ in range(extra_idx):
            name_len = s.read_u8()
            s.skip(name_len)
        name_len = s.read_u8()
        raw = bytes(s.read_bytes(name_len))
        try:
            return raw.decode('ascii')
        except UnicodeDecodeError:
            return None

# GlyphScope - A TrueType/OpenType Font Parser
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
loca - Index to Location

Short format stores offset / 2 as uint16, long format stores uint32
offsets. Glyph N occupies glyf[loca[N]:loca[N + 1]]; equal offsets mean an
empty glyph (space and the like).
"""

import logging
import struct

from .head import LOCA_FORMAT_SHORT

logger = logging.getLogger(__name__)


class LocaTable:
    __slots__ = ('data', 'is_short', 'count')

    def __init__(self, data, is_short, count):
        self.data = data
        self.is_short = is_short
        self.count = count

    @classmethod
    def parse(cls, data, number_of_glyphs, index_to_loc_format):
        is_short = index_to_loc_format == LOCA_FORMAT_SHORT
        entry_size = 2 if is_short else 4
        # numGlyphs + 1 entries; a truncated table covers fewer glyphs
        count = min(number_of_glyphs + 1, len(data) // entry_size)
        if count < 2:
            logger.warning("loca table holds no glyph ranges")
            return None
        return cls(data, is_short, count)

    def _offset(self, index):
        if self.is_short:
            return struct.unpack_from('>H', self.data, index * 2)[0] * 2
        return struct.unpack_from('>I', self.data, index * 4)[0]

    def glyph_range(self, glyph_id: int):
        """Return (start, end) inside glyf, or None for an unknown glyph."""
        if not 0 <= glyph_id < self.count - 1:
            return None
        start = self._offset(glyph_id)
        end = self._offset(glyph_id + 1)
        if start > end:
            return None
        return start, end

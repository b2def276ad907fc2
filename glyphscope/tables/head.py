# GlyphScope - A TrueType/OpenType Font Parser
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""head - Font Header Table."""

from ..core.error import StreamError
from ..core.stream import Stream
from ..core.types import Rect

TABLE_SIZE = 54

LOCA_FORMAT_SHORT = 0
LOCA_FORMAT_LONG = 1


class HeadTable:
    __slots__ = ('units_per_em', 'bbox', 'index_to_loc_format')

    def __init__(self):
        self.units_per_em = None
        self.bbox = Rect(0, 0, 0, 0)
        self.index_to_loc_format = None

    @classmethod
    def parse(cls, data):
        if len(data) < TABLE_SIZE:
            return None
        try:
            s = Stream(data, 18)
            upem = s.read_u16()
            s.skip(16)  # created, modified
            bbox = Rect(s.read_i16(), s.read_i16(), s.read_i16(), s.read_i16())
            s.skip(6)  # macStyle, lowestRecPPEM, fontDirectionHint
            loc_format = s.read_i16()
        except StreamError:
            return None

        table = cls()
        # unitsPerEm must be 16..16384
        if 16 <= upem <= 16384:
            table.units_per_em = upem
        table.bbox = bbox
        if loc_format in (LOCA_FORMAT_SHORT, LOCA_FORMAT_LONG):
            table.index_to_loc_format = loc_format
        return table

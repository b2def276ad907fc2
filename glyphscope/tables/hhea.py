# GlyphScope - A TrueType/OpenType Font Parser
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
hhea / vhea - Horizontal and Vertical Header Tables.

Both tables share one layout: version, ascender, descender, lineGap, ...
and the number of long metrics as the last field at offset 34.
"""

from ..core.error import StreamError
from ..core.stream import Stream

TABLE_SIZE = 36


class MetricsHeader:
    __slots__ = ('ascender', 'descender', 'line_gap', 'number_of_metrics')

    def __init__(self, ascender, descender, line_gap, number_of_metrics):
        self.ascender = ascender
        self.descender = descender
        self.line_gap = line_gap
        self.number_of_metrics = number_of_metrics

    @classmethod
    def parse(cls, data):
        if len(data) < TABLE_SIZE:
            return None
        try:
            s = Stream(data, 4)
            ascender = s.read_i16()
            descender = s.read_i16()
            line_gap = s.read_i16()
            s.offset = 34
            number_of_metrics = s.read_u16()
        except StreamError:
            return None
        return cls(ascender, descender, line_gap, number_of_metrics)

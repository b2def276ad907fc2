# GlyphScope - A TrueType/OpenType Font Parser
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""maxp - Maximum Profile. Only numGlyphs is used."""

from ..core.error import StreamError
from ..core.stream import Stream

VERSION_0_5 = 0x00005000
VERSION_1_0 = 0x00010000


def parse_number_of_glyphs(data):
    """Return numGlyphs, or None when the table is invalid or declares zero glyphs."""
    try:
        s = Stream(data)
        version = s.read_u32()
        if version not in (VERSION_0_5, VERSION_1_0):
            return None
        n = s.read_u16()
    except StreamError:
        return None
    return n if n > 0 else None

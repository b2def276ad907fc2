# GlyphScope - A TrueType/OpenType Font Parser
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

"""GDEF - Glyph Definition Table (classes, mark attachment, mark glyph sets)."""

import logging

from ..core.error import StreamError
from ..core.stream import Stream
from ..core.types import GlyphClass
from .otlayout import ClassDefinitionTable, CoverageTable

logger = logging.getLogger(__name__)

_VERSIONS = (0x00010000, 0x00010002, 0x00010003)


class GDEFTable:
    __slots__ = ('glyph_classes', 'mark_attach_classes', 'mark_sets_data', 'mark_set_offsets')

    def __init__(self):
        self.glyph_classes = None
        self.mark_attach_classes = None
        self.mark_sets_data = None
        self.mark_set_offsets = ()

    @classmethod
    def parse(cls, data):
        table = cls()
        try:
            s = Stream(data)
            version = s.read_u32()
            if version not in _VERSIONS:
                logger.warning("Unsupported GDEF version 0x%08x", version)
                return None
            glyph_class_def = s.read_u16()
            s.skip(4)  # attachListOffset, ligCaretListOffset
            mark_attach_class_def = s.read_u16()
            mark_glyph_sets_def = s.read_u16() if version > 0x00010000 else 0

            if 0 < glyph_class_def <= len(data):
                table.glyph_classes = ClassDefinitionTable(data[glyph_class_def:])
            if 0 < mark_attach_class_def <= len(data):
                table.mark_attach_classes = ClassDefinitionTable(data[mark_attach_class_def:])
            if 0 < mark_glyph_sets_def <= len(data):
                sets = Stream(data, mark_glyph_sets_def)
                if sets.read_u16() == 1:
                    count = sets.read_u16()
                    table.mark_set_offsets = sets.read_array('I', count)
                    table.mark_sets_data = data[mark_glyph_sets_def:]
        except StreamError:
            return None
        return table

    def glyph_class(self, glyph_id: int) -> GlyphClass:
        if self.glyph_classes is None:
            return GlyphClass.UNKNOWN
        value = self.glyph_classes.get(glyph_id)
        if 1 <= value <= 4:
            return GlyphClass(value)
        return GlyphClass.UNKNOWN

    def glyph_mark_attachment_class(self, glyph_id: int) -> int:
        if self.mark_attach_classes is None:
            return 0
        return self.mark_attach_classes.get(glyph_id)

    def is_mark_glyph(self, glyph_id: int, set_index: int | None = None) -> bool:
        """Check the glyph against one mark glyph set, or every set when no index is given."""
        if self.mark_sets_data is None:
            return False
        if set_index is not None:
            if not 0 <= set_index < len(self.mark_set_offsets):
                return False
            offsets = (self.mark_set_offsets[set_index],)
        else:
            offsets = self.mark_set_offsets
        for offset in offsets:
            if offset >= len(self.mark_sets_data):
                continue
            if CoverageTable(self.mark_sets_data[offset:]).contains(glyph_id):
                return True
        return False

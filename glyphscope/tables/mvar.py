# GlyphScope - A TrueType/OpenType Font Parser
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
MVAR - Metrics Variations Table

Value records (Tag valueTag, u16 deltaSetOuterIndex, u16
deltaSetInnerIndex) are sorted by tag and point into the item variation
store. Common tags: 'hasc' ascender, 'hdsc' descender, 'xhgt' x-height,
'undo' underline offset, 'strs' strikeout size.
"""

import logging

from ..core.error import StreamError
from ..core.stream import Stream
from ..core.types import make_tag
from ..core.variation_store import ItemVariationStore

logger = logging.getLogger(__name__)


class MvarTable:
    __slots__ = ('store', 'records')

    def __init__(self, store, records):
        self.store = store
        self.records = records

    @classmethod
    def parse(cls, data):
        try:
            s = Stream(data)
            if s.read_u16() != 1:
                return None
            s.skip(4)  # minorVersion, reserved
            record_size = s.read_u16()
            record_count = s.read_u16()
            store_offset = s.read_u16()
            if record_size < 8:
                return None

            records = {}
            for i in range(record_count):
                rs = Stream(data, s.offset + i * record_size)
                tag = rs.read_tag()
                outer = rs.read_u16()
                inner = rs.read_u16()
                records.setdefault(tag, (outer, inner))

            if store_offset == 0:
                return None
            store = ItemVariationStore.parse(data, store_offset)
        except StreamError as e:
            logger.warning("Invalid MVAR table: %s", e)
            return None
        return cls(store, records)

    def metric_delta(self, tag, coords):
        """Return the delta for `tag`, or None when the tag has no record."""
        record = self.records.get(make_tag(tag))
        if record is None:
            return None
        return self.store.delta(record[0], record[1], coords)

# GlyphScope - A TrueType/OpenType Font Parser
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

"""
HVAR / VVAR - Horizontal and Vertical Metrics Variations

Both start with u16 majorVersion, u16 minorVersion, Offset32
itemVariationStoreOffset, Offset32 advanceMappingOffset, Offset32
firstSideBearingMappingOffset. Without an advance mapping the glyph id is
the inner index into ItemVariationData 0. Side bearing deltas are only
available through an explicit mapping.
"""

import logging

from ..core.error import StreamError
from ..core.stream import Stream
from ..core.variation_store import DeltaSetIndexMap, ItemVariationStore

logger = logging.getLogger(__name__)


class MetricsVariationTable:
    __slots__ = ('store', 'advance_map', 'side_bearing_map')

    def __init__(self, store, advance_map, side_bearing_map):
        self.store = store
        self.advance_map = advance_map
        self.side_bearing_map = side_bearing_map

    @classmethod
    def parse(cls, data):
        try:
            s = Stream(data)
            if s.read_u16() != 1:
                return None
            s.skip(2)  # minorVersion
            store_offset = s.read_u32()
            advance_offset = s.read_u32()
            side_bearing_offset = s.read_u32()

            store = ItemVariationStore.parse(data, store_offset)
            advance_map = DeltaSetIndexMap(data, advance_offset) if advance_offset else None
            side_bearing_map = (DeltaSetIndexMap(data, side_bearing_offset)
                                if side_bearing_offset else None)
        except StreamError as e:
            logger.warning("Invalid metrics variations table: %s", e)
            return None
        return cls(store, advance_map, side_bearing_map)

    def advance_delta(self, glyph_id: int, coords) -> float:
        if self.advance_map is not None:
            outer, inner = self.advance_map.map(glyph_id)
        else:
            outer, inner = 0, glyph_id
        return self.store.delta(outer, inner, coords)

    def side_bearing_delta(self, glyph_id: int, coords) -> float | None:
        if self.side_bearing_map is None:
            return None
        outer, inner = self.side_bearing_map.map(glyph_id)
        return self.store.delta(outer, inner, coords)

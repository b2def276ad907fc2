# GlyphScope - A TrueType/OpenType Font Parser
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
avar - Axis Variations Table

One SegmentMap per fvar axis, each a list of (fromCoordinate,
toCoordinate) F2Dot14 pairs. Segments are used in the order they are
stored; a map that is not sorted by fromCoordinate is not repaired.
"""

import logging

from ..core.error import StreamError
from ..core.stream import Stream

logger = logging.getLogger(__name__)


class AvarTable:
    __slots__ = ('segment_maps',)

    def __init__(self, segment_maps):
        self.segment_maps = segment_maps

    @classmethod
    def parse(cls, data):
        try:
            s = Stream(data)
            if s.read_u16() != 1:
                return None
            s.skip(4)  # minorVersion, reserved
            axis_count = s.read_u16()
            segment_maps = []
            for _ in range(axis_count):
                count = s.read_u16()
                values = s.read_array('h', count * 2)
                segment_maps.append(list(zip(values[0::2], values[1::2])))
        except StreamError:
            return None
        return cls(segment_maps)

    def map_coordinates(self, coords):
        """Apply each axis' segment map to normalized F2Dot14 coordinates.

        Returns None when the axis count differs from the coordinate count.
        """
        if len(coords) != len(self.segment_maps):
            logger.debug("avar has %d segment maps for %d coordinates",
                         len(self.segment_maps), len(coords))
            return None
        return [map_value(segments, value)
                for segments, value in zip(self.segment_maps, coords)]


def map_value(segments, value):
    if not segments:
        return value
    if len(segments) == 1:
        from_0, to_0 = segments[0]
        return value - from_0 + to_0

    from_0, to_0 = segments[0]
    if value <= from_0:
        return value - from_0 + to_0

    i = 1
    while i < len(segments) and value > segments[i][0]:
        i += 1
    if i == len(segments):
        from_n, to_n = segments[-1]
        return value - from_n + to_n

    from_1, to_1 = segments[i]
    if value == from_1:
        return to_1
    from_0, to_0 = segments[i - 1]
    if from_1 == from_0:
        return to_0
    return to_0 + int(round((to_1 - to_0) * (value - from_0) / (from_1 - from_0)))

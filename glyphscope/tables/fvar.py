# GlyphScope - A TrueType/OpenType Font Parser
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

"""
fvar - Font Variations Table

Axis records are 20 bytes: Tag axisTag, Fixed minValue, Fixed defaultValue,
Fixed maxValue, u16 flags, u16 axisNameID. Named instances are not read.
"""

import logging

from ..core.error import StreamError
from ..core.stream import Stream
from ..core.types import VariationAxis, make_tag

logger = logging.getLogger(__name__)

AXIS_RECORD_SIZE = 20
HIDDEN_AXIS = 0x0001


class FvarTable:
    __slots__ = ('axes',)

    def __init__(self, axes):
        self.axes = axes

    @classmethod
    def parse(cls, data):
        try:
            s = Stream(data)
            if s.read_u16() != 1:
                return None
            s.skip(2)  # minorVersion
            axes_offset = s.read_u16()
            s.skip(2)  # reserved
            axis_count = s.read_u16()
            axis_size = s.read_u16()
            if axis_count == 0 or axis_size != AXIS_RECORD_SIZE:
                return None

            s.offset = axes_offset
            axes = []
            for _ in range(axis_count):
                tag = s.read_tag()
                min_value = s.read_fixed()
                def_value = s.read_fixed()
                max_value = s.read_fixed()
                flags = s.read_u16()
                name_id = s.read_u16()
                if not min_value <= def_value <= max_value:
                    logger.warning("fvar axis %r has min/default/max out of order", tag)
                    return None
                axes.append(VariationAxis(tag, min_value, def_value, max_value,
                                          name_id, bool(flags & HIDDEN_AXIS)))
        except StreamError:
            return None
        return cls(axes)

    def axis(self, index: int) -> VariationAxis | None:
        if 0 <= index < len(self.axes):
            return self.axes[index]
        return None

    def axis_by_tag(self, tag) -> VariationAxis | None:
        tag = make_tag(tag)
        for axis in self.axes:
            if axis.tag == tag:
                return axis
        return None

    def normalize(self, user_coords) -> list[int] | None:
        """Map user-space axis values to F2Dot14 integers in [-16384, 16384]."""
        if len(user_coords) != len(self.axes):
            return None
        normalized = []
        for axis, value in zip(self.axes, user_coords):
            value = max(axis.min_value, min(axis.max_value, float(value)))
            if value < axis.def_value:
                n = (value - axis.def_value) / (axis.def_value - axis.min_value)
            elif value > axis.def_value:
                n = (value - axis.def_value) / (axis.max_value - axis.def_value)
            else:
                n = 0.0
            normalized.append(int(round(n * 16384.0)))
        return normalized

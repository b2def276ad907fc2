# GlyphScope - A TrueType/OpenType Font Parser
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

"""
OS/2 - OS/2 and Windows Metrics Table

Style flags come from fsSelection:
  bit 0 ITALIC, bit 5 BOLD, bit 6 REGULAR, bit 9 OBLIQUE (version 4+)
"""

import struct

from ..core.types import LineMetrics, ScriptMetrics

DEFAULT_WEIGHT = 400
DEFAULT_WIDTH = 5

_MIN_SIZE_V0 = 78
_MIN_SIZE_V1 = 86
_MIN_SIZE_V2 = 96

_FS_ITALIC = 1 << 0
_FS_BOLD = 1 << 5
_FS_REGULAR = 1 << 6
_FS_USE_TYPO_METRICS = 1 << 7
_FS_OBLIQUE = 1 << 9


class OS2Table:
    __slots__ = ('data', 'version')

    def __init__(self, data, version):
        self.data = data
        self.version = version

    @classmethod
    def parse(cls, data):
        if len(data) < 2:
            return None
        version = struct.unpack_from('>H', data, 0)[0]
        if version > 5:
            return None
        if version >= 2:
            min_size = _MIN_SIZE_V2
        elif version == 1:
            min_size = _MIN_SIZE_V1
        else:
            min_size = _MIN_SIZE_V0
        if len(data) < min_size:
            return None
        return cls(data, version)

    def _u16(self, offset):
        return struct.unpack_from('>H', self.data, offset)[0]

    def _i16(self, offset):
        return struct.unpack_from('>h', self.data, offset)[0]

    def weight(self) -> int:
        return self._u16(4)

    def width(self) -> int:
        value = self._u16(6)
        return value if 1 <= value <= 9 else DEFAULT_WIDTH

    def subscript_metrics(self) -> ScriptMetrics:
        return ScriptMetrics(self._i16(10), self._i16(12), self._i16(14), self._i16(16))

    def superscript_metrics(self) -> ScriptMetrics:
        return ScriptMetrics(self._i16(18), self._i16(20), self._i16(22), self._i16(24))

    def strikeout_metrics(self) -> LineMetrics:
        return LineMetrics(position=self._i16(28), thickness=self._i16(26))

    def _fs_selection(self) -> int:
        return self._u16(62)

    def is_regular(self) -> bool:
        return bool(self._fs_selection() & _FS_REGULAR)

    def is_italic(self) -> bool:
        return bool(self._fs_selection() & _FS_ITALIC)

    def is_bold(self) -> bool:
        return bool(self._fs_selection() & _FS_BOLD)

    def is_oblique(self) -> bool:
        if self.version < 4:
            return False
        return bool(self._fs_selection() & _FS_OBLIQUE)

    def use_typo_metrics(self) -> bool:
        return bool(self._fs_selection() & _FS_USE_TYPO_METRICS)

    def typo_ascender(self) -> int:
        return self._i16(68)

    def typo_descender(self) -> int:
        return self._i16(70)

    def typo_line_gap(self) -> int:
        return self._i16(72)

    def x_height(self) -> int | None:
        if self.version < 2:
            return None
        return self._i16(86)

    def cap_height(self) -> int | None:
        if self.version < 2:
            return None
        return self._i16(88)

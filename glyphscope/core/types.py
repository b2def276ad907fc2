# GlyphScope - A TrueType/OpenType Font Parser
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

"""
Value types returned by font queries.

Tags are plain 4-byte ``bytes`` objects (b'glyf', b'OS/2'), matching the
way the table directory stores them. Everything here is transient and
owned by the caller.
"""

import enum
from dataclasses import dataclass


def make_tag(value: str | bytes | int) -> bytes:
    """Normalize a tag given as str, bytes or a big-endian uint32."""
    if isinstance(value, int):
        return (value & 0xFFFFFFFF).to_bytes(4, 'big')
    if isinstance(value, str):
        value = value.encode('latin-1')
    value = bytes(value[:4])
    # Short tags are space padded, like 'CFF '
    return value + b' ' * (4 - len(value))


def tag_to_str(tag: bytes) -> str:
    return tag.decode('latin-1')


class TableName(enum.Enum):
    """Tables that has_table() can report on."""
    AXIS_VARIATIONS = b'avar'
    CHARACTER_TO_GLYPH_INDEX_MAPPING = b'cmap'
    COMPACT_FONT_FORMAT = b'CFF '
    COMPACT_FONT_FORMAT_2 = b'CFF2'
    FONT_VARIATIONS = b'fvar'
    GLYPH_DATA = b'glyf'
    GLYPH_DEFINITION = b'GDEF'
    GLYPH_VARIATIONS = b'gvar'
    HEADER = b'head'
    HORIZONTAL_HEADER = b'hhea'
    HORIZONTAL_METRICS = b'hmtx'
    HORIZONTAL_METRICS_VARIATIONS = b'HVAR'
    INDEX_TO_LOCATION = b'loca'
    KERNING = b'kern'
    MAXIMUM_PROFILE = b'maxp'
    METRICS_VARIATIONS = b'MVAR'
    NAMING = b'name'
    POST_SCRIPT = b'post'
    VERTICAL_HEADER = b'vhea'
    VERTICAL_METRICS = b'vmtx'
    VERTICAL_METRICS_VARIATIONS = b'VVAR'
    VERTICAL_ORIGIN = b'VORG'
    WINDOWS_METRICS = b'OS/2'


class GlyphClass(enum.IntEnum):
    """GDEF glyph class. UNKNOWN covers unclassified glyphs and a missing GDEF."""
    UNKNOWN = 0
    BASE = 1
    LIGATURE = 2
    MARK = 3
    COMPONENT = 4


@dataclass(frozen=True)
class Rect:
    """Glyph bounding box in font design units (int16)."""
    x_min: int
    y_min: int
    x_max: int
    y_max: int

    def width(self) -> int:
        return self.x_max - self.x_min

    def height(self) -> int:
        return self.y_max - self.y_min


@dataclass(frozen=True)
class LineMetrics:
    """Underline or strikeout position and thickness."""
    position: int
    thickness: int


@dataclass(frozen=True)
class ScriptMetrics:
    """Subscript or superscript size and offset."""
    x_size: int
    y_size: int
    x_offset: int
    y_offset: int


@dataclass(frozen=True)
class NameRecord:
    """Fixed metadata of a name table record.

    The string bytes are fetched separately and are not decoded; their
    encoding depends on platform_id/encoding_id.
    """
    platform_id: int
    encoding_id: int
    language_id: int
    name_id: int
    name_size: int


@dataclass(frozen=True)
class VariationAxis:
    """An fvar axis record. Values are in user space."""
    tag: bytes
    min_value: float
    def_value: float
    max_value: float
    name_id: int
    hidden: bool


class OutlineBuilder:
    """Receiver for glyph path segments.

    Subclass and override the five methods. Coordinates are floats in font
    design units. A failed outline call may already have invoked some of
    these methods; everything received during that call must be discarded.
    """

    def move_to(self, x: float, y: float) -> None:
        pass

    def line_to(self, x: float, y: float) -> None:
        pass

    def quad_to(self, x1: float, y1: float, x: float, y: float) -> None:
        pass

    def curve_to(self, x1: float, y1: float, x2: float, y2: float, x: float, y: float) -> None:
        pass

    def close(self) -> None:
        pass


# Path event tags used by RecordingBuilder
MOVE_TO = 'M'
LINE_TO = 'L'
QUAD_TO = 'Q'
CURVE_TO = 'C'
CLOSE_PATH = 'Z'

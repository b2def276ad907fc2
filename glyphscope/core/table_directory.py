# GlyphScope - A TrueType/OpenType Font Parser
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

"""
Table Directory Parser

Reads the sfnt offset table (or a TTC header followed by the selected
sub-font's offset table) and produces a tag -> byte range mapping.

Table offsets in a collection are relative to the start of the whole file,
so ranges are validated against the full buffer. A sub-font only ever sees
the records listed in its own offset table.
"""

import logging

from .error import StreamError
from .stream import Stream, as_view, read_at

logger = logging.getLogger(__name__)

SFNT_VERSION_TRUE_TYPE = 0x00010000
SFNT_VERSION_OPEN_TYPE = 0x4F54544F   # 'OTTO'
SFNT_VERSION_APPLE = 0x74727565       # 'true'
TTC_TAG = b'ttcf'

_TABLE_RECORD_SIZE = 16
_TTC_HEADER_SIZE = 12

INT32_MAX = 2 ** 31 - 1


def fonts_in_collection(data) -> int | None:
    """Return the number of fonts in a TrueType collection.

    Returns None when data is not a collection.
    """
    view = as_view(data)
    if len(view) < _TTC_HEADER_SIZE or bytes(view[0:4]) != TTC_TAG:
        return None
    return read_at(view, '>I', 8)


class TableDirectory:
    """Validated tag -> (offset, length) mapping for one font."""
    __slots__ = ('data', 'sfnt_version', 'records', 'font_offset')

    def __init__(self, data, sfnt_version: int, font_offset: int) -> None:
        self.data = data
        self.sfnt_version = sfnt_version
        self.font_offset = font_offset
        self.records: dict[bytes, tuple[int, int]] = {}

    def tags(self) -> list[bytes]:
        return list(self.records)

    def table(self, tag: bytes):
        """Return the table's bytes as a memoryview, or None if absent."""
        record = self.records.get(tag)
        if record is None:
            return None
        offset, length = record
        return self.data[offset:offset + length]


def parse_table_directory(data, index: int = 0) -> TableDirectory | None:
    """Parse the offset table of the font at `index`.

    Returns None when the signature is unknown, the collection index is out
    of range or the record array is truncated. The index is ignored for a
    font that is not a collection.
    """
    view = as_view(data)

    font_offset = 0
    try:
        count = fonts_in_collection(view)
        if count is not None:
            if index < 0 or index >= count:
                logger.warning("Font index %d out of range for collection of %d", index, count)
                return None
            font_offset = read_at(view, '>I', _TTC_HEADER_SIZE + 4 * index)
        # A single font ignores the index.

        s = Stream(view, font_offset)
        sfnt_version = s.read_u32()
        if sfnt_version not in (SFNT_VERSION_TRUE_TYPE, SFNT_VERSION_OPEN_TYPE,
                                SFNT_VERSION_APPLE):
            return None

        num_tables = s.read_u16()
        s.skip(6)  # searchRange, entrySelector, rangeShift
        if s.remaining() < num_tables * _TABLE_RECORD_SIZE:
            logger.warning("Table directory truncated: %d records declared", num_tables)
            return None

        directory = TableDirectory(view, sfnt_version, font_offset)
        for _ in range(num_tables):
            tag = s.read_tag()
            s.skip(4)  # checksum
            tbl_offset = s.read_u32()
            tbl_length = s.read_u32()

            if tag in directory.records:
                # First occurrence wins
                logger.debug("Duplicate table record %r ignored", tag)
                continue
            if tbl_offset + tbl_length > len(view):
                logger.warning("Table %r range %d+%d is out of bounds, skipped",
                               tag, tbl_offset, tbl_length)
                continue
            directory.records[tag] = (tbl_offset, tbl_length)
    except StreamError:
        return None

    return directory

# GlyphScope - A TrueType/OpenType Font Parser
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

"""
name - Naming Table

Records are returned undecoded; callers pick the encoding from
platform_id/encoding_id. The family_name/post_script_name helpers decode
the best English record: Windows or Unicode platform as UTF-16BE,
Macintosh Roman as mac_roman.
"""

import logging
import struct

from ..core.error import StreamError
from ..core.stream import Stream
from ..core.types import NameRecord

logger = logging.getLogger(__name__)

PLATFORM_UNICODE = 0
PLATFORM_MACINTOSH = 1
PLATFORM_WINDOWS = 3
PLATFORM_CUSTOM = 4

NAME_ID_FAMILY = 1
NAME_ID_POST_SCRIPT_NAME = 6

_WINDOWS_ENGLISH_US = 0x0409
_MAC_ENGLISH = 0

_RECORD_SIZE = 12


class NameTable:
    __slots__ = ('data', 'count', 'storage_offset')

    def __init__(self, data, count, storage_offset):
        self.data = data
        self.count = count
        self.storage_offset = storage_offset

    @classmethod
    def parse(cls, data):
        try:
            s = Stream(data)
            fmt = s.read_u16()
            count = s.read_u16()
            storage_offset = s.read_u16()
            if fmt not in (0, 1):
                logger.warning("Unknown name table format %d", fmt)
                return None
            # All records must be present
            s.read_bytes(count * _RECORD_SIZE)
        except StreamError:
            return None
        return cls(data, count, storage_offset)

    def _raw_record(self, index):
        return struct.unpack_from('>HHHHHH', self.data, 6 + index * _RECORD_SIZE)

    def record(self, index: int) -> NameRecord | None:
        if not 0 <= index < self.count:
            return None
        platform_id, encoding_id, language_id, name_id, length, _offset = self._raw_record(index)
        if platform_id > PLATFORM_CUSTOM:
            return None
        return NameRecord(platform_id, encoding_id, language_id, name_id, length)

    def record_bytes(self, index: int):
        """Return the record's raw string bytes, or None when out of range."""
        if self.record(index) is None:
            return None
        _p, _e, _l, _n, length, offset = self._raw_record(index)
        start = self.storage_offset + offset
        if start + length > len(self.data):
            return None
        return bytes(self.data[start:start + length])

    def find_name(self, name_id: int) -> str | None:
        """Decode the preferred English record with `name_id`."""
        mac_name = None
        unicode_name = None
        for index in range(self.count):
            record = self.record(index)
            if record is None or record.name_id != name_id:
                continue
            raw = self.record_bytes(index)
            if raw is None:
                continue

            if record.platform_id == PLATFORM_WINDOWS and record.language_id == _WINDOWS_ENGLISH_US:
                try:
                    return raw.decode('utf-16-be')
                except UnicodeDecodeError:
                    continue
            elif record.platform_id == PLATFORM_UNICODE and unicode_name is None:
                try:
                    unicode_name = raw.decode('utf-16-be')
                except UnicodeDecodeError:
                    continue
            elif (record.platform_id == PLATFORM_MACINTOSH and record.encoding_id == 0
                    and record.language_id == _MAC_ENGLISH and mac_name is None):
                mac_name = raw.decode('mac_roman')

        return unicode_name if unicode_name is not None else mac_name
